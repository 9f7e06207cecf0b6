"""Error hierarchy and classification for remediation hints."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum


class VideoApprovalError(Exception):
    """Base exception for video-approval."""


class InvalidSourceError(VideoApprovalError):
    """The remote video URL does not look like a YouTube video URL."""


class DownloadError(VideoApprovalError):
    """Metadata lookup or streaming download of a remote video failed."""


class UploadError(VideoApprovalError):
    """Uploading a video to Gemini, or waiting for it to become ACTIVE, failed."""


class PollTimeoutError(UploadError):
    """The uploaded file did not become ACTIVE within the allowed attempts."""


class InferenceError(VideoApprovalError):
    """The generate_content call failed."""


class ParseError(VideoApprovalError):
    """The model reply is not a JSON object of the expected shape.

    Only raised inside the reply parser, which turns it into a ParseFailure.
    """


class FilesystemError(VideoApprovalError):
    """A directory could not be created or a report could not be written."""


class ErrorCategory(str, Enum):
    """Failure kinds the CLI can give a targeted hint for."""

    URL_INVALID = "url_invalid"
    FILESYSTEM = "filesystem"
    API_KEY_MISSING = "api_key_missing"
    API_PERMISSION_DENIED = "api_permission_denied"
    VIDEO_RESTRICTED = "video_restricted"
    API_QUOTA_EXCEEDED = "api_quota_exceeded"
    API_INVALID_ARGUMENT = "api_invalid_argument"
    VIDEO_PRIVATE = "video_private"
    VIDEO_UNAVAILABLE = "video_unavailable"
    NETWORK_ERROR = "network_error"
    FILE_NOT_FOUND = "file_not_found"
    UNKNOWN = "unknown"


def _mentions(*needles: str) -> Callable[[Exception, str], bool]:
    return lambda _error, text: any(n in text for n in needles)


def _is(*classes: type[BaseException]) -> Callable[[Exception, str], bool]:
    return lambda error, _text: isinstance(error, classes)


# First match wins, so the order matters: 403+permission before bare 403.
_RULES: tuple[tuple[Callable[[Exception, str], bool], ErrorCategory, str], ...] = (
    (_is(InvalidSourceError), ErrorCategory.URL_INVALID,
     "Make sure the YouTube URL is valid (watch?v=, shorts/, or youtu.be/ links)"),
    (_is(FilesystemError), ErrorCategory.FILESYSTEM,
     "Check that the output and download directories are writable"),
    (_mentions("no gemini api key"), ErrorCategory.API_KEY_MISSING,
     "Set GEMINI_API_KEY (or GOOGLE_GENAI_API_KEY) in the environment or a .env file"),
    (lambda _e, s: "403" in s and "permission" in s, ErrorCategory.API_PERMISSION_DENIED,
     "The API key is not allowed to use this model or the Files API"),
    (_mentions("403"), ErrorCategory.VIDEO_RESTRICTED,
     "Access denied: the video may be age-restricted, region-locked or need a login"),
    (_mentions("429", "quota", "resource_exhausted"), ErrorCategory.API_QUOTA_EXCEEDED,
     "Gemini rate limit reached; wait a minute or raise VIDEO_APPROVAL_PACING_DELAY"),
    (_mentions("400"), ErrorCategory.API_INVALID_ARGUMENT,
     "Gemini rejected the request; check that the file is a supported video format"),
    (_mentions("private"), ErrorCategory.VIDEO_PRIVATE,
     "The video is private and cannot be downloaded without signing in"),
    (_mentions("404", "unavailable"), ErrorCategory.VIDEO_UNAVAILABLE,
     "Check if the video is available in your region and has not been deleted"),
    (lambda e, s: isinstance(e, TimeoutError) or "timeout" in s or "timed out" in s,
     ErrorCategory.NETWORK_ERROR, "The request timed out; check connectivity and retry"),
    (lambda e, s: isinstance(e, FileNotFoundError) or "not found" in s,
     ErrorCategory.FILE_NOT_FOUND, "The video file is missing; check the videos directory"),
    (_is(DownloadError), ErrorCategory.NETWORK_ERROR,
     "Try updating yt-dlp: pip install -U yt-dlp"),
)


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Classify *error* and return its category with a remediation hint.

    Unrecognised errors map to ``UNKNOWN`` with the error message as hint.
    """
    text = str(error).lower()
    for matches, category, hint in _RULES:
        if matches(error, text):
            return category, hint
    return ErrorCategory.UNKNOWN, str(error)
