"""YouTube URL validation and download via the yt-dlp Python API.

yt-dlp is synchronous; every call runs in ``asyncio.to_thread`` so the event
loop stays free. The downloaded file is named after the video title.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlparse

import yt_dlp

from ..errors import DownloadError, FilesystemError, InvalidSourceError
from ..models.verdict import SourceKind, VideoAsset

logger = logging.getLogger(__name__)

# Highest-quality single file that carries both audio and video.
_FORMAT = "best[ext=mp4][acodec!=none][vcodec!=none]/best[acodec!=none][vcodec!=none]"

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")
_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9]")
MAX_STEM_LENGTH = 50

ProgressCallback = Callable[[float], None]


def _is_youtube_host(host: str) -> bool:
    """Check if host is a youtube.com domain (including www., m., music.)."""
    return host == "youtube.com" or host.endswith(".youtube.com")


def _is_youtu_be_host(host: str) -> bool:
    """Check if host is the youtu.be short-link domain."""
    return host in ("youtu.be", "www.youtu.be")


def extract_video_id(url: str) -> str:
    """Return the 11-character video ID of a YouTube URL.

    Handles multiple URL formats:
    - youtu.be/<id> (short links)
    - youtube.com/watch?v=<id> (standard)
    - youtube.com/shorts/<id>, /embed/<id>, /live/<id>, /v/<id> (path-based)

    Raises:
        InvalidSourceError: If the URL is not a recognized YouTube video URL.
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        raise InvalidSourceError(f"Invalid YouTube URL: {url}")
    host = parsed.netloc.lower().split(":", 1)[0]

    video_id: str | None = None
    if _is_youtu_be_host(host):
        video_id = parsed.path.strip("/").split("/", 1)[0] or None
    elif _is_youtube_host(host):
        video_id = parse_qs(parsed.query).get("v", [None])[0]
        if not video_id:
            parts = [p for p in parsed.path.split("/") if p]
            if len(parts) >= 2 and parts[0] in {"shorts", "embed", "live", "v"}:
                video_id = parts[1]

    if not video_id or not _VIDEO_ID_RE.match(video_id):
        raise InvalidSourceError(f"Invalid YouTube URL: {url}")
    return video_id


def safe_filename(title: str, ext: str = ".mp4") -> str:
    """Derive a filesystem-safe file name from a video title.

    Every character other than ASCII letters and digits becomes ``_``; the
    stem is cut to 50 characters before *ext* is appended.
    """
    return _UNSAFE_CHARS_RE.sub("_", title)[:MAX_STEM_LENGTH] + ext


def _fetch_info(url: str) -> dict[str, Any]:
    opts = {"quiet": True, "no_warnings": True, "noplaylist": True}
    with yt_dlp.YoutubeDL(opts) as ydl:
        return ydl.extract_info(url, download=False)


def _download(
    url: str,
    output_path: Path,
    progress: ProgressCallback | None,
    cancelled: threading.Event | None = None,
) -> None:
    """Stream *url* into *output_path*, raising DownloadError on any failure.

    Setting *cancelled* aborts the transfer at the next progress update;
    yt-dlp stops when a progress hook raises ``DownloadCancelled``.
    """
    finished = False

    def _hook(status: dict[str, Any]) -> None:
        nonlocal finished
        if cancelled is not None and cancelled.is_set():
            raise yt_dlp.utils.DownloadCancelled("Download cancelled")
        if status.get("status") == "downloading":
            downloaded = status.get("downloaded_bytes") or 0
            total = status.get("total_bytes") or status.get("total_bytes_estimate")
            if total:
                fraction = min(downloaded / total, 1.0)
                logger.debug("Downloaded: %.2f%%", fraction * 100)
                if progress is not None:
                    progress(fraction)
        elif status.get("status") == "finished":
            finished = True

    opts = {
        "format": _FORMAT,
        "outtmpl": {"default": str(output_path).replace("%", "%%")},
        "noplaylist": True,
        "quiet": True,
        "no_warnings": True,
        "noprogress": True,
        "overwrites": True,
        "progress_hooks": [_hook],
    }
    try:
        with yt_dlp.YoutubeDL(opts) as ydl:
            retcode = ydl.download([url])
    except (yt_dlp.utils.YoutubeDLError, OSError) as exc:
        raise DownloadError(f"Download failed for {url}: {exc}") from exc

    if retcode:
        raise DownloadError(f"yt-dlp exited with code {retcode} for {url}")
    if not finished or not output_path.is_file():
        raise DownloadError(f"Download did not complete: {output_path}")


async def fetch_remote_video(
    url: str,
    download_dir: str | Path,
    *,
    progress: ProgressCallback | None = None,
) -> VideoAsset:
    """Download a YouTube video into *download_dir* and return it as an asset.

    Args:
        url: YouTube video URL.
        download_dir: Destination directory, created if absent.
        progress: Optional callback receiving the downloaded fraction (0-1).

    Returns:
        A ``DOWNLOADED_REMOTE`` asset named after the video title.

    Raises:
        InvalidSourceError: The URL is not a YouTube video URL.
        DownloadError: Metadata lookup or the transfer failed. A partial
            file may be left on disk.
        FilesystemError: The download directory could not be created.

    Cancelling the awaiting task also aborts the transfer thread.
    """
    video_id = extract_video_id(url)

    logger.info("Validating URL and getting video info...")
    try:
        info = await asyncio.to_thread(_fetch_info, url)
    except (yt_dlp.utils.YoutubeDLError, OSError) as exc:
        raise DownloadError(f"Could not fetch video info for {url}: {exc}") from exc

    title = (info or {}).get("title") or video_id
    duration = (info or {}).get("duration")
    logger.info("Video title: %s", title)
    logger.info("Duration: %s seconds", duration if duration is not None else "unknown")

    dest_dir = Path(download_dir).expanduser()
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Cannot create download directory {dest_dir}: {exc}") from exc

    output_path = dest_dir / safe_filename(title)
    logger.info("Downloading %s → %s", video_id, output_path)
    # The worker thread outlives task cancellation; the event stops it.
    cancelled = threading.Event()
    try:
        await asyncio.to_thread(_download, url, output_path, progress, cancelled)
    except asyncio.CancelledError:
        cancelled.set()
        logger.info("Download of %s interrupted", video_id)
        raise

    size_mb = output_path.stat().st_size / (1024 * 1024)
    logger.info("Download completed: %s (%.1f MB)", output_path, size_mb)
    return VideoAsset(
        name=output_path.name,
        path=output_path,
        source=SourceKind.DOWNLOADED_REMOTE,
        title=title,
        duration_seconds=int(duration) if duration is not None else None,
    )
