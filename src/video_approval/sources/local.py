"""Local video discovery."""

from __future__ import annotations

import logging
from pathlib import Path

from ..models.verdict import SourceKind, VideoAsset

logger = logging.getLogger(__name__)

SUPPORTED_VIDEO_EXTENSIONS: dict[str, str] = {
    ".mp4": "video/mp4",
    ".avi": "video/x-msvideo",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
}


def list_local_videos(directory: str | Path) -> list[VideoAsset]:
    """List video files in *directory*, sorted by name.

    Only regular files with a supported extension (case-insensitive) are
    returned. A missing or unreadable directory is logged and yields ``[]``.
    """
    dir_path = Path(directory).expanduser()
    try:
        entries = sorted(dir_path.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        logger.error("Error reading videos directory %s: %s", dir_path, exc)
        return []

    videos = [
        VideoAsset(name=p.name, path=p, source=SourceKind.LOCAL_FILE)
        for p in entries
        if p.suffix.lower() in SUPPORTED_VIDEO_EXTENSIONS and p.is_file()
    ]
    logger.debug("Found %d video file(s) in %s", len(videos), dir_path)
    return videos
