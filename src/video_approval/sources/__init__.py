"""Video source resolution — local directories and remote YouTube URLs."""

from .local import SUPPORTED_VIDEO_EXTENSIONS, list_local_videos
from .youtube import extract_video_id, fetch_remote_video, safe_filename

__all__ = [
    "SUPPORTED_VIDEO_EXTENSIONS",
    "extract_video_id",
    "fetch_remote_video",
    "list_local_videos",
    "safe_filename",
]
