"""Runtime configuration via environment variables.

Configuration is an explicit value: callers build one ``AppConfig`` (usually
with :meth:`AppConfig.from_env`) and pass it to the client, the analyzer and
the batch orchestrator. There is no process-wide singleton.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


def _resolve_api_key() -> str:
    """Prefer GEMINI_API_KEY, fall back to GOOGLE_GENAI_API_KEY."""
    for var in ("GEMINI_API_KEY", "GOOGLE_GENAI_API_KEY"):
        value = os.getenv(var, "").strip()
        if value:
            return value
    return ""


def _resolve_tracing_enabled(flag_value: str, tracking_uri: str) -> bool:
    """Derive tracing_enabled from env vars.

    - ``VIDEO_APPROVAL_TRACING_ENABLED=false`` → always disabled.
    - Otherwise enabled when ``MLFLOW_TRACKING_URI`` is non-empty.
    """
    if flag_value.lower() == "false":
        return False
    return bool(tracking_uri)


class AppConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    gemini_api_key: str = Field(default="")
    model: str = Field(default=DEFAULT_MODEL)
    videos_dir: Path = Field(default=Path("videos"))
    output_dir: Path = Field(default=Path("output"))
    download_dir: Path = Field(default=Path("videos"))
    poll_interval: float = Field(default=2.0)
    poll_max_attempts: int | None = Field(default=300)
    pacing_delay: float = Field(default=3.0)
    max_concurrency: int = Field(default=1)
    tracing_enabled: bool = Field(default=False)
    mlflow_tracking_uri: str = Field(default="")
    mlflow_experiment_name: str = Field(default="video-approval")

    @field_validator("poll_interval")
    @classmethod
    def validate_poll_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("poll_interval must be > 0")
        return value

    @field_validator("pacing_delay")
    @classmethod
    def validate_pacing_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("pacing_delay must be >= 0")
        return value

    @field_validator("poll_max_attempts")
    @classmethod
    def validate_poll_max_attempts(cls, value: int | None) -> int | None:
        # 0 disables the cap: poll until the file is ACTIVE or FAILED.
        if value is None or value == 0:
            return None
        if value < 0:
            raise ValueError("poll_max_attempts must be >= 0")
        return value

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_concurrency must be >= 1")
        return value

    @classmethod
    def from_env(cls, *, load_env_files: bool = True) -> AppConfig:
        """Build config from environment variables.

        Loads ``./.env`` and ``~/.config/video-approval/.env`` first (unless
        *load_env_files* is False). Process environment always wins.
        """
        if load_env_files:
            from .dotenv import load_dotenv

            injected = load_dotenv()
            if injected:
                logger.info(
                    "Loaded %d var(s) from config: %s",
                    len(injected),
                    ", ".join(injected.keys()),
                )

        return cls(
            gemini_api_key=_resolve_api_key(),
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            videos_dir=Path(os.getenv("VIDEO_APPROVAL_VIDEOS_DIR", "videos")),
            output_dir=Path(os.getenv("VIDEO_APPROVAL_OUTPUT_DIR", "output")),
            download_dir=Path(os.getenv("VIDEO_APPROVAL_DOWNLOAD_DIR", "videos")),
            poll_interval=float(os.getenv("VIDEO_APPROVAL_POLL_INTERVAL", "2.0")),
            poll_max_attempts=int(os.getenv("VIDEO_APPROVAL_POLL_MAX_ATTEMPTS", "300")),
            pacing_delay=float(os.getenv("VIDEO_APPROVAL_PACING_DELAY", "3.0")),
            max_concurrency=int(os.getenv("VIDEO_APPROVAL_MAX_CONCURRENCY", "1")),
            tracing_enabled=_resolve_tracing_enabled(
                os.getenv("VIDEO_APPROVAL_TRACING_ENABLED", ""),
                os.getenv("MLFLOW_TRACKING_URI", ""),
            ),
            mlflow_tracking_uri=os.getenv("MLFLOW_TRACKING_URI", ""),
            mlflow_experiment_name=os.getenv("MLFLOW_EXPERIMENT_NAME", "video-approval"),
        )

    def with_overrides(self, **overrides: object) -> AppConfig:
        """Return a copy with non-None *overrides* applied and re-validated."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return AppConfig(**data)
