"""Shared test fixtures for video-approval."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from video_approval.client import GeminiClient
from video_approval.config import AppConfig

VALID_REPLY = """{
  "summary": "A cat stretches on a sunny windowsill.",
  "checks": {
    "vertical_format": true,
    "no_watermarks": true,
    "no_subtitles": true,
    "single_shot": true,
    "no_talking": true,
    "instrumental_music_only": true,
    "has_background_sound": true,
    "min_8_seconds": true
  },
  "approved": true,
  "reason": ""
}"""


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit real Gemini API."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")
    monkeypatch.delenv("GOOGLE_GENAI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading a real ./.env or ~/.config/video-approval/.env."""
    monkeypatch.setattr(
        "video_approval.dotenv.DEFAULT_ENV_PATHS",
        (tmp_path / "nonexistent.env",),
    )


@pytest.fixture(autouse=True)
def _disable_tracing(monkeypatch):
    """Keep MLflow tracing off unless a test turns it on explicitly."""
    monkeypatch.setenv("VIDEO_APPROVAL_TRACING_ENABLED", "false")
    monkeypatch.setattr("video_approval.tracing._enabled", False)


@pytest.fixture()
def config(tmp_path):
    """AppConfig pointing every directory at tmp_path."""
    return AppConfig(
        gemini_api_key="test-key-not-real",
        videos_dir=tmp_path / "videos",
        output_dir=tmp_path / "output",
        download_dir=tmp_path / "downloads",
        poll_interval=2.0,
        poll_max_attempts=5,
        pacing_delay=3.0,
    )


def _make_file(name="files/abc123", state="ACTIVE",
               uri="https://generativelanguage.googleapis.com/v1beta/files/abc123"):
    """Create a mock File with the attributes the analyzer reads."""
    f = MagicMock()
    f.name = name
    f.state = state
    f.uri = uri
    f.mime_type = "video/mp4"
    return f


@pytest.fixture()
def make_file():
    """Factory for mock Files API objects."""
    return _make_file


@pytest.fixture()
def valid_reply():
    """A well-formed approving model reply."""
    return VALID_REPLY


@pytest.fixture()
def genai_client():
    """A mock ``google.genai.Client`` with async files/models endpoints."""
    client = MagicMock()
    client.aio.files.upload = AsyncMock(return_value=_make_file(state="PROCESSING"))
    client.aio.files.get = AsyncMock(return_value=_make_file(state="ACTIVE"))
    response = MagicMock()
    response.candidates = []
    response.text = VALID_REPLY
    client.aio.models.generate_content = AsyncMock(return_value=response)
    client.aio.aclose = AsyncMock()
    return client


@pytest.fixture()
def gemini(config, genai_client):
    """GeminiClient wrapping the mock genai client."""
    return GeminiClient(config, client=genai_client)


@pytest.fixture()
def no_sleep():
    """Recording replacement for asyncio.sleep."""
    return AsyncMock()
