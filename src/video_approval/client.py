"""Gemini transport — file upload, file status, and content generation.

Thin async wrapper over ``google.genai.Client``. One instance per
``AppConfig``; the API key lives on the instance, not in module state.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from google import genai
from google.genai import types

from .config import AppConfig

logger = logging.getLogger(__name__)


def file_state(file_info: Any) -> str:
    """Return the upper-case state name of a File (enum or plain string)."""
    state = getattr(file_info, "state", None)
    state = getattr(state, "value", state)
    return str(state or "").upper()


class GeminiClient:
    """Gemini API client bound to one configuration."""

    def __init__(self, config: AppConfig, *, client: genai.Client | None = None) -> None:
        self.config = config
        if client is None:
            if not config.gemini_api_key:
                raise ValueError(
                    "No Gemini API key — set GEMINI_API_KEY or GOOGLE_GENAI_API_KEY"
                )
            client = genai.Client(api_key=config.gemini_api_key)
            logger.debug("Created Gemini client (key …%s)", config.gemini_api_key[-4:])
        self._client = client

    async def upload(self, path: Path, mime_type: str) -> types.File:
        """Upload *path* to the Files API tagged with *mime_type*."""
        uploaded = await self._client.aio.files.upload(
            file=path,
            config=types.UploadFileConfig(mime_type=mime_type),
        )
        logger.info("Uploaded %s → %s (state=%s)", path.name, uploaded.name, file_state(uploaded))
        return uploaded

    async def get_file(self, name: str) -> types.File:
        """Fetch the current metadata (including state) of an uploaded file."""
        return await self._client.aio.files.get(name=name)

    async def generate(self, contents: Any, *, model: str | None = None) -> str:
        """Run one generate_content call and return the visible reply text.

        Thinking parts are stripped; only user-visible text is returned.
        """
        response = await self._client.aio.models.generate_content(
            model=model or self.config.model,
            contents=contents,
        )
        parts = response.candidates[0].content.parts if response.candidates else []
        text_parts = [p.text for p in parts or [] if p.text and not getattr(p, "thought", False)]
        return "\n".join(text_parts) if text_parts else (response.text or "")

    async def aclose(self) -> None:
        """Close the underlying HTTP clients."""
        await self._client.aio.aclose()
        self._client.close()
        logger.debug("Closed Gemini client")

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
