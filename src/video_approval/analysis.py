"""Approval analysis of one local video — upload, wait for ACTIVE, generate, parse."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path

from google.genai import types
from pydantic import ValidationError

from .client import GeminiClient, file_state
from .config import AppConfig
from .errors import InferenceError, ParseError, PollTimeoutError, UploadError
from .models.verdict import AnalysisVerdict, ParseFailure, ParseOutcome, VerdictParsed
from .polling import SleepFn, wait_for
from .prompts.approval import APPROVAL_PROMPT
from .sources.local import SUPPORTED_VIDEO_EXTENSIONS
from .tracing import trace

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?```$")


def video_mime_type(path: Path) -> str:
    """Return MIME type for a video file, defaulting to video/mp4."""
    return SUPPORTED_VIDEO_EXTENSIONS.get(path.suffix.lower(), "video/mp4")


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json / ``` Markdown fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def _decode_verdict(text: str) -> AnalysisVerdict:
    """Decode cleaned reply text into a verdict.

    Raises:
        ParseError: If the text is not a JSON object of the expected shape.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Reply is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"Reply is a JSON {type(data).__name__}, expected an object")

    try:
        return AnalysisVerdict.model_validate({
            "summary": data.get("summary") or "",
            "checks": data.get("checks") or {},
            "approved": data.get("approved") or False,
            "reason": data.get("reason") or "",
        })
    except ValidationError as exc:
        raise ParseError(f"Reply does not match the verdict schema: {exc}") from exc


def parse_reply(raw_text: str) -> ParseOutcome:
    """Parse a model reply into ``VerdictParsed`` or ``ParseFailure``. Never raises."""
    try:
        return VerdictParsed(verdict=_decode_verdict(strip_code_fences(raw_text or "")))
    except ParseError as exc:
        logger.warning("Failed to parse model reply: %s", exc)
        return ParseFailure(raw_text=raw_text or "", detail=str(exc))


class VideoAnalyzer:
    """Evaluates local videos against the approval criteria with Gemini."""

    def __init__(
        self,
        client: GeminiClient,
        config: AppConfig,
        *,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.client = client
        self.config = config
        self._sleep = sleep

    async def _upload(self, path: Path) -> types.File:
        if not path.is_file():
            raise UploadError(f"Video file not found: {path}")
        try:
            return await self.client.upload(path, video_mime_type(path))
        except Exception as exc:
            raise UploadError(f"Upload failed for {path.name}: {exc}") from exc

    async def _wait_for_active(self, file_name: str) -> types.File:
        """Poll the Files API until *file_name* is ACTIVE."""

        def _is_active(file_info: types.File) -> bool:
            state = file_state(file_info)
            if state == "FAILED":
                raise UploadError(f"File processing failed: {file_name}")
            if state != "ACTIVE":
                logger.info("File state: %s, waiting...", state or "UNKNOWN")
            return state == "ACTIVE"

        async def _probe() -> types.File:
            try:
                return await self.client.get_file(file_name)
            except Exception as exc:
                raise UploadError(f"Status check failed for {file_name}: {exc}") from exc

        try:
            return await wait_for(
                _probe,
                is_done=_is_active,
                interval=self.config.poll_interval,
                max_attempts=self.config.poll_max_attempts,
                sleep=self._sleep,
                description=f"File {file_name} ACTIVE",
            )
        except PollTimeoutError:
            logger.error("Gave up waiting for %s to become ACTIVE", file_name)
            raise

    @trace(name="evaluate_video", span_type="CHAIN")
    async def evaluate(self, video_path: str | Path) -> AnalysisVerdict:
        """Upload one video, wait until it is ACTIVE, and score it.

        Returns:
            The parsed verdict, or a verdict carrying ``error`` and the raw
            reply when the model's answer could not be parsed.

        Raises:
            UploadError: Upload or file processing failed (incl. PollTimeoutError).
            InferenceError: The generate call failed.
        """
        path = Path(video_path)
        uploaded = await self._upload(path)
        logger.info("File uploaded: %s, waiting for processing...", path.name)

        await self._wait_for_active(uploaded.name)
        logger.info("File is now ACTIVE, analyzing video: %s", path.name)

        contents = types.Content(
            role="user",
            parts=[
                types.Part(file_data=types.FileData(
                    file_uri=uploaded.uri,
                    mime_type=video_mime_type(path),
                )),
                types.Part(text=APPROVAL_PROMPT),
            ],
        )
        try:
            raw = await self.client.generate(contents)
        except Exception as exc:
            raise InferenceError(f"Analysis request failed for {path.name}: {exc}") from exc
        logger.debug("Raw reply for %s: %s", path.name, raw)

        outcome = parse_reply(raw)
        if isinstance(outcome, ParseFailure):
            return outcome.to_verdict()
        return outcome.verdict
