"""Speech-to-text client for ElevenLabs."""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel

from krishimitra.logging import EventCategory, LogTimer
from krishimitra.tools.language import detect_language

logger = structlog.get_logger()

ELEVENLABS_STT_URL = "https://api.elevenlabs.io/v1/speech-to-text"
STT_MODEL_ID = "scribe_v2"


class TranscriptionError(Exception):
    """Raised when the speech-to-text provider rejects a request."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"ElevenLabs API error: {status_code}")


class Transcription(BaseModel):
    """Transcribed text with the detected language."""

    text: str
    language: str
    words: list[dict[str, Any]] = []


async def transcribe_audio(
    audio: bytes,
    api_key: str,
    timeout: float = 60.0,
) -> Transcription:
    """Transcribe a recorded voice query.

    Args:
        audio: Raw webm audio bytes
        api_key: ElevenLabs API key
        timeout: Request timeout in seconds

    Returns:
        Transcription with language detected from the text

    Raises:
        TranscriptionError: If the provider responds with a non-2xx status
            or a body that is not a transcription
    """
    with LogTimer("speech_to_text", category=EventCategory.SPEECH, audio_bytes=len(audio)):
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(
                ELEVENLABS_STT_URL,
                headers={"xi-api-key": api_key},
                files={"file": ("audio.webm", audio, "audio/webm")},
                data={"model_id": STT_MODEL_ID},
            )

    if not 200 <= response.status_code < 300:
        logger.error(
            "ElevenLabs STT error",
            status=response.status_code,
            body=response.text[:500],
        )
        raise TranscriptionError(response.status_code, response.text)

    try:
        data = response.json()
        text = data.get("text") or ""
        return Transcription(
            text=text,
            language=detect_language(text),
            words=data.get("words") or [],
        )
    except (ValueError, TypeError, AttributeError) as e:
        # pydantic's ValidationError is a ValueError
        logger.error("Malformed ElevenLabs response", error=str(e))
        raise TranscriptionError(502, "malformed response") from e
