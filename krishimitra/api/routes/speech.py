"""API route for voice queries (speech-to-text)."""

import base64
import binascii
from typing import Any, Optional

import httpx
import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from krishimitra.config.settings import settings
from krishimitra.tools.speech import TranscriptionError, transcribe_audio

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["speech"])


class TranscriptionRequest(BaseModel):
    """Base64-encoded webm recording."""
    audio_base64: Optional[str] = None


class TranscriptionResponse(BaseModel):
    text: str
    language: str
    words: list[dict[str, Any]] = []


@router.post("/stt", response_model=TranscriptionResponse)
async def speech_to_text(request: TranscriptionRequest):
    """Transcribe a voice query and detect its language."""
    if not settings.elevenlabs_api_key:
        logger.error("ELEVENLABS_API_KEY is not configured")
        return JSONResponse(status_code=500, content={"error": "ELEVENLABS_API_KEY is not configured"})

    if not request.audio_base64:
        return JSONResponse(status_code=400, content={"error": "No audio data provided"})

    try:
        audio = base64.b64decode(request.audio_base64, validate=True)
    except (binascii.Error, ValueError):
        return JSONResponse(status_code=400, content={"error": "Audio data is not valid base64"})

    try:
        transcription = await transcribe_audio(
            audio,
            settings.elevenlabs_api_key,
            timeout=settings.stt_timeout_seconds,
        )
    except (TranscriptionError, httpx.HTTPError) as e:
        logger.error("STT error", error=str(e))
        return JSONResponse(status_code=500, content={"error": str(e) or "Transcription failed"})

    return TranscriptionResponse(
        text=transcription.text,
        language=transcription.language,
        words=transcription.words,
    )
