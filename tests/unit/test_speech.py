"""Tests for speech transcription and language detection."""

from unittest.mock import patch

import pytest

from krishimitra.logging import EventCategory
from krishimitra.tools.language import detect_language
from krishimitra.tools.speech import (
    ELEVENLABS_STT_URL,
    STT_MODEL_ID,
    TranscriptionError,
    transcribe_audio,
)


class TestDetectLanguage:
    """Tests for script-based language detection."""

    def test_latin_text_is_english(self):
        assert detect_language("My cotton leaves are curling") == "en"

    def test_empty_text_is_english(self):
        assert detect_language("") == "en"

    def test_hindi(self):
        assert detect_language("मेरी फसल में कीड़े लग गए हैं") == "hi"

    def test_marathi_marker_word(self):
        assert detect_language("माझे पीक पिवळे पडले आहे") == "mr"

    def test_mixed_script_with_devanagari(self):
        """Any Devanagari character switches detection away from English."""
        assert detect_language("tomato में रोग") == "hi"


class TestTranscribeAudio:
    """Tests for the ElevenLabs client."""

    @pytest.mark.asyncio
    async def test_success(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(200, {
            "text": "माझे पीक पिवळे पडले आहे",
            "words": [{"text": "माझे", "start": 0.0, "end": 0.4}],
        })

        result = await transcribe_audio(b"\x1a\x45\xdf\xa3", "xi-key")

        assert result.text == "माझे पीक पिवळे पडले आहे"
        assert result.language == "mr"
        assert len(result.words) == 1

    @pytest.mark.asyncio
    async def test_request_format(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(200, {"text": "hello"})

        await transcribe_audio(b"audio-bytes", "xi-key")

        args, kwargs = mock_async_client.post.call_args
        assert args[0] == ELEVENLABS_STT_URL
        assert kwargs["headers"] == {"xi-api-key": "xi-key"}
        assert kwargs["files"]["file"] == ("audio.webm", b"audio-bytes", "audio/webm")
        assert kwargs["data"] == {"model_id": STT_MODEL_ID}

    @pytest.mark.asyncio
    async def test_missing_text_defaults_to_empty(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(200, {})

        result = await transcribe_audio(b"audio", "xi-key")

        assert result.text == ""
        assert result.language == "en"
        assert result.words == []

    @pytest.mark.asyncio
    async def test_error_status_raises(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(401, text="invalid key")

        with pytest.raises(TranscriptionError) as exc_info:
            await transcribe_audio(b"audio", "bad-key")

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, mock_async_client, make_response):
        response = make_response(200, text="<html>oops</html>")
        response.json.side_effect = ValueError("Expecting value")
        mock_async_client.post.return_value = response

        with pytest.raises(TranscriptionError) as exc_info:
            await transcribe_audio(b"audio", "xi-key")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_invalid_words_raises(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(200, {"text": "hi", "words": ["a"]})

        with pytest.raises(TranscriptionError):
            await transcribe_audio(b"audio", "xi-key")

    @pytest.mark.asyncio
    async def test_call_logged_under_speech_category(self, mock_async_client, make_response):
        mock_async_client.post.return_value = make_response(200, {"text": "hello"})

        with patch("krishimitra.logging.logger") as mock_logger:
            await transcribe_audio(b"audio", "xi-key")

        assert mock_logger.info.call_args.args[0] == "speech_to_text"
        assert mock_logger.info.call_args.kwargs["category"] == EventCategory.SPEECH.value
