"""Tests for the TTSMaker voice client."""

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest
from pydantic import ValidationError

from promptstudio.core.api.media.models import FailureKind
from promptstudio.core.api.media.ttsmaker import (
    NO_AUDIO_URL_ERROR,
    TTS_MAKER_VOICES,
    TTSMakerRequest,
    TTSMakerVoiceClient,
)

JSON = {"content-type": "application/json"}
AUDIO_URL = "https://cdn.ttsmaker.test/file/abc.mp3"


def _reply(body: dict, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body, headers=JSON)

    return handler


class TestTTSMakerVoiceClient:
    """Test TTSMakerVoiceClient."""

    @pytest.mark.anyio
    async def test_success_returns_remote_url(self, mock_transport, recorded):
        client = TTSMakerVoiceClient(
            transport=mock_transport(_reply({"success": True, "audio_url": AUDIO_URL}))
        )

        result = await client.synthesize_speech("t-key", "en-US-Wavenet-C", "Hello", speed=7)

        assert result.ok
        assert result.audio_url == AUDIO_URL
        assert result.audio is None

        request = recorded[0]
        assert request.url.path == "/v1/create-tts"
        form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        assert form == {
            "api_key": "t-key",
            "voice_id": "en-US-Wavenet-C",
            "text": "Hello",
            "speed": "7",
            "pitch": "5",
            "volume": "5",
            "format": "mp3",
        }

    @pytest.mark.anyio
    async def test_unsuccessful_reply_uses_vendor_message(self, mock_transport):
        transport = mock_transport(_reply({"success": False, "message": "text too long"}))
        result = await TTSMakerVoiceClient(transport=transport).synthesize_speech(
            "k", "en-US-Wavenet-A", "Hello"
        )
        assert result.failure.kind is FailureKind.EMPTY_RESULT
        assert result.error == "text too long"

    @pytest.mark.anyio
    async def test_missing_url(self, mock_transport):
        transport = mock_transport(_reply({"success": True}))
        result = await TTSMakerVoiceClient(transport=transport).synthesize_speech(
            "k", "en-US-Wavenet-A", "Hello"
        )
        assert result.error == NO_AUDIO_URL_ERROR

    @pytest.mark.anyio
    async def test_http_error(self, mock_transport):
        transport = mock_transport(_reply({"message": "invalid api key"}, 403))
        result = await TTSMakerVoiceClient(transport=transport).synthesize_speech(
            "bad", "en-US-Wavenet-A", "Hello"
        )
        assert result.failure.kind is FailureKind.VENDOR_REJECTION
        assert result.error == "invalid api key"

    def test_builtin_catalog(self):
        catalog = TTSMakerVoiceClient().list_voices()
        assert not catalog.used_fallback
        assert len(catalog.voices) == len(TTS_MAKER_VOICES) == 10

    def test_request_ranges(self):
        with pytest.raises(ValidationError):
            TTSMakerRequest(text="Hi", voice_id="v", speed=11)
        with pytest.raises(ValidationError):
            TTSMakerRequest(text="", voice_id="v")
