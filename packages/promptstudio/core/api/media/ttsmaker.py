"""TTSMaker speech client.

An alternative speech vendor that hosts the rendered audio and returns its
URL instead of the audio bytes.

Wire contract:
    POST {base}/v1/create-tts   (form fields)
         api_key, voice_id, text, speed, pitch, volume, format
    response: {success, audio_url, message}
"""

from __future__ import annotations

import logging
from typing import Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field

from promptstudio.core.api.http import AsyncApiClient, HttpClientConfig
from promptstudio.core.api.media.failures import failure_from_error
from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    Voice,
    VoiceCatalog,
    VoiceResult,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.ttsmaker.com"

GENERIC_ERROR = "Failed to generate speech"
NO_AUDIO_URL_ERROR = "No audio URL returned"

TTS_MAKER_VOICES: tuple[Voice, ...] = (
    Voice(voice_id="en-US-Wavenet-A", name="US English - Wavenet A (Male)"),
    Voice(voice_id="en-US-Wavenet-B", name="US English - Wavenet B (Male)"),
    Voice(voice_id="en-US-Wavenet-C", name="US English - Wavenet C (Female)"),
    Voice(voice_id="en-US-Wavenet-D", name="US English - Wavenet D (Male)"),
    Voice(voice_id="en-US-Wavenet-E", name="US English - Wavenet E (Female)"),
    Voice(voice_id="en-US-Wavenet-F", name="US English - Wavenet F (Female)"),
    Voice(voice_id="en-GB-Wavenet-A", name="British English - Wavenet A (Female)"),
    Voice(voice_id="en-GB-Wavenet-B", name="British English - Wavenet B (Male)"),
    Voice(voice_id="en-GB-Wavenet-C", name="British English - Wavenet C (Female)"),
    Voice(voice_id="en-GB-Wavenet-D", name="British English - Wavenet D (Male)"),
)


class TTSMakerRequest(BaseModel):
    """Text-to-speech parameters. Speed, pitch and volume use a 0-10 scale."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    voice_id: str = Field(min_length=1)
    speed: int = Field(default=5, ge=0, le=10)
    pitch: int = Field(default=5, ge=0, le=10)
    volume: int = Field(default=5, ge=0, le=10)
    audio_format: Literal["mp3", "wav", "ogg"] = "mp3"


class TTSMakerVoiceClient:
    """Speech synthesis client for TTSMaker (async).

    Args:
        http_config: HTTP configuration (base URL, timeouts)
        transport: Optional HTTPX transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        http_config: HttpClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http_config = http_config or HttpClientConfig(base_url=DEFAULT_BASE_URL)
        self._transport = transport

    def list_voices(self) -> VoiceCatalog:
        """TTSMaker has no listing endpoint; the built-in catalog is authoritative."""
        return VoiceCatalog(voices=list(TTS_MAKER_VOICES))

    async def synthesize(self, request: TTSMakerRequest, api_key: str) -> VoiceResult:
        """Synthesize speech and return the vendor-hosted audio URL.

        Args:
            request: Text, voice and tuning parameters
            api_key: TTSMaker API key (sent as a form field)

        Returns:
            VoiceResult whose ``audio_url`` is the remote file
        """
        form = {
            "api_key": api_key,
            "voice_id": request.voice_id,
            "text": request.text,
            "speed": str(request.speed),
            "pitch": str(request.pitch),
            "volume": str(request.volume),
            "format": request.audio_format,
        }

        try:
            async with AsyncApiClient(self.http_config, transport=self._transport) as http:
                response = await http.post("/v1/create-tts", data=form)
                data = http.json(response)
        except Exception as e:
            failure = failure_from_error(
                e, message_paths=("message",), generic_message=GENERIC_ERROR
            )
            logger.warning(f"TTSMaker synthesis failed: {failure.message}")
            return VoiceResult(failure=failure)

        data = data if isinstance(data, dict) else {}
        audio_url = data.get("audio_url")
        if data.get("success") and isinstance(audio_url, str) and audio_url:
            return VoiceResult(audio_url=audio_url, content_type=f"audio/{request.audio_format}")

        message = data.get("message")
        if not isinstance(message, str) or not message.strip():
            message = NO_AUDIO_URL_ERROR
        logger.warning(f"TTSMaker returned no audio: {message}")
        return VoiceResult(failure=Failure(kind=FailureKind.EMPTY_RESULT, message=message))

    async def synthesize_speech(
        self,
        api_key: str,
        voice_id: str,
        text: str,
        *,
        speed: int = 5,
        pitch: int = 5,
        volume: int = 5,
    ) -> VoiceResult:
        """Synthesize ``text`` with ``voice_id``."""
        request = TTSMakerRequest(
            text=text, voice_id=voice_id, speed=speed, pitch=pitch, volume=volume
        )
        return await self.synthesize(request, api_key)
