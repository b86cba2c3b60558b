"""ElevenLabs voice client.

Lists the account's voices and synthesizes speech.

Wire contract:
    GET  {base}/v1/voices                      xi-api-key: <key>
         -> {voices: [{voice_id, name, category, preview_url}, ...]}
    POST {base}/v1/text-to-speech/{voice_id}   xi-api-key: <key>
         body: {text, model_id, voice_settings: {stability, similarity_boost}}
         -> raw audio bytes (audio/mpeg)
    error: {detail: {message}} or {detail: "..."}
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from promptstudio.core.api.http import ApiKeyAuth, AsyncApiClient, HttpClientConfig
from promptstudio.core.api.http.utils import to_data_url
from promptstudio.core.api.media.failures import failure_from_error, malformed_response
from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    Voice,
    VoiceCatalog,
    VoiceRequest,
    VoiceResult,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io"
DEFAULT_AUDIO_TYPE = "audio/mpeg"

GENERIC_ERROR = "Failed to generate speech"
NO_AUDIO_ERROR = "No audio generated"
MESSAGE_PATHS = ("detail.message", "detail", "message")

# Stock voices available on every account.
ELEVEN_LABS_VOICES: tuple[Voice, ...] = (
    Voice(voice_id="21m00Tcm4TlvDq8ikWAM", name="Rachel"),
    Voice(voice_id="AZnzlk1XvdvUeBnXmlld", name="Domi"),
    Voice(voice_id="EXAVITQu4vr4xnSDxMaL", name="Bella"),
    Voice(voice_id="ErXwobaYiN019PkySvjV", name="Antoni"),
    Voice(voice_id="MF3mGyEYCl7XYWbV9V6O", name="Elli"),
    Voice(voice_id="TxGEqnHWrfWFTfGW9XjX", name="Josh"),
    Voice(voice_id="VR6AewLTigWG4xSOukaG", name="Arnold"),
    Voice(voice_id="pNInz6obpgDQGcFmaJgB", name="Adam"),
    Voice(voice_id="yoZ06aMxZJJ28mfd3POQ", name="Sam"),
)

ELEVEN_LABS_MODELS: dict[str, str] = {
    "eleven_multilingual_v2": "Multilingual v2",
    "eleven_turbo_v2": "Turbo v2",
    "eleven_english_v1": "English v1",
}


def fallback_catalog(error: Failure) -> VoiceCatalog:
    """Built-in catalog returned whenever the vendor catalog is unavailable."""
    return VoiceCatalog(voices=list(ELEVEN_LABS_VOICES), used_fallback=True, error=error)


class ElevenLabsVoiceClient:
    """Voice listing and speech synthesis for the ElevenLabs API (async).

    Args:
        http_config: HTTP configuration (base URL, timeouts)
        default_model_id: Model used when a call does not name one
        transport: Optional HTTPX transport (tests use httpx.MockTransport)

    Example:
        >>> client = ElevenLabsVoiceClient()
        >>> catalog = await client.list_voices(api_key)
        >>> result = await client.synthesize_speech(api_key, catalog.voices[0].voice_id, "Hi")
        >>> audio_element_src = result.audio_url
    """

    def __init__(
        self,
        http_config: HttpClientConfig | None = None,
        *,
        default_model_id: str = "eleven_multilingual_v2",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http_config = http_config or HttpClientConfig(base_url=DEFAULT_BASE_URL)
        self.default_model_id = default_model_id
        self._transport = transport

    def _client(self, api_key: str) -> AsyncApiClient:
        auth = ApiKeyAuth(header_name="xi-api-key", api_key=api_key)
        return AsyncApiClient(self.http_config, auth=auth, transport=self._transport)

    async def list_voices(self, api_key: str) -> VoiceCatalog:
        """Fetch the account's voices.

        Never fails: without a key, on any fetch error, or when the account
        lists no voices, the built-in catalog is returned with
        ``used_fallback`` set and the reason in ``error``.

        Args:
            api_key: ElevenLabs API key (may be empty)

        Returns:
            VoiceCatalog
        """
        if not api_key:
            return fallback_catalog(
                Failure(kind=FailureKind.VALIDATION, message="No ElevenLabs API key provided")
            )

        try:
            async with self._client(api_key) as http:
                response = await http.get("/v1/voices")
                data = http.json(response)
        except Exception as e:
            failure = failure_from_error(
                e, message_paths=MESSAGE_PATHS, generic_message="Failed to fetch voices"
            )
            logger.warning(f"Voice listing failed, using built-in catalog: {failure.message}")
            return fallback_catalog(failure)

        try:
            voices = _parse_voices(data)
        except (TypeError, ValueError, KeyError) as e:
            failure = malformed_response(e)
            logger.warning(f"Voice listing failed, using built-in catalog: {failure.message}")
            return fallback_catalog(failure)

        if not voices:
            logger.warning("Voice listing returned no voices, using built-in catalog")
            return fallback_catalog(
                Failure(kind=FailureKind.EMPTY_RESULT, message="No voices returned")
            )
        return VoiceCatalog(voices=voices)

    async def synthesize(self, request: VoiceRequest, api_key: str) -> VoiceResult:
        """Synthesize speech for a prepared request.

        Args:
            request: Text, voice and tuning parameters
            api_key: ElevenLabs API key

        Returns:
            VoiceResult whose ``audio_url`` is a playable data URL
        """
        body = {
            "text": request.text,
            "model_id": request.model_id,
            "voice_settings": {
                "stability": request.stability,
                "similarity_boost": request.similarity_boost,
            },
        }

        try:
            async with self._client(api_key) as http:
                response = await http.post(
                    f"/v1/text-to-speech/{request.voice_id}",
                    json_body=body,
                    headers={"Accept": DEFAULT_AUDIO_TYPE},
                )
        except Exception as e:
            failure = failure_from_error(
                e, message_paths=MESSAGE_PATHS, generic_message=GENERIC_ERROR
            )
            logger.warning(f"Speech synthesis failed: {failure.message}")
            return VoiceResult(failure=failure)

        audio = response.content
        if not audio:
            logger.warning("Speech synthesis returned an empty body")
            return VoiceResult(
                failure=Failure(kind=FailureKind.EMPTY_RESULT, message=NO_AUDIO_ERROR)
            )

        content_type = response.headers.get("content-type", DEFAULT_AUDIO_TYPE).split(";")[0]
        logger.debug(f"Speech synthesized: {len(audio)} bytes of {content_type}")
        return VoiceResult(
            audio_url=to_data_url(audio, content_type),
            audio=audio,
            content_type=content_type,
        )

    async def synthesize_speech(
        self,
        api_key: str,
        voice_id: str,
        text: str,
        stability: float | None = None,
        clarity: float | None = None,
        *,
        model_id: str | None = None,
    ) -> VoiceResult:
        """Synthesize ``text`` with ``voice_id``.

        ``clarity`` is the vendor's ``similarity_boost``. Unset tuning values
        take the vendor-recommended defaults (0.5 / 0.75).
        """
        fields: dict[str, Any] = {
            "text": text,
            "voice_id": voice_id,
            "model_id": model_id or self.default_model_id,
        }
        if stability is not None:
            fields["stability"] = stability
        if clarity is not None:
            fields["similarity_boost"] = clarity
        return await self.synthesize(VoiceRequest(**fields), api_key)


def _parse_voices(data: Any) -> list[Voice]:
    """Normalize ``{voices: [...]}``; entries without id or name are skipped."""
    items = data.get("voices") if isinstance(data, dict) else None
    if not isinstance(items, list):
        return []
    voices = []
    for item in items:
        if not isinstance(item, dict) or not _text(item.get("voice_id")) or not _text(
            item.get("name")
        ):
            logger.debug(f"Skipping malformed voice entry: {item}")
            continue
        voices.append(
            Voice(
                voice_id=item["voice_id"],
                name=item["name"],
                category=_text(item.get("category")),
                preview_url=_text(item.get("preview_url")),
            )
        )
    return voices


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


async def list_voices(
    api_key: str,
    *,
    http_config: HttpClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VoiceCatalog:
    """List voices with default client settings."""
    return await ElevenLabsVoiceClient(http_config, transport=transport).list_voices(api_key)


async def synthesize_speech(
    api_key: str,
    voice_id: str,
    text: str,
    stability: float | None = None,
    clarity: float | None = None,
    *,
    http_config: HttpClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VoiceResult:
    """Synthesize speech with default client settings."""
    client = ElevenLabsVoiceClient(http_config, transport=transport)
    return await client.synthesize_speech(api_key, voice_id, text, stability, clarity)
