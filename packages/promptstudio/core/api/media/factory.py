"""Client factories for configured vendor dispatch."""

from __future__ import annotations

import httpx

from promptstudio.core.api.media.elevenlabs import ElevenLabsVoiceClient
from promptstudio.core.api.media.gemini import GeminiScriptClient, ScriptGenerationConfig
from promptstudio.core.api.media.stability import StabilityImageClient
from promptstudio.core.api.media.ttsmaker import TTSMakerVoiceClient
from promptstudio.core.config.models import AppConfig

VOICE_VENDORS = ("elevenlabs", "ttsmaker")


def create_script_client(
    app_config: AppConfig, transport: httpx.AsyncBaseTransport | None = None
) -> GeminiScriptClient:
    """Create the configured script client."""
    settings = app_config.script
    return GeminiScriptClient(
        app_config.http_config(settings.base_url),
        model=settings.model,
        generation=ScriptGenerationConfig(
            temperature=settings.temperature,
            top_k=settings.top_k,
            top_p=settings.top_p,
            max_output_tokens=settings.max_output_tokens,
            safety_threshold=settings.safety_threshold,
        ),
        use_preamble=settings.use_preamble,
        transport=transport,
    )


def create_image_client(
    app_config: AppConfig, transport: httpx.AsyncBaseTransport | None = None
) -> StabilityImageClient:
    """Create the configured image client."""
    return StabilityImageClient(
        app_config.http_config(app_config.image.base_url),
        engine=app_config.image.engine,
        transport=transport,
    )


def create_voice_client(
    app_config: AppConfig,
    vendor: str = "elevenlabs",
    transport: httpx.AsyncBaseTransport | None = None,
) -> ElevenLabsVoiceClient | TTSMakerVoiceClient:
    """Create the voice client for ``vendor``."""
    vendor_name = vendor.lower().strip()

    if vendor_name == "elevenlabs":
        return ElevenLabsVoiceClient(
            app_config.http_config(app_config.voice.base_url),
            default_model_id=app_config.voice.model_id,
            transport=transport,
        )
    if vendor_name == "ttsmaker":
        return TTSMakerVoiceClient(
            app_config.http_config(app_config.ttsmaker.base_url), transport=transport
        )

    raise ValueError(f"Unknown voice vendor: {vendor}")
