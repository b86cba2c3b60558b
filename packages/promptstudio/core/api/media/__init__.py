"""Vendor clients for script, image and voice generation.

Every operation returns a result object carrying either a payload or a
``Failure``; none of them raise for network, vendor or empty-output errors.
"""

from promptstudio.core.api.media.elevenlabs import (
    ELEVEN_LABS_MODELS,
    ELEVEN_LABS_VOICES,
    ElevenLabsVoiceClient,
    list_voices,
    synthesize_speech,
)
from promptstudio.core.api.media.gemini import (
    GeminiScriptClient,
    ScriptGenerationConfig,
    generate_script,
)
from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    GeneratedImage,
    ImageRequest,
    ImageResult,
    ScriptResult,
    StylePreset,
    Voice,
    VoiceCatalog,
    VoiceRequest,
    VoiceResult,
)
from promptstudio.core.api.media.stability import StabilityImageClient, generate_image
from promptstudio.core.api.media.ttsmaker import (
    TTS_MAKER_VOICES,
    TTSMakerRequest,
    TTSMakerVoiceClient,
)

__all__ = [
    "ELEVEN_LABS_MODELS",
    "ELEVEN_LABS_VOICES",
    "TTS_MAKER_VOICES",
    "ElevenLabsVoiceClient",
    "Failure",
    "FailureKind",
    "GeminiScriptClient",
    "GeneratedImage",
    "ImageRequest",
    "ImageResult",
    "ScriptGenerationConfig",
    "ScriptResult",
    "StabilityImageClient",
    "StylePreset",
    "TTSMakerRequest",
    "TTSMakerVoiceClient",
    "Voice",
    "VoiceCatalog",
    "VoiceRequest",
    "VoiceResult",
    "generate_image",
    "generate_script",
    "list_voices",
    "synthesize_speech",
]
