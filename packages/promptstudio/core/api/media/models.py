"""Request/result models for the script, image and voice clients.

Every client operation returns one of the result types below. A result holds
either a payload or a ``Failure``, never both and never neither.
"""

from __future__ import annotations

import base64
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ImageDimension = Literal[512, 640, 768, 1024]


class FailureKind(str, Enum):
    """Why a vendor call did not produce a usable result."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    VENDOR_REJECTION = "vendor_rejection"
    EMPTY_RESULT = "empty_result"
    DEGENERATE_OUTPUT = "degenerate_output"


class Failure(BaseModel):
    """Uniform failure value carried by every result type."""

    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    message: str = Field(min_length=1)
    status_code: int | None = None


class _Outcome(BaseModel):
    """Shared accessors for result types."""

    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def error(self) -> str | None:
        return self.failure.message if self.failure else None


# ----------------------------------------------------------------------------
# Script
# ----------------------------------------------------------------------------


class ScriptResult(_Outcome):
    """Generated script text, or the reason there is none."""

    content: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> ScriptResult:
        if (self.content is None) == (self.failure is None):
            raise ValueError("ScriptResult needs exactly one of content or failure")
        if self.content is not None and not self.content:
            raise ValueError("ScriptResult content cannot be empty")
        return self


# ----------------------------------------------------------------------------
# Image
# ----------------------------------------------------------------------------


class StylePreset(str, Enum):
    """Style presets accepted by the text-to-image endpoint."""

    ENHANCE = "enhance"
    ANIME = "anime"
    PHOTOGRAPHIC = "photographic"
    DIGITAL_ART = "digital-art"
    COMIC_BOOK = "comic-book"
    FANTASY_ART = "fantasy-art"
    LINE_ART = "line-art"
    ANALOG_FILM = "analog-film"
    NEON_PUNK = "neon-punk"
    ISOMETRIC = "isometric"
    LOW_POLY = "low-poly"
    ORIGAMI = "origami"
    MODELING_COMPOUND = "modeling-compound"
    CINEMATIC = "cinematic"
    THREE_D_MODEL = "3d-model"
    PIXEL_ART = "pixel-art"
    TILE_TEXTURE = "tile-texture"


class ImageRequest(BaseModel):
    """Text-to-image parameters.

    ``seed`` left unset means a fresh random seed per call.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(min_length=1)
    negative_prompt: str | None = None
    width: ImageDimension = 1024
    height: ImageDimension = 1024
    cfg_scale: float = Field(default=7.0, ge=0.0, le=35.0)
    steps: int = Field(default=30, ge=10, le=50)
    seed: int | None = Field(default=None, ge=0, le=4294967295)
    style: StylePreset = StylePreset.ENHANCE


class GeneratedImage(BaseModel):
    """One image artifact returned by the vendor."""

    id: str
    url: str
    base64_image: str = Field(repr=False)
    prompt: str
    params: ImageRequest
    seed: int
    finish_reason: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_bytes(self) -> bytes:
        """Decode the image payload."""
        return base64.b64decode(self.base64_image)


class ImageResult(_Outcome):
    """Generated images (one per artifact), or the reason there are none."""

    images: list[GeneratedImage] = Field(default_factory=list)

    @model_validator(mode="after")
    def _exactly_one(self) -> ImageResult:
        if bool(self.images) == (self.failure is not None):
            raise ValueError("ImageResult needs exactly one of images or failure")
        return self


# ----------------------------------------------------------------------------
# Voice
# ----------------------------------------------------------------------------


class Voice(BaseModel):
    """A selectable vendor voice."""

    voice_id: str
    name: str
    category: str | None = None
    preview_url: str | None = None


class VoiceCatalog(BaseModel):
    """Voices available to the caller.

    When the vendor catalog could not be fetched the built-in catalog is
    returned with ``used_fallback`` set and ``error`` describing why.
    """

    voices: list[Voice]
    used_fallback: bool = False
    error: Failure | None = None


class VoiceRequest(BaseModel):
    """Text-to-speech parameters."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    voice_id: str = Field(min_length=1)
    model_id: str = "eleven_multilingual_v2"
    stability: float = Field(default=0.5, ge=0.0, le=1.0)
    similarity_boost: float = Field(default=0.75, ge=0.0, le=1.0)


class VoiceResult(_Outcome):
    """Playable audio reference, or the reason there is none.

    ``audio_url`` is directly usable as a playback source: a ``data:`` URL for
    vendors that return raw audio, or the vendor-hosted URL otherwise.
    """

    audio_url: str | None = None
    audio: bytes | None = Field(default=None, repr=False)
    content_type: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> VoiceResult:
        if (self.audio_url is None) == (self.failure is None):
            raise ValueError("VoiceResult needs exactly one of audio_url or failure")
        return self
