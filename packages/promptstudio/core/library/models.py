"""Saved library records and builders from client results."""

from __future__ import annotations

import time
import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from promptstudio.core.api.media.models import (
    ImageRequest,
    ImageResult,
    ScriptResult,
    VoiceResult,
)

TITLE_WORDS = 5


def _now() -> datetime:
    return datetime.now(UTC)


def _record_id(prefix: str) -> str:
    """``<prefix>_<epoch ms>_<random suffix>``; unique within a millisecond."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class LibraryKind(str, Enum):
    """Library collections, one JSON file each."""

    SCRIPTS = "scripts"
    IMAGES = "images"
    AUDIO = "audio"


class SavedScript(BaseModel):
    """A persisted script."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    prompt: str
    content: str
    created_at: datetime = Field(default_factory=_now)


class SavedImage(BaseModel):
    """A persisted generated image."""

    model_config = ConfigDict(extra="ignore")

    id: str
    prompt: str
    url: str
    base64_image: str = Field(repr=False)
    params: ImageRequest
    created_at: datetime = Field(default_factory=_now)


class SavedAudio(BaseModel):
    """A persisted speech clip."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    text: str
    url: str = Field(repr=False)
    voice_id: str | None = None
    created_at: datetime = Field(default_factory=_now)


SavedRecord = SavedScript | SavedImage | SavedAudio

RECORD_TYPES: dict[LibraryKind, type[BaseModel]] = {
    LibraryKind.SCRIPTS: SavedScript,
    LibraryKind.IMAGES: SavedImage,
    LibraryKind.AUDIO: SavedAudio,
}


def kind_of(record: SavedRecord) -> LibraryKind:
    """Collection a record belongs to."""
    for kind, record_type in RECORD_TYPES.items():
        if isinstance(record, record_type):
            return kind
    raise TypeError(f"Not a library record: {type(record).__name__}")


def script_title(prompt: str) -> str:
    """First five words of the prompt followed by an ellipsis.

    Example:
        >>> script_title("A robot learns to love in a small town")
        'A robot learns to love...'
    """
    return " ".join(prompt.split()[:TITLE_WORDS]) + "..."


def script_record(prompt: str, result: ScriptResult) -> SavedScript:
    """Build a record for a successful script result.

    Raises:
        ValueError: If the result is a failure (failures are never saved)
    """
    if result.content is None:
        raise ValueError(f"Cannot save a failed script result: {result.error}")
    return SavedScript(
        id=_record_id("script"),
        title=script_title(prompt),
        prompt=prompt,
        content=result.content,
    )


def image_records(result: ImageResult) -> list[SavedImage]:
    """Build one record per generated image.

    Raises:
        ValueError: If the result is a failure
    """
    if not result.ok:
        raise ValueError(f"Cannot save a failed image result: {result.error}")
    return [
        SavedImage(
            id=image.id,
            prompt=image.prompt,
            url=image.url,
            base64_image=image.base64_image,
            params=image.params,
            created_at=image.created_at,
        )
        for image in result.images
    ]


def audio_record(
    title: str, text: str, result: VoiceResult, voice_id: str | None = None
) -> SavedAudio:
    """Build a record for a successful speech result.

    Raises:
        ValueError: If the result is a failure
    """
    if result.audio_url is None:
        raise ValueError(f"Cannot save a failed speech result: {result.error}")
    return SavedAudio(
        id=_record_id("audio"),
        title=title,
        text=text,
        url=result.audio_url,
        voice_id=voice_id,
    )
