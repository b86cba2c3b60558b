"""Local persistence of saved scripts, images and audio."""

from promptstudio.core.library.models import (
    LibraryKind,
    SavedAudio,
    SavedImage,
    SavedScript,
    audio_record,
    image_records,
    script_record,
    script_title,
)
from promptstudio.core.library.store import LibraryError, LibraryStore

__all__ = [
    "LibraryError",
    "LibraryKind",
    "LibraryStore",
    "SavedAudio",
    "SavedImage",
    "SavedScript",
    "audio_record",
    "image_records",
    "script_record",
    "script_title",
]
