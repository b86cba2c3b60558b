"""Tests for the JSON-file library store and record builders."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    GeneratedImage,
    ImageRequest,
    ImageResult,
    ScriptResult,
    VoiceResult,
)
from promptstudio.core.library import (
    LibraryError,
    LibraryKind,
    LibraryStore,
    SavedScript,
    audio_record,
    image_records,
    script_record,
    script_title,
)

FAILED = Failure(kind=FailureKind.TRANSPORT, message="down")


@pytest.fixture
def store(tmp_path: Path) -> LibraryStore:
    return LibraryStore(tmp_path / "library")


def _script(record_id: str, minutes_ago: int) -> SavedScript:
    return SavedScript(
        id=record_id,
        title=f"{record_id}...",
        prompt="p",
        content="c",
        created_at=datetime.now(UTC) - timedelta(minutes=minutes_ago),
    )


class TestLibraryStore:
    """Test LibraryStore."""

    def test_empty_store_lists_nothing(self, store):
        assert store.list(LibraryKind.SCRIPTS) == []
        assert store.get(LibraryKind.SCRIPTS, "x") is None

    def test_list_is_newest_first(self, store):
        store.add(_script("old", 30))
        store.add(_script("new", 1))
        store.add(_script("mid", 10))

        assert [r.id for r in store.list(LibraryKind.SCRIPTS)] == ["new", "mid", "old"]

    def test_add_replaces_same_id(self, store):
        store.add(_script("a", 5))
        store.add(_script("a", 1).model_copy(update={"content": "v2"}))

        records = store.list(LibraryKind.SCRIPTS)
        assert len(records) == 1
        assert records[0].content == "v2"

    def test_delete(self, store):
        store.add(_script("a", 1))
        store.add(_script("b", 2))

        assert store.delete(LibraryKind.SCRIPTS, "a") is True
        assert store.delete(LibraryKind.SCRIPTS, "a") is False
        assert [r.id for r in store.list(LibraryKind.SCRIPTS)] == ["b"]

    def test_clear(self, store):
        store.add(_script("a", 1))
        store.clear(LibraryKind.SCRIPTS)
        assert store.list(LibraryKind.SCRIPTS) == []

    def test_collections_are_separate_files(self, store):
        store.add(_script("a", 1))
        assert store.path_for(LibraryKind.SCRIPTS).name == "scripts.json"
        assert not store.path_for(LibraryKind.IMAGES).exists()
        assert store.list(LibraryKind.AUDIO) == []

    def test_file_layout(self, store):
        store.add(_script("a", 1))
        raw = json.loads(store.path_for(LibraryKind.SCRIPTS).read_text())
        assert raw[0]["id"] == "a"
        assert set(raw[0]) == {"id", "title", "prompt", "content", "created_at"}
        assert not list(store.root.glob("*.tmp"))

    @pytest.mark.parametrize("content", ["{broken", '{"not": "a list"}', '[{"id": 1}]'])
    def test_corrupt_file_raises(self, store, content):
        path = store.path_for(LibraryKind.SCRIPTS)
        path.parent.mkdir(parents=True)
        path.write_text(content)
        with pytest.raises(LibraryError):
            store.list(LibraryKind.SCRIPTS)


class TestRecordBuilders:
    """Test building records from client results."""

    def test_script_title(self):
        assert script_title("A robot learns to love in a small town") == "A robot learns to love..."
        assert script_title("Short one") == "Short one..."

    def test_script_record(self):
        record = script_record("A robot learns to love", ScriptResult(content="INT. LAB"))
        assert record.id.startswith("script_")
        assert record.title == "A robot learns to love..."
        assert record.content == "INT. LAB"

    def test_records_saved_back_to_back_keep_distinct_ids(self, store):
        result = ScriptResult(content="INT. LAB")
        first = store.add(script_record("same prompt", result))
        second = store.add(script_record("same prompt", result))

        assert first.id != second.id
        assert len(store.list(LibraryKind.SCRIPTS)) == 2

        clip = VoiceResult(audio_url="data:audio/mpeg;base64,AA==")
        ids = {audio_record("t", "x", clip).id for _ in range(50)}
        assert len(ids) == 50

    def test_failed_results_are_never_saved(self):
        with pytest.raises(ValueError):
            script_record("p", ScriptResult(failure=FAILED))
        with pytest.raises(ValueError):
            image_records(ImageResult(failure=FAILED))
        with pytest.raises(ValueError):
            audio_record("t", "x", VoiceResult(failure=FAILED))

    def test_image_records_round_trip_through_store(self, store):
        params = ImageRequest(prompt="a red fox", width=512, height=512)
        image = GeneratedImage(
            id="img_1_0",
            url="data:image/png;base64,AAAA",
            base64_image="AAAA",
            prompt="a red fox",
            params=params,
            seed=3,
        )
        for record in image_records(ImageResult(images=[image])):
            store.add(record)

        saved = store.get(LibraryKind.IMAGES, "img_1_0")
        assert saved.url == "data:image/png;base64,AAAA"
        assert saved.params == params

    def test_audio_record(self):
        result = VoiceResult(audio_url="data:audio/mpeg;base64,AA==", audio=b"\x00")
        record = audio_record("Greeting", "Hello", result, voice_id="v1")
        assert record.id.startswith("audio_")
        assert record.url == "data:audio/mpeg;base64,AA=="
        assert record.voice_id == "v1"
