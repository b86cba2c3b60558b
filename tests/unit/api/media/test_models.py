"""Tests for media request/result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    GeneratedImage,
    ImageRequest,
    ImageResult,
    ScriptResult,
    StylePreset,
    VoiceRequest,
    VoiceResult,
)

FAIL = Failure(kind=FailureKind.TRANSPORT, message="down")


class TestResultInvariants:
    """Every result holds exactly one of payload or failure."""

    def test_script_success(self):
        result = ScriptResult(content="INT. LAB")
        assert result.ok
        assert result.error is None

    def test_script_failure(self):
        result = ScriptResult(failure=FAIL)
        assert not result.ok
        assert result.error == "down"

    def test_script_rejects_neither(self):
        with pytest.raises(ValidationError):
            ScriptResult()

    def test_script_rejects_both(self):
        with pytest.raises(ValidationError):
            ScriptResult(content="x", failure=FAIL)

    def test_script_rejects_empty_content(self):
        with pytest.raises(ValidationError):
            ScriptResult(content="")

    def test_image_rejects_empty_success(self):
        with pytest.raises(ValidationError):
            ImageResult(images=[])

    def test_voice_rejects_both(self):
        with pytest.raises(ValidationError):
            VoiceResult(audio_url="data:audio/mpeg;base64,AA==", failure=FAIL)

    def test_failure_message_required(self):
        with pytest.raises(ValidationError):
            Failure(kind=FailureKind.VALIDATION, message="")


class TestImageRequest:
    """Test ImageRequest validation and defaults."""

    def test_defaults(self):
        params = ImageRequest(prompt="a red fox")
        assert (params.width, params.height) == (1024, 1024)
        assert params.cfg_scale == 7.0
        assert params.steps == 30
        assert params.seed is None
        assert params.style is StylePreset.ENHANCE

    @pytest.mark.parametrize(
        "overrides",
        [
            {"prompt": ""},
            {"width": 500},
            {"cfg_scale": 36},
            {"steps": 9},
            {"steps": 51},
            {"seed": -1},
            {"style": "watercolor"},
        ],
    )
    def test_rejects_out_of_range(self, overrides):
        fields = {"prompt": "a red fox", **overrides}
        with pytest.raises(ValidationError):
            ImageRequest(**fields)

    def test_generated_image_decodes_payload(self):
        image = GeneratedImage(
            id="img_1_0",
            url="data:image/png;base64,aGk=",
            base64_image="aGk=",
            prompt="p",
            params=ImageRequest(prompt="p"),
            seed=1,
        )
        assert image.to_bytes() == b"hi"
        assert "aGk=" not in repr(image)


class TestVoiceRequest:
    """Test VoiceRequest defaults and ranges."""

    def test_defaults(self):
        request = VoiceRequest(text="Hello", voice_id="v1")
        assert request.model_id == "eleven_multilingual_v2"
        assert request.stability == 0.5
        assert request.similarity_boost == 0.75

    def test_rejects_out_of_range_stability(self):
        with pytest.raises(ValidationError):
            VoiceRequest(text="Hello", voice_id="v1", stability=1.5)
