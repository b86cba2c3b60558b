"""Tests for the Stability image client."""

from __future__ import annotations

import json

import httpx
import pytest

from promptstudio.core.api.media import stability
from promptstudio.core.api.media.models import FailureKind, ImageRequest, StylePreset
from promptstudio.core.api.media.stability import (
    MAX_RANDOM_SEED,
    NO_IMAGES_ERROR,
    StabilityImageClient,
    generate_image,
    random_seed,
)

JSON = {"content-type": "application/json"}


def _reply(body: dict, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=body, headers=JSON)

    return handler


def _artifacts(*payloads: str, seed: int | None = None) -> dict:
    items = []
    for payload in payloads:
        item = {"base64": payload, "finishReason": "SUCCESS"}
        if seed is not None:
            item["seed"] = seed
        items.append(item)
    return {"artifacts": items}


class TestStabilityImageClient:
    """Test StabilityImageClient."""

    @pytest.mark.anyio
    async def test_generate_image_success(self, mock_transport, recorded):
        params = ImageRequest(prompt="a red fox", width=512, height=512)
        client = StabilityImageClient(transport=mock_transport(_reply(_artifacts("AAAA"))))

        result = await client.generate_image(params, "s-key")

        assert result.ok
        assert len(result.images) == 1
        image = result.images[0]
        assert image.url == "data:image/png;base64,AAAA"
        assert image.base64_image == "AAAA"
        assert image.prompt == "a red fox"
        assert image.params == params
        assert image.params.width == 512
        assert image.finish_reason == "SUCCESS"
        assert image.id.startswith("img_") and image.id.endswith("_0")

        request = recorded[0]
        assert request.url.path == "/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image"
        assert request.headers["Authorization"] == "Bearer s-key"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.anyio
    async def test_request_body(self, mock_transport, recorded):
        params = ImageRequest(
            prompt="a red fox",
            negative_prompt="blurry",
            cfg_scale=12,
            steps=40,
            seed=99,
            style=StylePreset.ANIME,
        )
        await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA")))
        ).generate_image(params, "k")

        body = json.loads(recorded[0].content)
        assert body == {
            "text_prompts": [
                {"text": "a red fox", "weight": 1},
                {"text": "blurry", "weight": -1},
            ],
            "width": 1024,
            "height": 1024,
            "cfg_scale": 12.0,
            "steps": 40,
            "seed": 99,
            "style_preset": "anime",
        }

    @pytest.mark.anyio
    async def test_negative_prompt_always_sent(self, mock_transport, recorded):
        await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA")))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        prompts = json.loads(recorded[0].content)["text_prompts"]
        assert prompts[1] == {"text": "", "weight": -1}

    @pytest.mark.anyio
    async def test_pinned_zero_seed_is_honored(self, mock_transport, recorded):
        result = await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA")))
        ).generate_image(ImageRequest(prompt="a red fox", seed=0), "k")

        assert json.loads(recorded[0].content)["seed"] == 0
        assert result.images[0].seed == 0

    @pytest.mark.anyio
    async def test_unset_seed_draws_random(self, mock_transport, recorded, monkeypatch):
        monkeypatch.setattr(stability, "random_seed", lambda: 4242)

        result = await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA")))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert json.loads(recorded[0].content)["seed"] == 4242
        assert result.images[0].seed == 4242
        assert result.images[0].params.seed is None

    def test_random_seed_range(self):
        for _ in range(100):
            assert 0 <= random_seed() < MAX_RANDOM_SEED

    @pytest.mark.anyio
    async def test_one_record_per_artifact(self, mock_transport):
        result = await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA", "BBBB", seed=7)))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert [i.url for i in result.images] == [
            "data:image/png;base64,AAAA",
            "data:image/png;base64,BBBB",
        ]
        assert [i.id.rsplit("_", 1)[1] for i in result.images] == ["0", "1"]
        assert {i.seed for i in result.images} == {7}

    @pytest.mark.parametrize("body", [{}, {"artifacts": []}, {"artifacts": [{"seed": 1}]}])
    @pytest.mark.anyio
    async def test_no_artifacts(self, mock_transport, body):
        result = await StabilityImageClient(
            transport=mock_transport(_reply(body))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert result.images == []
        assert result.failure.kind is FailureKind.EMPTY_RESULT
        assert result.error == NO_IMAGES_ERROR

    @pytest.mark.parametrize(
        "body",
        [
            {"artifacts": {"0": {"base64": "AAAA"}}},
            {"artifacts": "AAAA"},
            {"artifacts": [{"base64": 5}]},
            {"artifacts": [{"base64": ["AAAA"]}]},
            {"artifacts": ["AAAA"]},
            [{"base64": "AAAA"}],
        ],
    )
    @pytest.mark.anyio
    async def test_malformed_body_is_a_failure(self, mock_transport, body):
        result = await StabilityImageClient(
            transport=mock_transport(_reply(body))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert result.images == []
        assert result.failure.kind is FailureKind.EMPTY_RESULT

    @pytest.mark.anyio
    async def test_odd_artifact_metadata_is_ignored(self, mock_transport):
        body = {"artifacts": [{"base64": "AAAA", "seed": "7", "finishReason": {"x": 1}}]}
        result = await StabilityImageClient(
            transport=mock_transport(_reply(body))
        ).generate_image(ImageRequest(prompt="a red fox", seed=3), "k")

        assert result.ok
        assert result.images[0].seed == 3
        assert result.images[0].finish_reason is None

    @pytest.mark.anyio
    async def test_parse_error_is_transport_failure(self, mock_transport, monkeypatch):
        def broken(payload, mime_type):
            raise TypeError("a bytes-like object is required")

        monkeypatch.setattr(stability, "to_data_url", broken)
        result = await StabilityImageClient(
            transport=mock_transport(_reply(_artifacts("AAAA")))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert result.failure.kind is FailureKind.TRANSPORT
        assert result.error.startswith("Malformed response from vendor")

    @pytest.mark.anyio
    async def test_vendor_error_message(self, mock_transport):
        result = await StabilityImageClient(
            transport=mock_transport(_reply({"message": "Invalid prompts detected"}, 400))
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert result.failure.kind is FailureKind.VENDOR_REJECTION
        assert result.error == "Invalid prompts detected"
        assert result.failure.status_code == 400

    @pytest.mark.anyio
    async def test_timeout_is_transport_failure(self, mock_transport):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = await StabilityImageClient(
            transport=mock_transport(handler)
        ).generate_image(ImageRequest(prompt="a red fox"), "k")

        assert result.failure.kind is FailureKind.TRANSPORT

    @pytest.mark.anyio
    async def test_module_level_helper(self, mock_transport):
        result = await generate_image(
            ImageRequest(prompt="a red fox"),
            "k",
            transport=mock_transport(_reply(_artifacts("AAAA"))),
        )
        assert result.ok
