"""Stability AI text-to-image client.

Wire contract:
    POST {base}/v1/generation/{engine}/text-to-image
    Authorization: Bearer <api key>
    body: {text_prompts: [{text, weight: 1}, {text: negative, weight: -1}],
           width, height, cfg_scale, steps, seed, style_preset}
    success: {artifacts: [{base64, seed, finishReason}, ...]}
    error:   {message}
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from typing import Any

import httpx

from promptstudio.core.api.http import ApiKeyAuth, AsyncApiClient, HttpClientConfig
from promptstudio.core.api.http.utils import to_data_url
from promptstudio.core.api.media.failures import failure_from_error, malformed_response
from promptstudio.core.api.media.models import (
    Failure,
    FailureKind,
    GeneratedImage,
    ImageRequest,
    ImageResult,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.stability.ai"
DEFAULT_ENGINE = "stable-diffusion-xl-1024-v1-0"
IMAGE_MIME_TYPE = "image/png"

# Exclusive upper bound for generated seeds (31-bit).
MAX_RANDOM_SEED = 2147483647

GENERIC_ERROR = "Failed to generate image"
NO_IMAGES_ERROR = "No images generated"


def random_seed() -> int:
    """Draw a fresh 31-bit seed."""
    return random.randrange(MAX_RANDOM_SEED)


class StabilityImageClient:
    """Image generation client for the Stability REST API (async).

    Args:
        http_config: HTTP configuration (base URL, timeouts)
        engine: Engine id in the endpoint path
        transport: Optional HTTPX transport (tests use httpx.MockTransport)

    Example:
        >>> client = StabilityImageClient()
        >>> result = await client.generate_image(ImageRequest(prompt="a red fox"), api_key)
        >>> for image in result.images:
        ...     print(image.id, image.url[:40])
    """

    def __init__(
        self,
        http_config: HttpClientConfig | None = None,
        *,
        engine: str = DEFAULT_ENGINE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http_config = http_config or HttpClientConfig(base_url=DEFAULT_BASE_URL)
        self.engine = engine
        self._transport = transport

    @staticmethod
    def build_body(params: ImageRequest, seed: int) -> dict[str, Any]:
        """Build the text-to-image request body.

        The negative entry is always present; the endpoint requires both.
        """
        return {
            "text_prompts": [
                {"text": params.prompt, "weight": 1},
                {"text": params.negative_prompt or "", "weight": -1},
            ],
            "width": params.width,
            "height": params.height,
            "cfg_scale": params.cfg_scale,
            "steps": params.steps,
            "seed": seed,
            "style_preset": params.style.value,
        }

    async def generate_image(self, params: ImageRequest, api_key: str) -> ImageResult:
        """Generate images for ``params``.

        Args:
            params: Prompt and sampling parameters
            api_key: Stability API key

        Returns:
            ImageResult with one record per vendor artifact, or a failure
        """
        seed = params.seed if params.seed is not None else random_seed()
        path = f"/v1/generation/{self.engine}/text-to-image"
        auth = ApiKeyAuth(header_name="Authorization", api_key=api_key, prefix="Bearer")

        try:
            async with AsyncApiClient(
                self.http_config, auth=auth, transport=self._transport
            ) as http:
                response = await http.post(
                    path,
                    json_body=self.build_body(params, seed),
                    headers={"Accept": "application/json"},
                )
                data = http.json(response)
        except Exception as e:
            failure = failure_from_error(
                e, message_paths=("message",), generic_message=GENERIC_ERROR
            )
            logger.warning(f"Image generation failed: {failure.message}")
            return ImageResult(failure=failure)

        try:
            return self._parse_response(data, params, seed)
        except (TypeError, ValueError, KeyError) as e:
            failure = malformed_response(e)
            logger.warning(f"Image generation failed: {failure.message}")
            return ImageResult(failure=failure)

    def _parse_response(self, data: Any, params: ImageRequest, seed: int) -> ImageResult:
        artifacts = data.get("artifacts") if isinstance(data, dict) else None
        if not isinstance(artifacts, list):
            artifacts = []
        usable = [
            a
            for a in artifacts
            if isinstance(a, dict) and isinstance(a.get("base64"), str) and a["base64"]
        ]
        if not usable:
            logger.warning("Image generation returned no artifacts")
            return ImageResult(
                failure=Failure(kind=FailureKind.EMPTY_RESULT, message=NO_IMAGES_ERROR)
            )

        batch = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
        images = []
        for index, artifact in enumerate(usable):
            payload = artifact["base64"]
            vendor_seed = artifact.get("seed")
            finish_reason = artifact.get("finishReason")
            images.append(
                GeneratedImage(
                    id=f"img_{batch}_{index}",
                    url=to_data_url(payload, IMAGE_MIME_TYPE),
                    base64_image=payload,
                    prompt=params.prompt,
                    params=params,
                    seed=vendor_seed
                    if isinstance(vendor_seed, int) and not isinstance(vendor_seed, bool)
                    else seed,
                    finish_reason=finish_reason if isinstance(finish_reason, str) else None,
                )
            )

        logger.debug(f"Image generation produced {len(images)} artifact(s)")
        return ImageResult(images=images)


async def generate_image(
    params: ImageRequest,
    api_key: str,
    *,
    http_config: HttpClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ImageResult:
    """Generate images with default client settings."""
    client = StabilityImageClient(http_config, transport=transport)
    return await client.generate_image(params, api_key)
