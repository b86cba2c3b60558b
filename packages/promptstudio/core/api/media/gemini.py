"""Gemini script client.

Sends a scriptwriting prompt to the Gemini ``generateContent`` endpoint and
returns the first candidate's text.

Wire contract:
    POST {base}/v1beta/models/{model}:generateContent?key=<api key>
    body: {contents: [{parts: [{text}]}], generationConfig: {...}, safetySettings: [...]}
    success: candidates[0].content.parts[0].text
    error:   {error: {message}}
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from promptstudio.core.api.http import AsyncApiClient, HttpClientConfig, QueryKeyAuth
from promptstudio.core.api.media.failures import failure_from_error, malformed_response
from promptstudio.core.api.media.models import Failure, FailureKind, ScriptResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-2.0-flash"

SCRIPTWRITER_PREAMBLE = (
    "As an expert and experienced professional scriptwriter with deep knowledge of "
    "narrative structure, character development, and compelling dialogue, please write "
    "a high-quality script based on the following request. Focus on creating engaging, "
    "well-structured content with proper formatting and natural dialogue. Avoid using "
    "asterisks or excessive punctuation. Create professional-grade material ready for "
    "production:\n\n"
)

SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_HARASSMENT",
)

GENERIC_ERROR = "Failed to generate script"
NO_CONTENT_ERROR = "No content generated"
ECHO_ERROR = "Model returned the prompt without proper generation"


class ScriptGenerationConfig(BaseModel):
    """Sampling parameters sent as ``generationConfig``."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(default=0.9, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=8192, gt=0)
    safety_threshold: str = "BLOCK_ONLY_HIGH"


class GeminiScriptClient:
    """Script generation client for the Gemini REST API (async).

    Holds no credentials; the key is supplied per call.

    Args:
        http_config: HTTP configuration (base URL, timeouts)
        model: Gemini model id
        generation: Sampling parameters
        use_preamble: Wrap the prompt in the scriptwriter instruction
        transport: Optional HTTPX transport (tests use httpx.MockTransport)

    Example:
        >>> client = GeminiScriptClient()
        >>> result = await client.generate_script("A robot learns to love", api_key)
        >>> print(result.content or result.error)
    """

    def __init__(
        self,
        http_config: HttpClientConfig | None = None,
        *,
        model: str = DEFAULT_MODEL,
        generation: ScriptGenerationConfig | None = None,
        use_preamble: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.http_config = http_config or HttpClientConfig(base_url=DEFAULT_BASE_URL)
        self.model = model
        self.generation = generation or ScriptGenerationConfig()
        self.use_preamble = use_preamble
        self._transport = transport

    def build_prompt(self, prompt: str) -> str:
        """Return the text actually sent to the model."""
        return f"{SCRIPTWRITER_PREAMBLE}{prompt}" if self.use_preamble else prompt

    def build_body(self, prompt: str) -> dict[str, Any]:
        """Build the ``generateContent`` request body."""
        gen = self.generation
        return {
            "contents": [{"parts": [{"text": self.build_prompt(prompt)}]}],
            "generationConfig": {
                "temperature": gen.temperature,
                "topK": gen.top_k,
                "topP": gen.top_p,
                "maxOutputTokens": gen.max_output_tokens,
            },
            "safetySettings": [
                {"category": category, "threshold": gen.safety_threshold}
                for category in SAFETY_CATEGORIES
            ],
        }

    async def generate_script(self, prompt: str, api_key: str) -> ScriptResult:
        """Generate a script for ``prompt``.

        Args:
            prompt: Non-empty user request
            api_key: Gemini API key

        Returns:
            ScriptResult with ``content`` on success, ``failure`` otherwise
        """
        path = f"/v1beta/models/{self.model}:generateContent"
        auth = QueryKeyAuth(param_name="key", api_key=api_key)

        try:
            async with AsyncApiClient(
                self.http_config, auth=auth, transport=self._transport
            ) as http:
                response = await http.post(path, json_body=self.build_body(prompt))
                data = http.json(response)
        except Exception as e:
            failure = failure_from_error(
                e, message_paths=("error.message",), generic_message=GENERIC_ERROR
            )
            logger.warning(f"Script generation failed: {failure.message}")
            return ScriptResult(failure=failure)

        try:
            return self._parse_response(data, prompt)
        except (TypeError, ValueError, KeyError) as e:
            failure = malformed_response(e)
            logger.warning(f"Script generation failed: {failure.message}")
            return ScriptResult(failure=failure)

    def _parse_response(self, data: Any, prompt: str) -> ScriptResult:
        """Extract the first candidate's text and screen it for echoes."""
        text = _first_candidate_text(data)
        if text is None:
            logger.warning("Script generation returned no candidates")
            return ScriptResult(
                failure=Failure(kind=FailureKind.EMPTY_RESULT, message=NO_CONTENT_ERROR)
            )

        # Without the preamble only an exact echo is degenerate.
        echoed = text == prompt or (self.use_preamble and self.build_prompt(prompt) in text)
        if not text.strip() or echoed:
            logger.warning("Script generation echoed the prompt")
            return ScriptResult(
                failure=Failure(kind=FailureKind.DEGENERATE_OUTPUT, message=ECHO_ERROR)
            )

        logger.debug(f"Script generated: {len(text)} chars")
        return ScriptResult(content=text)


def _first_candidate_text(data: Any) -> str | None:
    """Walk ``candidates[0].content.parts[0].text``; None if any step is missing."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


async def generate_script(
    prompt: str,
    api_key: str,
    *,
    http_config: HttpClientConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ScriptResult:
    """Generate a script with default client settings."""
    client = GeminiScriptClient(http_config, transport=transport)
    return await client.generate_script(prompt, api_key)
