"""Application configuration models."""

from __future__ import annotations

from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field

from promptstudio.core.api.http import HttpClientConfig
from promptstudio.core.api.media.models import StylePreset


class ConfigBase(BaseModel):
    """Base class for promptstudio configuration sections."""

    model_config = ConfigDict(extra="ignore")  # Forward compatibility


class LoggingConfig(ConfigBase):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False


class ApiKeysConfig(ConfigBase):
    """Vendor credentials. Unset keys are filled from the environment."""

    gemini: str | None = Field(default=None, repr=False)
    stability: str | None = Field(default=None, repr=False)
    elevenlabs: str | None = Field(default=None, repr=False)
    ttsmaker: str | None = Field(default=None, repr=False)


class HttpSettings(ConfigBase):
    """Transport settings shared by every vendor client."""

    timeout_s: float = Field(default=120.0, gt=0)
    connect_timeout_s: float = Field(default=10.0, gt=0)
    user_agent: str = "promptstudio/0.3"


class ScriptSettings(ConfigBase):
    """Gemini script generation settings."""

    base_url: str = "https://generativelanguage.googleapis.com"
    model: str = "gemini-2.0-flash"
    use_preamble: bool = True
    temperature: float = Field(default=0.9, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.95, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=8192, gt=0)
    safety_threshold: str = "BLOCK_ONLY_HIGH"


class ImageSettings(ConfigBase):
    """Stability image generation settings."""

    base_url: str = "https://api.stability.ai"
    engine: str = "stable-diffusion-xl-1024-v1-0"
    default_style: StylePreset = StylePreset.ENHANCE


class VoiceSettings(ConfigBase):
    """ElevenLabs speech settings."""

    base_url: str = "https://api.elevenlabs.io"
    model_id: str = "eleven_multilingual_v2"


class TTSMakerSettings(ConfigBase):
    """TTSMaker speech settings."""

    base_url: str = "https://api.ttsmaker.com"


class AppConfig(ConfigBase):
    """Application-level configuration."""

    logging: LoggingConfig = LoggingConfig()
    api_keys: ApiKeysConfig = ApiKeysConfig()
    http: HttpSettings = HttpSettings()
    script: ScriptSettings = ScriptSettings()
    image: ImageSettings = ImageSettings()
    voice: VoiceSettings = VoiceSettings()
    ttsmaker: TTSMakerSettings = TTSMakerSettings()
    library_dir: str = "data/library"

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("promptstudio.json")

    def http_config(self, base_url: str) -> HttpClientConfig:
        """Build the HTTP configuration for one vendor endpoint."""
        return HttpClientConfig(
            base_url=base_url,
            timeout=httpx.Timeout(self.http.timeout_s, connect=self.http.connect_timeout_s),
            user_agent=self.http.user_agent,
        )
