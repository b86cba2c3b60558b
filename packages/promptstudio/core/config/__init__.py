"""Configuration management for promptstudio."""

from promptstudio.core.config.loader import load_app_config, load_config
from promptstudio.core.config.models import (
    ApiKeysConfig,
    AppConfig,
    HttpSettings,
    ImageSettings,
    LoggingConfig,
    ScriptSettings,
    TTSMakerSettings,
    VoiceSettings,
)

__all__ = [
    "ApiKeysConfig",
    "AppConfig",
    "HttpSettings",
    "ImageSettings",
    "LoggingConfig",
    "ScriptSettings",
    "TTSMakerSettings",
    "VoiceSettings",
    "load_app_config",
    "load_config",
]
