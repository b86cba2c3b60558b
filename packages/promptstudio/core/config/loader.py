"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from promptstudio.core.config.models import AppConfig

logger = logging.getLogger(__name__)

# Default app config path (can be overridden)
_DEFAULT_APP_CONFIG_PATH = AppConfig.default_path()

# Config field -> environment variable consulted when the field is unset.
API_KEY_ENV_VARS = {
    "gemini": "GEMINI_API_KEY",
    "stability": "STABILITY_API_KEY",
    "elevenlabs": "ELEVENLABS_API_KEY",
    "ttsmaker": "TTSMAKER_API_KEY",
}


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("promptstudio.json")
        'json'
        >>> detect_format("promptstudio.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()
    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Format is auto-detected from the file extension.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)
    if fmt == "json":
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(content).__name__}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing default file yields all defaults; an explicitly named file must
    exist. API keys left unset are read from the environment.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to promptstudio.json

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValidationError: If config is invalid
    """
    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH
        config = (
            AppConfig.model_validate(load_config(path)) if Path(path).exists() else AppConfig()
        )
    else:
        config = AppConfig.model_validate(load_config(path))

    return _load_env_vars_into_config(config)


def _load_env_vars_into_config(config: AppConfig) -> AppConfig:
    """Fill unset API keys from the environment."""
    updates = {}
    for field, env_var in API_KEY_ENV_VARS.items():
        if getattr(config.api_keys, field):
            continue
        value = os.getenv(env_var)
        if value:
            logger.debug(f"Loaded {env_var} from environment")
            updates[field] = value

    if updates:
        config.api_keys = config.api_keys.model_copy(update=updates)
    return config
