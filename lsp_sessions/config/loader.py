"""Settings loading with file, environment and explicit overrides."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import SessionConfigurationError
from ..sessions_logging import get_logger
from .models import SessionsSettings, default_config_file

logger = get_logger()

ENV_PREFIX = "LSP_SESSIONS_"
ENV_FIELDS = ("cache_dir", "install_subdir", "log_level", "log_format", "log_file")


class ConfigLoader:
    """Builds ``SessionsSettings`` from every configuration source."""

    def __init__(self, config_file: Path | None = None):
        self._explicit_file = config_file is not None
        self.config_file = Path(config_file) if config_file else default_config_file()

    def load(self, **overrides: Any) -> SessionsSettings:
        """Load settings.

        Precedence (highest to lowest):
        1. Explicit overrides (None values are ignored)
        2. Environment variables (LSP_SESSIONS_*)
        3. JSON settings file
        4. Defaults

        Raises:
            SessionConfigurationError: If a source is unreadable or the
                merged settings are invalid
        """
        config_dict: dict[str, Any] = {}

        file_settings = self._load_file()
        config_dict.update(file_settings)
        if file_settings:
            logger.debug(f"Loaded {len(file_settings)} settings from {self.config_file}")

        env_settings = self._load_env()
        config_dict.update(env_settings)
        if env_settings:
            logger.debug(f"Applied {len(env_settings)} environment variables")

        explicit = {k: v for k, v in overrides.items() if v is not None}
        config_dict.update(explicit)
        if explicit:
            logger.debug(f"Applied {len(explicit)} explicit overrides")

        try:
            return SessionsSettings(**config_dict)
        except ValidationError as e:
            raise SessionConfigurationError(
                f"Invalid settings: {e.errors()[0]['msg']}",
                suggestion=f"Check {self.config_file} and the {ENV_PREFIX}* variables",
            ) from e

    def _load_file(self) -> dict[str, Any]:
        if not self.config_file.exists():
            if self._explicit_file:
                raise SessionConfigurationError(
                    f"Settings file not found: {self.config_file}",
                    suggestion="Pass an existing JSON file",
                )
            return {}
        try:
            with open(self.config_file) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise SessionConfigurationError(
                f"Cannot read settings file {self.config_file}: {e}",
                suggestion="Fix the JSON syntax or remove the file",
            ) from e
        if not isinstance(data, dict):
            raise SessionConfigurationError(
                f"Settings file {self.config_file} must contain a JSON object"
            )
        return data

    def _load_env(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for name in ENV_FIELDS:
            value = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value:
                settings[name] = value
        markers = os.environ.get(f"{ENV_PREFIX}PROJECT_MARKERS")
        if markers:
            settings["project_markers"] = markers.split(",")
        return settings


def load_settings(config_file: Path | None = None, **overrides: Any) -> SessionsSettings:
    """Load settings with the default precedence."""
    return ConfigLoader(config_file).load(**overrides)
