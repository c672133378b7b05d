"""Settings model for lsp_sessions."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("text", "json")


def default_cache_dir() -> Path:
    """Host cache directory: %LOCALAPPDATA%, $XDG_CACHE_HOME or ~/.cache."""
    if os.name == "nt" and os.environ.get("LOCALAPPDATA"):
        return Path(os.environ["LOCALAPPDATA"])
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache)
    return Path.home() / ".cache"


def default_config_file() -> Path:
    """Default settings file under $XDG_CONFIG_HOME (or ~/.config)."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "lsp_sessions" / "config.json"


class SessionsSettings(BaseModel):
    """Settings with validation.

    The install directory is derived from the cache directory and handed
    to installers explicitly.
    """

    cache_dir: Path = Field(default_factory=default_cache_dir)
    install_subdir: str = Field(default="lsp_sessions")

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")
    log_file: Path | None = Field(default=None)

    project_markers: list[str] = Field(default_factory=lambda: [".git"])

    @property
    def install_dir(self) -> Path:
        return self.cache_dir / self.install_subdir

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(VALID_LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(VALID_LOG_FORMATS)}")
        return v

    @field_validator("install_subdir")
    @classmethod
    def validate_install_subdir(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("install_subdir cannot be empty")
        return v.strip()

    @field_validator("project_markers")
    @classmethod
    def validate_markers(cls, v: list[str]) -> list[str]:
        markers = [m.strip() for m in v if m and m.strip()]
        if not markers:
            raise ValueError("project_markers cannot be empty")
        return markers
