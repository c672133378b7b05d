"""Configuration: settings model and loader."""

from .loader import ConfigLoader, load_settings
from .models import SessionsSettings, default_cache_dir, default_config_file

__all__ = [
    "ConfigLoader",
    "load_settings",
    "SessionsSettings",
    "default_cache_dir",
    "default_config_file",
]
