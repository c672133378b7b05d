"""Installers for language-server binaries."""

from .executables import has_bins
from .npm import InstallInfo, NpmInstaller
from .vscode import format_vspackage_url

__all__ = [
    "has_bins",
    "InstallInfo",
    "NpmInstaller",
    "format_vspackage_url",
]
