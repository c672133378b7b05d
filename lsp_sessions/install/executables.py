"""Executable lookup on PATH."""

import os
import shutil


def has_bins(*names: str | os.PathLike) -> bool:
    """Check that every name is an executable on PATH or an executable path."""
    return all(shutil.which(os.fspath(name)) is not None for name in names)
