"""
Generic project root detection.

Walks up from a file or directory looking for common project markers,
for callers that have no language-specific marker set of their own.
"""

import os
from pathlib import Path
from typing import ClassVar

from .resolver import marker_kind, root_pattern


class ProjectRootDetector:
    """Find a project root by walking up from a path.

    Markers are checked in priority order within each directory; the
    nearest directory holding any of them wins.

    Example:
        root = ProjectRootDetector.find_project_root("/work/app/src/main.py")
        if root:
            print(f"Project root: {root}")
    """

    PROJECT_MARKERS: ClassVar[list[str]] = [
        ".git",
        "package.json",
        "pyproject.toml",
        "setup.py",
        "Cargo.toml",
        "go.mod",
        "compile_commands.json",
        "Makefile",
    ]

    @classmethod
    def find_project_root(cls, start_path: str | os.PathLike | None = None) -> str | None:
        """Walk up from start_path to find the project root.

        Args:
            start_path: Starting file or directory (defaults to CWD)

        Returns:
            Path to the project root, or None if not found
        """
        resolve = root_pattern(cls.PROJECT_MARKERS)
        return resolve(start_path if start_path is not None else Path.cwd())

    @classmethod
    def detect_from_cwd(cls) -> str:
        """Find the project root from CWD, falling back to CWD itself."""
        root = cls.find_project_root()
        return root if root else str(Path.cwd().resolve())

    @classmethod
    def is_project_root(cls, path: str | os.PathLike) -> bool:
        """Check whether ``path`` contains any project marker."""
        return cls.get_project_marker(path) is not None

    @classmethod
    def get_project_marker(cls, path: str | os.PathLike) -> str | None:
        """Get the first project marker found directly in ``path``.

        Returns:
            Name of the first marker found, or None
        """
        directory = os.path.realpath(path)
        for marker in cls.PROJECT_MARKERS:
            if marker_kind(directory, marker):
                return marker
        return None
