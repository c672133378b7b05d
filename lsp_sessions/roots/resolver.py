"""
Project root resolution by marker search.

A resolver takes a start path and returns the nearest directory (the start
itself or an ancestor) accepted by a predicate, or None. ``root_pattern``
builds resolvers from marker names:

    resolve = root_pattern("package.json", "tsconfig.json", ".git")
    root_dir = resolve("/work/app/src/index.ts")
"""

import os
from collections.abc import Callable, Iterator
from typing import Any

from ..paths import PathKind, dirname, exists, is_fs_root, iterate_parents, join, realpath
from ..sessions_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.ROOTS)

RootPredicate = Callable[[str], Any]
RootResolver = Callable[[str | os.PathLike], str | None]


def _candidates(resolved: str) -> Iterator[str]:
    yield resolved
    last = resolved
    for parent in iterate_parents(resolved):
        yield parent
        last = parent
    if not is_fs_root(last):
        root = dirname(last)
        if root is not None and is_fs_root(root):
            yield root


def search_ancestors(
    start_path: str | os.PathLike, predicate: RootPredicate
) -> str | None:
    """Find the nearest directory, starting at ``start_path``, that ``predicate`` accepts.

    The start path is resolved first and tested itself, then each ancestor
    in order of increasing distance, then the filesystem root.

    Args:
        start_path: File or directory to start from
        predicate: Called with a candidate path; a truthy result accepts it

    Returns:
        The accepted directory, or None if no candidate matched or the
        start path does not exist
    """
    if not callable(predicate):
        raise TypeError(f"predicate must be callable, got {type(predicate).__name__}")

    resolved = realpath(start_path)
    if resolved is None:
        return None

    for candidate in _candidates(resolved):
        if predicate(candidate):
            logger.debug(f"Root for {resolved!r}: {candidate!r}")
            return candidate
    return None


def marker_kind(directory: str, name: str) -> PathKind:
    """Stat ``directory/name``, treating unreadable entries as absent."""
    try:
        return exists(join(directory, name))
    except OSError as e:
        logger.debug(f"Cannot probe {name!r} in {directory!r}: {e}")
        return PathKind.NONE


def _flatten_markers(markers: tuple[Any, ...]) -> list[str]:
    flat: list[str] = []
    for marker in markers:
        if isinstance(marker, list | tuple):
            flat.extend(_flatten_markers(tuple(marker)))
        else:
            flat.append(os.fspath(marker))
    return flat


def root_pattern(*markers: Any) -> RootResolver:
    """Build a resolver accepting the nearest directory containing any marker.

    Markers are checked in the order given and may be files or
    directories. Nested lists are flattened. Each call returns an
    independent resolver.

    Returns:
        Function mapping a start path to a root directory or None
    """
    patterns = _flatten_markers(markers)

    def matcher(path: str) -> str | None:
        for pattern in patterns:
            if marker_kind(path, pattern):
                return path
        return None

    def resolver(start_path: str | os.PathLike) -> str | None:
        return search_ancestors(start_path, matcher)

    resolver.markers = tuple(patterns)  # type: ignore[attr-defined]
    return resolver


def find_git_ancestor(start_path: str | os.PathLike) -> str | None:
    """Nearest ancestor containing a ``.git`` directory."""
    return search_ancestors(
        start_path, lambda path: marker_kind(path, ".git") is PathKind.DIRECTORY
    )


def find_node_modules_ancestor(start_path: str | os.PathLike) -> str | None:
    """Nearest ancestor containing a ``node_modules`` directory."""
    return search_ancestors(
        start_path,
        lambda path: marker_kind(path, "node_modules") is PathKind.DIRECTORY,
    )


def find_package_json_ancestor(start_path: str | os.PathLike) -> str | None:
    """Nearest ancestor containing a ``package.json`` file."""
    return search_ancestors(
        start_path, lambda path: marker_kind(path, "package.json") is PathKind.FILE
    )
