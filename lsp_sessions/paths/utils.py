"""
Filesystem primitives used by root discovery.

Paths are handled as plain strings joined with a single platform separator.
Two ascent primitives are provided: ``traverse_parents`` drives a callback
up the tree, ``iterate_parents`` yields the ancestors lazily.
"""

import errno
import os
import re
import stat
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Any

from ..sessions_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.PATHS)

IS_WINDOWS = os.name == "nt"
SEP = "\\" if IS_WINDOWS else "/"

# Upper bound on ascents; a correct walk ends at the filesystem root long before.
MAX_ASCENT = 100

_NOT_FOUND_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})
_UNRESOLVABLE_ERRNOS = _NOT_FOUND_ERRNOS | {errno.ELOOP}
_SEP_RUN = re.compile(re.escape(SEP) + "+")
_DRIVE = re.compile(r"^[A-Za-z]:$")

PathArg = str | os.PathLike


class PathKind(Enum):
    """What a ``stat`` found at a path. Only ``NONE`` is falsy."""

    NONE = "none"
    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"

    def __bool__(self) -> bool:
        return self is not PathKind.NONE


def exists(path: PathArg) -> PathKind:
    """Stat ``path`` and report what kind of entry lives there.

    A missing path is a normal ``PathKind.NONE`` result. Any other
    ``OSError`` (permission denied, I/O error) propagates.
    """
    try:
        mode = os.stat(path).st_mode
    except OSError as e:
        if e.errno in _NOT_FOUND_ERRNOS:
            return PathKind.NONE
        raise
    if stat.S_ISDIR(mode):
        return PathKind.DIRECTORY
    if stat.S_ISREG(mode):
        return PathKind.FILE
    return PathKind.OTHER


def is_dir(path: PathArg) -> bool:
    return exists(path) is PathKind.DIRECTORY


def is_file(path: PathArg) -> bool:
    return exists(path) is PathKind.FILE


def is_fs_root(path: str) -> bool:
    """Check whether ``path`` is the filesystem root representation."""
    if IS_WINDOWS:
        return path == SEP or bool(_DRIVE.match(path))
    return path == SEP


def dirname(path: PathArg | None) -> str | None:
    """Strip one trailing separator, then the final segment.

    Returns the root representation when nothing is left, so
    ``dirname(root) == root``. A Windows drive (``C:``) is its own root.
    ``None`` is passed through.
    """
    if path is None:
        return None
    path = os.fspath(path)
    if path.endswith(SEP):
        path = path[: -len(SEP)]
    if IS_WINDOWS and _DRIVE.match(path):
        return path
    head, sep, _ = path.rpartition(SEP)
    if not sep or not head:
        return SEP
    return head


def _flatten(parts: Iterable[Any]) -> Iterator[str]:
    for part in parts:
        if isinstance(part, list | tuple):
            yield from _flatten(part)
        else:
            yield os.fspath(part)


def join(*parts: Any) -> str:
    """Join path segments with ``SEP``, collapsing repeated separators.

    Nested lists and tuples are flattened in order. ``.`` and ``..`` are
    left alone.
    """
    return _SEP_RUN.sub(SEP.replace("\\", "\\\\"), SEP.join(_flatten(parts)))


def realpath(path: PathArg) -> str | None:
    """Resolve ``path`` to its symlink-free absolute form.

    Returns:
        The resolved path, or None when it does not exist or cannot be
        resolved (dangling link, symlink loop).
    """
    try:
        return os.path.realpath(path, strict=True)
    except OSError as e:
        if e.errno in _UNRESOLVABLE_ERRNOS:
            logger.debug(f"Cannot resolve {os.fspath(path)!r}: {e.strerror}")
            return None
        raise


def traverse_parents(
    path: PathArg, visit: Callable[[str, str], Any]
) -> tuple[str, str] | None:
    """Walk upward from ``path``, calling ``visit(directory, resolved_path)``.

    The first truthy ``visit`` result stops the walk and returns
    ``(directory, resolved_path)``. The filesystem root is visited last.

    Returns:
        The accepted directory and the resolved start path, or None.
    """
    resolved = realpath(path)
    if resolved is None:
        return None
    directory = resolved
    for _ in range(MAX_ASCENT):
        directory = dirname(directory)
        if directory is None:
            return None
        if visit(directory, resolved):
            return directory, resolved
        if is_fs_root(directory):
            return None
    logger.warning(f"Gave up ascending from {resolved!r} after {MAX_ASCENT} steps")
    return None


def iterate_parents(path: PathArg) -> Iterator[str]:
    """Yield the ancestors of ``path`` nearest first.

    The path is resolved before ascending. The filesystem root itself is
    never yielded; an unresolvable path yields nothing. There is no depth
    limit: the walk ends at the root, or when ``dirname`` stops ascending.
    """
    current = realpath(path)
    if current is None:
        return
    while not is_fs_root(current):
        parent = dirname(current)
        if parent is None or parent == current or is_fs_root(parent):
            return
        yield parent
        current = parent
