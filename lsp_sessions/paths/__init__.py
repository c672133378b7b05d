"""Path utilities: existence checks, string path manipulation and ascent."""

from .utils import (
    IS_WINDOWS,
    MAX_ASCENT,
    SEP,
    PathKind,
    dirname,
    exists,
    is_dir,
    is_file,
    is_fs_root,
    iterate_parents,
    join,
    realpath,
    traverse_parents,
)

__all__ = [
    "IS_WINDOWS",
    "MAX_ASCENT",
    "SEP",
    "PathKind",
    "exists",
    "is_dir",
    "is_file",
    "is_fs_root",
    "dirname",
    "join",
    "realpath",
    "traverse_parents",
    "iterate_parents",
]
