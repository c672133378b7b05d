"""Helpers for nested settings tables."""

from collections.abc import Mapping, MutableMapping
from typing import Any


def deep_extend(dst: MutableMapping[str, Any], *sources: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Merge ``sources`` into ``dst`` left to right, recursing into mappings.

    Lists and scalars in a later source replace earlier values.

    Returns:
        ``dst``, updated in place
    """
    if not isinstance(dst, MutableMapping):
        raise TypeError(f"dst must be a mapping, got {type(dst).__name__}")
    for source in sources:
        if not isinstance(source, Mapping):
            raise TypeError(f"sources must be mappings, got {type(source).__name__}")
        for key, value in source.items():
            if isinstance(value, Mapping):
                existing = dst.get(key)
                base = existing if isinstance(existing, MutableMapping) else {}
                dst[key] = deep_extend(base, value)
            else:
                dst[key] = value
    return dst


def lookup_section(settings: Mapping[str, Any] | None, section: str) -> Any:
    """Look up a dotted ``section`` such as ``"python.analysis"``.

    Returns:
        The value, or None if any part of the path is missing
    """
    current: Any = settings
    for part in section.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current
