"""Utility modules for lsp_sessions."""

from .tables import deep_extend, lookup_section

__all__ = [
    "deep_extend",
    "lookup_section",
]
