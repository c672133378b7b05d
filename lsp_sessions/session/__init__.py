"""
Session management for language servers.

Key components:
- SessionManager: one session per project root, evicted on exit
- SessionConfig: validated config produced by a factory per root
- SessionTransport / ProcessTransport: start and look up sessions
- ExitHooks: ordered exit listeners
- SessionRouter: file path -> root -> session
"""

from .config import SessionConfig, SessionConfigFactory
from .hooks import ExitHooks, add_hook_after, add_hook_before
from .manager import SessionManager
from .router import SessionRouter
from .transport import ProcessTransport, SessionHandle, SessionTransport

__all__ = [
    "SessionConfig",
    "SessionConfigFactory",
    "ExitHooks",
    "add_hook_before",
    "add_hook_after",
    "SessionManager",
    "SessionRouter",
    "SessionTransport",
    "ProcessTransport",
    "SessionHandle",
]
