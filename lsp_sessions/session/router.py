"""Route files to sessions by project root."""

import os

from ..roots.resolver import RootResolver
from ..sessions_logging import LogCategory, get_category_logger
from .manager import SessionManager

logger = get_category_logger(LogCategory.SESSIONS)


class SessionRouter:
    """Pairs a root resolver with a session manager.

    Example:
        router = SessionRouter(root_pattern("package.json", ".git"), manager)
        session_id = router.session_for("/work/app/src/index.ts")
    """

    def __init__(self, resolver: RootResolver, manager: SessionManager):
        self.resolver = resolver
        self.manager = manager

    def root_for(self, path: str | os.PathLike) -> str | None:
        return self.resolver(path)

    def session_for(self, path: str | os.PathLike) -> int | None:
        """Return the session serving ``path``, starting it if needed.

        Returns:
            Session id, or None when no project root encloses ``path``
        """
        root_dir = self.root_for(path)
        if root_dir is None:
            logger.debug(f"No project root for {os.fspath(path)!r}")
            return None
        return self.manager.add(root_dir)
