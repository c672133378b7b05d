"""
Per-root-directory session manager.

Keeps at most one session per project root. Sessions are started lazily
the first time a root is added, shared by every later ``add`` of the same
root and forgotten as soon as they exit, so the next ``add`` starts a new
one.
"""

import functools
import os
import threading
from dataclasses import dataclass

from ..sessions_logging import LogCategory, get_category_logger, session_extra
from .config import SessionConfig, SessionConfigFactory
from .hooks import add_hook_before
from .transport import ProcessTransport, SessionHandle, SessionTransport

logger = get_category_logger(LogCategory.SESSIONS)


@dataclass
class _Reservation:
    """Tracks one ``add`` call's session until it is stored."""

    session_id: int | None = None
    exited: bool = False


class SessionManager:
    """Maps root directories to session ids, one session per root.

    Registry access is serialized with a reentrant lock, so exit
    notifications arriving on transport threads never interleave with
    ``add`` or ``clients``.

    Example:
        manager = SessionManager(
            lambda root_dir: {"name": "pyright", "cmd": ["pyright-langserver", "--stdio"]}
        )
        session_id = manager.add(find_git_ancestor(file_path))
        for handle in manager.clients():
            print(handle.name, handle.root_dir)
    """

    def __init__(
        self,
        make_config: SessionConfigFactory,
        transport: SessionTransport | None = None,
    ):
        """Initialize the manager.

        Args:
            make_config: Called with a root directory; returns the session config
            transport: Starts sessions (defaults to a ProcessTransport)
        """
        if not callable(make_config):
            raise TypeError("make_config must be callable")
        self._make_config = make_config
        self.transport = transport or ProcessTransport()
        self._clients: dict[str, int] = {}
        self._lock = threading.RLock()

    def add(self, root_dir: str | os.PathLike | None) -> int | None:
        """Return the session for ``root_dir``, starting one if needed.

        The config factory is only called when no session is registered for
        the root. The session id is recorded as soon as the transport
        returns it, before the server has finished starting.

        Args:
            root_dir: Project root; None or empty is a no-op

        Returns:
            Session id, or None when no root was given

        Raises:
            SessionConfigurationError: If the factory's config is invalid;
                nothing is registered in that case
        """
        if root_dir is None:
            return None
        key = os.fspath(root_dir)
        if not key:
            return None

        with self._lock:
            session_id = self._clients.get(key)
            if session_id is not None:
                return session_id

            config = SessionConfig.coerce(self._make_config(key), root_dir=key)
            reservation = _Reservation()
            config.root_dir = key
            config.on_exit = add_hook_before(
                config.on_exit,
                functools.partial(self._forget, key, reservation),
            )

            session_id = self.transport.start_session(config)
            reservation.session_id = session_id
            if reservation.exited:
                logger.warning(
                    f"Session {session_id} for {key} exited during startup",
                    extra=session_extra(session_id=session_id, root_dir=key),
                )
            else:
                self._clients[key] = session_id
                logger.info(
                    f"Started session {session_id} ({config.name}) for {key}",
                    extra=session_extra(
                        session_id=session_id, root_dir=key, server_name=config.name
                    ),
                )
            return session_id

    def _forget(self, root_dir: str, reservation: _Reservation, *args: object) -> None:
        with self._lock:
            reservation.exited = True
            if (
                reservation.session_id is not None
                and self._clients.get(root_dir) == reservation.session_id
            ):
                del self._clients[root_dir]
                logger.debug(
                    f"Session {reservation.session_id} for {root_dir} removed",
                    extra=session_extra(
                        session_id=reservation.session_id, root_dir=root_dir
                    ),
                )

    def clients(self) -> list[SessionHandle]:
        """Return the live sessions, skipping ids the transport no longer knows."""
        with self._lock:
            session_ids = list(self._clients.values())
        handles = []
        for session_id in session_ids:
            handle = self.transport.get_session(session_id)
            if handle is not None:
                handles.append(handle)
        return handles

    def get(self, root_dir: str | os.PathLike) -> int | None:
        """Return the registered session id for ``root_dir`` without starting one."""
        with self._lock:
            return self._clients.get(os.fspath(root_dir))

    def root_dirs(self) -> list[str]:
        with self._lock:
            return list(self._clients)

    def __contains__(self, root_dir: object) -> bool:
        if not isinstance(root_dir, str | os.PathLike):
            return False
        return self.get(root_dir) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)
