"""
Session transports.

A transport starts language-server sessions and looks them up by id. The
manager only relies on three guarantees: ``start_session`` returns an id
immediately, ``get_session`` returns None once a session is gone, and the
config's ``on_exit`` is called exactly once per started session, including
sessions whose process never came up.
"""

import os
import subprocess
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..sessions_logging import LogCategory, get_category_logger, session_extra
from .config import SessionConfig

logger = get_category_logger(LogCategory.SESSIONS)


@dataclass
class SessionHandle:
    """A live session as seen by the transport.

    ``process`` holds the server's pipes for the protocol layer; it is
    None for transports that do not spawn processes.
    """

    id: int
    name: str
    root_dir: str | None
    config: SessionConfig
    process: subprocess.Popen | None = None
    started_at: float = field(default_factory=time.time)

    @property
    def pid(self) -> int | None:
        return self.process.pid if self.process is not None else None

    def is_running(self) -> bool:
        return self.process is None or self.process.poll() is None


class SessionTransport(ABC):
    """Starts sessions and resolves session ids to handles."""

    @abstractmethod
    def start_session(self, config: SessionConfig) -> int:
        """Start a session and return its id without waiting for it to initialize."""
        pass

    @abstractmethod
    def get_session(self, session_id: int) -> SessionHandle | None:
        """Return the live session for ``session_id``, or None."""
        pass


class ProcessTransport(SessionTransport):
    """Runs each session as a child process watched by a daemon thread.

    Example:
        transport = ProcessTransport()
        session_id = transport.start_session(config)
        handle = transport.get_session(session_id)
        transport.stop_session(session_id)
    """

    def __init__(self, stop_timeout: float = 5.0):
        self.stop_timeout = stop_timeout
        self._lock = threading.Lock()
        self._sessions: dict[int, SessionHandle] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            session_id = self._next_id
            self._next_id += 1
        return session_id

    def start_session(self, config: SessionConfig) -> int:
        session_id = self._allocate_id()
        env = {**os.environ, **config.cmd_env} if config.cmd_env else None
        cwd = config.cmd_cwd or config.root_dir

        try:
            process = subprocess.Popen(
                config.cmd,
                cwd=cwd,
                env=env,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error(
                f"Failed to start {config.name} ({config.cmd[0]}): {e}",
                extra=session_extra(
                    session_id=session_id,
                    root_dir=config.root_dir,
                    server_name=config.name,
                ),
            )
            # Report the failure as an exit so owners can release the session.
            threading.Thread(
                target=self._finish,
                args=(session_id, config, None),
                name=f"lsp-session-{session_id}-failed",
                daemon=True,
            ).start()
            return session_id

        handle = SessionHandle(
            id=session_id,
            name=config.name,
            root_dir=config.root_dir,
            config=config,
            process=process,
        )
        with self._lock:
            self._sessions[session_id] = handle

        threading.Thread(
            target=self._watch,
            args=(handle,),
            name=f"lsp-session-{session_id}",
            daemon=True,
        ).start()
        logger.debug(f"Started session {session_id} ({config.name}, pid {process.pid})")
        return session_id

    def _watch(self, handle: SessionHandle) -> None:
        assert handle.process is not None
        returncode = handle.process.wait()
        self._finish(handle.id, handle.config, returncode)

    def _finish(
        self, session_id: int, config: SessionConfig, returncode: int | None
    ) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
        logger.debug(f"Session {session_id} ({config.name}) exited with {returncode}")

        if config.on_exit is None:
            return
        try:
            config.on_exit(returncode)
        except Exception:
            logger.exception(
                f"Exit callback for session {session_id} failed",
                extra=session_extra(session_id=session_id, root_dir=config.root_dir),
            )

    def get_session(self, session_id: int) -> SessionHandle | None:
        with self._lock:
            return self._sessions.get(session_id)

    def session_ids(self) -> list[int]:
        with self._lock:
            return list(self._sessions)

    def stop_session(self, session_id: int) -> bool:
        """Terminate a session's process, killing it after ``stop_timeout``.

        The exit notification is delivered by the watcher thread.

        Returns:
            True if a live session was stopped
        """
        handle = self.get_session(session_id)
        if handle is None or handle.process is None:
            return False

        process = handle.process
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=self.stop_timeout)
            except subprocess.TimeoutExpired:
                logger.warning(f"Session {session_id} ignored SIGTERM, killing it")
                process.kill()
                process.wait()
        return True

    def stop_all(self) -> None:
        """Stop every live session."""
        for session_id in self.session_ids():
            self.stop_session(session_id)
