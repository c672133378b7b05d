"""
Shared fixtures for the lsp_sessions test suite.

Provides:
- FakeTransport: in-memory session transport with manual exit control
- project_tree: a small project layout with a .git marker
- config factories that count their invocations
"""

import itertools
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from lsp_sessions.session import SessionConfig, SessionHandle, SessionTransport

# Marker name that will not exist anywhere above the pytest temp directory.
UNUSED_MARKER = ".lsp-sessions-test-marker"


class FakeTransport(SessionTransport):
    """Transport that records configs and exits sessions on demand."""

    def __init__(self, exit_on_start: bool = False):
        self.exit_on_start = exit_on_start
        self.started: list[SessionConfig] = []
        self.configs: dict[int, SessionConfig] = {}
        self._sessions: dict[int, SessionHandle] = {}
        self._ids = itertools.count(1)

    def start_session(self, config: SessionConfig) -> int:
        session_id = next(self._ids)
        self.started.append(config)
        self.configs[session_id] = config
        self._sessions[session_id] = SessionHandle(
            id=session_id,
            name=config.name,
            root_dir=config.root_dir,
            config=config,
        )
        if self.exit_on_start:
            self.exit(session_id)
        return session_id

    def get_session(self, session_id: int) -> SessionHandle | None:
        return self._sessions.get(session_id)

    def exit(self, session_id: int, code: int | None = 0) -> None:
        """Drop a session and deliver its exit notification."""
        self._sessions.pop(session_id, None)
        on_exit = self.configs[session_id].on_exit
        if on_exit is not None:
            on_exit(code)

    def forget(self, session_id: int) -> None:
        """Drop a session without notifying anyone."""
        self._sessions.pop(session_id, None)


class CountingFactory:
    """Config factory that records every root it is called with."""

    def __init__(self, on_exit: Callable[..., Any] | None = None, **extra: Any):
        self.calls: list[str] = []
        self.on_exit = on_exit
        self.extra = extra

    def __call__(self, root_dir: str) -> dict[str, Any]:
        self.calls.append(root_dir)
        config: dict[str, Any] = {"name": "fake-ls", "cmd": ["fake-ls", "--stdio"]}
        if self.on_exit is not None:
            config["on_exit"] = self.on_exit
        config.update(self.extra)
        return config


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo handlers installed by setup_logging so caplog keeps working."""
    yield
    logger = logging.getLogger("lsp_sessions")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def factory() -> CountingFactory:
    return CountingFactory()


@pytest.fixture()
def project_tree(tmp_path: Path) -> Path:
    """Create ``proj/.git``, ``proj/sub/a.txt``, ``proj/sub1/x.py``, ``proj/sub2/y.py``."""
    root = tmp_path.resolve() / "proj"
    (root / ".git").mkdir(parents=True)
    (root / "sub").mkdir()
    (root / "sub" / "a.txt").write_text("a")
    (root / "sub1").mkdir()
    (root / "sub1" / "x.py").write_text("x = 1\n")
    (root / "sub2").mkdir()
    (root / "sub2" / "y.py").write_text("y = 2\n")
    return root
