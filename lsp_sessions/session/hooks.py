"""Ordered callback lists used for session exit notifications."""

from collections.abc import Callable, Iterator
from typing import Any

Listener = Callable[..., Any]


class ExitHooks:
    """Listeners invoked in registration order with the same arguments.

    Example:
        hooks = ExitHooks([forget_session])
        hooks.add(user_on_exit)
        hooks(0)  # forget_session(0), then user_on_exit(0)
    """

    def __init__(self, listeners: list[Listener | None] | None = None):
        self._listeners: list[Listener] = []
        for listener in listeners or []:
            if listener is not None:
                self.add(listener)

    def add(self, listener: Listener) -> None:
        """Append a listener; an ``ExitHooks`` is spliced in flat."""
        if not callable(listener):
            raise TypeError(f"listener must be callable, got {type(listener).__name__}")
        if isinstance(listener, ExitHooks):
            self._listeners.extend(listener)
        else:
            self._listeners.append(listener)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        for listener in list(self._listeners):
            listener(*args, **kwargs)

    def __iter__(self) -> Iterator[Listener]:
        return iter(list(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)

    def __repr__(self) -> str:
        return f"ExitHooks({len(self._listeners)} listeners)"


def add_hook_before(fn: Listener | None, new_fn: Listener) -> ExitHooks:
    """Compose hooks so ``new_fn`` runs first, then ``fn`` (if any)."""
    return ExitHooks([new_fn, fn])


def add_hook_after(fn: Listener | None, new_fn: Listener) -> ExitHooks:
    """Compose hooks so ``fn`` (if any) runs first, then ``new_fn``."""
    return ExitHooks([fn, new_fn])
