"""Structured errors with recovery suggestions.

Root discovery never raises for a missing root: "not found" is ``None``.
What does raise is a bad session or installer configuration, a missing
executable, a failed install, and ``OSError`` from probing the
filesystem. The library lets ``OSError`` propagate; the CLI converts it
with ``FileSystemError.from_os_error`` before printing.
"""

from __future__ import annotations

import errno
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Where an error came from."""

    CONFIGURATION = "configuration"  # Factory output, settings files
    FILE_SYSTEM = "file_system"  # Unreadable or looping paths
    SESSION = "session"  # Session startup and lifecycle
    INSTALL = "install"  # Server installation
    VALIDATION = "validation"  # Invalid arguments


@dataclass
class SessionsError(Exception):
    """Base class for lsp_sessions errors.

    Attributes:
        category: Error category.
        message: One-line description.
        suggestion: What the user can do about it.
        details: Extra context shown below the message (root_dir, output...).
        exit_code: CLI exit status.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Render message, suggestion and details, optionally with ANSI colors."""

        def paint(code: str, text: str) -> str:
            return f"\033[{code}m{text}\033[0m" if use_color else text

        lines = [f"{paint('91', 'Error:')} {self.message}"]
        if self.suggestion:
            lines.append(f"{paint('96', 'Suggestion:')} {self.suggestion}")
        lines.extend(
            paint("2", f"  {key}: {value}") for key, value in (self.details or {}).items()
        )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.format(use_color=False)


class SessionConfigurationError(SessionsError):
    """A session or settings configuration is missing required fields."""

    def __init__(
        self,
        message: str,
        root_dir: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion
            or "Make sure the config factory returns at least 'name' and 'cmd'",
            details={"root_dir": root_dir} if root_dir else None,
        )


class FileSystemError(SessionsError):
    """A path could not be probed while looking for a project root."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.FILE_SYSTEM,
            message=message,
            suggestion=suggestion,
            details={"path": path} if path else None,
        )

    @classmethod
    def from_os_error(cls, error: OSError) -> FileSystemError:
        reason = error.strerror or str(error)
        path = str(error.filename) if error.filename is not None else None
        if error.errno in (errno.EACCES, errno.EPERM):
            suggestion = "Check the permissions of the directories above the start path"
        elif error.errno == errno.ELOOP:
            suggestion = "Fix the symlink loop or start from a resolved path"
        else:
            suggestion = "Check that the path exists and is readable"
        message = f"Cannot access {path}: {reason}" if path else reason
        return cls(message, path=path, suggestion=suggestion)


class MissingExecutableError(SessionsError):
    """Required executables are not available on PATH."""

    def __init__(self, names: list[str]):
        super().__init__(
            category=ErrorCategory.INSTALL,
            message=f"Installation requires {', '.join(repr(n) for n in names)}",
            suggestion="Install the missing programs and make sure they are on PATH",
            details={"missing": ", ".join(names)},
        )
        self.names = names


class InstallError(SessionsError):
    """Installing a language server failed."""

    def __init__(
        self,
        server_name: str,
        output: str | None = None,
        suggestion: str | None = None,
    ):
        super().__init__(
            category=ErrorCategory.INSTALL,
            message=f"Installation of {server_name} failed",
            suggestion=suggestion or "Re-run with --verbose to see the installer output",
            details={"output": output.strip()} if output else None,
        )
        self.server_name = server_name


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Turn an exception into CLI output and an exit code.

    ``OSError`` is shown as a ``FileSystemError``; other non-lsp_sessions
    exceptions are shown with their message only.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, OSError):
        error_to_show: Exception = FileSystemError.from_os_error(error)
    else:
        error_to_show = error

    if isinstance(error_to_show, SessionsError):
        message = error_to_show.format(use_color=use_color)
        exit_code = error_to_show.exit_code
    else:
        label = "\033[91mError:\033[0m" if use_color else "Error:"
        message = f"{label} {error}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + "".join(traceback.format_exception(error))
    return message, exit_code
