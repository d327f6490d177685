"""Error taxonomy shared by the debug command and its collaborators."""

from __future__ import annotations

import enum

__all__ = [
    "ActionError",
    "ControlError",
    "DebugError",
    "ExitStatus",
    "FatalDebugError",
    "RegistryError",
    "ResolutionError",
    "ResolutionErrorKind",
    "SignalError",
    "UsageError",
    "ValidationError",
    "ValidationErrorKind",
]


class ExitStatus(enum.IntEnum):
    """Process exit codes for the debug command."""

    SUCCESS = 0
    FAILURE = 1
    USAGE_ERROR = 2
    FATAL = 128


class RegistryError(RuntimeError):
    """Raised when container state cannot be listed or loaded."""


class ControlError(RuntimeError):
    """Raised when a sandbox control call fails."""

    def __init__(self, method: str, sandbox_id: str, cause: str) -> None:
        super().__init__(f"{method} on sandbox {sandbox_id!r}: {cause}")
        self.method = method
        self.sandbox_id = sandbox_id
        self.cause = cause


class DebugError(RuntimeError):
    """Base class for failures reported to the operator as a failed command."""


class UsageError(DebugError):
    """Raised when the target selection arguments are malformed."""


class ResolutionErrorKind(str, enum.Enum):
    LOAD_FAILED = "load-failed"
    LIST_FAILED = "list-failed"
    NOT_FOUND = "not-found"
    NOT_RUNNING = "not-running"


class ResolutionError(DebugError):
    """Raised when the target sandbox cannot be located or is not live."""

    def __init__(self, kind: ResolutionErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ValidationErrorKind(str, enum.Enum):
    INVALID_LOG_LEVEL = "invalid-log-level"
    INVALID_BOOLEAN = "invalid-boolean"


class ValidationError(DebugError):
    """Raised when a logging option cannot be parsed."""

    def __init__(self, kind: ValidationErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class SignalError(DebugError):
    """Raised when a signal cannot be delivered to the sandbox process."""

    def __init__(self, signal: int, pid: int, cause: str) -> None:
        super().__init__(f"failed to send signal {signal} to process {pid}: {cause}")
        self.signal = signal
        self.pid = pid


class ActionError(DebugError):
    """Raised when a diagnostic action fails against a resolved sandbox."""

    def __init__(self, operation: str, target: str, cause: str) -> None:
        super().__init__(f"{operation} ({target}): {cause}")
        self.operation = operation
        self.target = target


class FatalDebugError(Exception):
    """Raised when an active profiling session cannot be stopped.

    Kept outside the ``DebugError`` hierarchy: the command terminates the
    process instead of reporting an ordinary failure, since the profile
    output may be incomplete or corrupt.
    """

    def __init__(self, operation: str, target: str, cause: str) -> None:
        super().__init__(f"{operation} ({target}): {cause}")
        self.operation = operation
        self.target = target
