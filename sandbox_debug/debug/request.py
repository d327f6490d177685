"""Immutable description of a debug invocation and its resolved target."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from sandbox_debug.errors import UsageError

__all__ = ["DebugRequest", "SandboxHandle", "select_target"]


@dataclass(frozen=True, slots=True)
class DebugRequest:
    """Every action requested for one invocation of the debug command.

    Exactly one of ``pid`` (non-zero) or ``container_id`` selects the target.
    Empty strings mean the corresponding action was not requested.
    """

    pid: int = 0
    container_id: str = ""
    stacks: bool = False
    signal: int = -1
    heap_profile: Path | None = None
    cpu_profile: Path | None = None
    trace: Path | None = None
    profile_delay: int = 5
    strace: str = ""
    log_level: str = ""
    log_packets: str = ""


@dataclass(frozen=True, slots=True)
class SandboxHandle:
    """A resolved, live sandbox."""

    id: str
    pid: int
    running: bool
    container_id: str
    control_socket: str


def select_target(pid: int, args: Sequence[str]) -> str:
    """Validate positional arguments against the selection mode.

    Returns the container ID when selecting by ID, or ``""`` when a PID is
    given.
    """

    if pid == 0:
        if len(args) != 1:
            raise UsageError("exactly one container ID is required when --pid is not set")
        return args[0]
    if args:
        raise UsageError("a container ID must not be given together with --pid")
    return ""
