"""Wire types exchanged with a sandbox's control server."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


class LogLevel(enum.IntEnum):
    """Sandbox log verbosity, encoded on the wire by its numeric code."""

    WARNING = 0
    INFO = 1
    DEBUG = 2


@dataclass(frozen=True, slots=True)
class LoggingChangeSet:
    """Atomic logging reconfiguration.

    A value field only takes effect when its paired ``set_*`` flag is true.
    An empty ``strace_whitelist`` with ``enable_strace`` traces every syscall.
    """

    set_strace: bool = False
    enable_strace: bool = False
    strace_whitelist: Sequence[str] = ()
    set_level: bool = False
    level: LogLevel = LogLevel.WARNING
    set_log_packets: bool = False
    log_packets: bool = False

    def to_payload(self) -> dict[str, Any]:
        return {
            "set_strace": self.set_strace,
            "enable_strace": self.enable_strace,
            "strace_whitelist": list(self.strace_whitelist),
            "set_level": self.set_level,
            "level": int(self.level),
            "set_log_packets": self.set_log_packets,
            "log_packets": self.log_packets,
        }


__all__ = ["LogLevel", "LoggingChangeSet"]
