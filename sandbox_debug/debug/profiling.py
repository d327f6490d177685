"""Output lifecycle for heap snapshots and timed CPU/trace captures."""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import IO

from sandbox_debug.errors import ActionError, ControlError, FatalDebugError
from sandbox_debug.sandbox.control import SandboxControl

__all__ = ["ProfileKind", "ProfileSession", "capture_heap_profile", "open_destination"]

logger = logging.getLogger(__name__)


class ProfileKind(str, enum.Enum):
    HEAP = "heap profile"
    CPU = "CPU profile"
    TRACE = "trace"


def open_destination(kind: ProfileKind, path: Path) -> IO[bytes]:
    """Create (or truncate) the file a capture is written to."""

    try:
        return Path(path).open("wb")
    except OSError as exc:
        raise ActionError(f"creating {kind.value} file", str(path), str(exc)) from exc


def capture_heap_profile(control: SandboxControl, path: Path) -> None:
    """Write a one-shot heap snapshot to ``path``."""

    with open_destination(ProfileKind.HEAP, path) as output:
        try:
            control.heap_profile(output)
        except ControlError as exc:
            raise ActionError("writing heap profile", str(path), exc.cause) from exc
    logger.info("Heap profile written to %r", str(path))


class ProfileSession:
    """A timed capture that owns its output file.

    Entering the session opens the destination. Leaving it stops the capture
    if it was started, then closes the destination, on every exit path. A
    failure to stop is raised as :class:`FatalDebugError`.
    """

    def __init__(
        self,
        kind: ProfileKind,
        path: Path,
        *,
        start: Callable[[IO[bytes]], None],
        stop: Callable[[], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.kind = kind
        self.path = Path(path)
        self._start = start
        self._stop = stop
        self._clock = clock
        self._output: IO[bytes] | None = None
        self.active = False
        self.started_at: float | None = None

    @classmethod
    def cpu(cls, control: SandboxControl, path: Path) -> ProfileSession:
        return cls(
            ProfileKind.CPU,
            path,
            start=control.start_cpu_profile,
            stop=control.stop_cpu_profile,
        )

    @classmethod
    def trace(cls, control: SandboxControl, path: Path) -> ProfileSession:
        return cls(ProfileKind.TRACE, path, start=control.start_trace, stop=control.stop_trace)

    def __enter__(self) -> ProfileSession:
        self._output = open_destination(self.kind, self.path)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.finish()
        finally:
            self.close()

    def start(self) -> None:
        if self._output is None:
            raise RuntimeError(f"{self.kind.value} destination is not open")
        try:
            self._start(self._output)
        except ControlError as exc:
            raise ActionError(f"starting {self.kind.value}", str(self.path), exc.cause) from exc
        self.active = True
        self.started_at = self._clock()

    def finish(self) -> None:
        """Stop an active capture; a no-op when it never started."""

        if not self.active:
            return
        self.active = False
        try:
            self._stop()
        except ControlError as exc:
            raise FatalDebugError(
                f"stopping {self.kind.value}", str(self.path), exc.cause
            ) from exc
        elapsed = self._clock() - (self.started_at or 0.0)
        logger.info(
            "%s written to %r",
            self.kind.value[0].upper() + self.kind.value[1:],
            str(self.path),
            extra={"elapsed_s": round(elapsed, 3)},
        )

    def close(self) -> None:
        if self._output is not None and not self._output.closed:
            self._output.close()
