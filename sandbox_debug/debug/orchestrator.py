"""Sequence the diagnostic actions of one debug invocation."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable
from contextlib import ExitStack

from sandbox_debug.errors import ActionError, ControlError, DebugError, ExitStatus, UsageError
from sandbox_debug.sandbox.control import SandboxControl, SandboxControlClient

from .logging_change import build_logging_change
from .profiling import ProfileSession, capture_heap_profile
from .request import DebugRequest, SandboxHandle
from .resolver import TargetResolver
from .signals import send_signal

__all__ = ["DebugOrchestrator"]

logger = logging.getLogger(__name__)


def _default_control(handle: SandboxHandle) -> SandboxControl:
    return SandboxControlClient(address=handle.control_socket, sandbox_id=handle.id)


class DebugOrchestrator:
    """Resolve the target sandbox and run the requested actions against it.

    Actions run in a fixed order: signal, stacks, heap profile, CPU profile
    start, trace start, logging change. Timed captures are stopped after the
    profile delay, in reverse order of starting.
    """

    def __init__(
        self,
        resolver: TargetResolver,
        *,
        control_factory: Callable[[SandboxHandle], SandboxControl] = _default_control,
        sleep: Callable[[float], None] = time.sleep,
        kill: Callable[[int, int], None] = os.kill,
    ) -> None:
        self.resolver = resolver
        self.control_factory = control_factory
        self._sleep = sleep
        self._kill = kill

    def execute(self, request: DebugRequest) -> ExitStatus:
        """Run ``request`` and translate ordinary failures into a status.

        :class:`~sandbox_debug.errors.FatalDebugError` is not translated.
        """

        try:
            self.run(request)
        except UsageError as exc:
            logger.error("%s", exc)
            return ExitStatus.USAGE_ERROR
        except DebugError as exc:
            logger.error("%s", exc, extra={"error_type": type(exc).__name__})
            return ExitStatus.FAILURE
        return ExitStatus.SUCCESS

    def run(self, request: DebugRequest) -> SandboxHandle:
        if bool(request.pid) == bool(request.container_id):
            raise UsageError("select the target by either container ID or --pid")
        # Logging options are validated before anything touches the sandbox.
        change = build_logging_change(request.strace, request.log_level, request.log_packets)

        handle = self.resolver.resolve(container_id=request.container_id, pid=request.pid)
        control = self.control_factory(handle)

        send_signal(handle, request.signal, kill=self._kill)
        if request.stacks:
            self._dump_stacks(control, handle)
        if request.heap_profile is not None:
            capture_heap_profile(control, request.heap_profile)

        with ExitStack() as sessions:
            needs_delay = False
            if request.cpu_profile is not None:
                cpu = sessions.enter_context(ProfileSession.cpu(control, request.cpu_profile))
                cpu.start()
                needs_delay = True
                logger.info(
                    "CPU profile started for %d sec, writing to %r",
                    request.profile_delay,
                    str(request.cpu_profile),
                )
            if request.trace is not None:
                trace = sessions.enter_context(ProfileSession.trace(control, request.trace))
                trace.start()
                needs_delay = True
                logger.info(
                    "Tracing started for %d sec, writing to %r",
                    request.profile_delay,
                    str(request.trace),
                )

            if change is not None:
                try:
                    control.change_logging(change)
                except ControlError as exc:
                    raise ActionError("changing logging", handle.id, exc.cause) from exc
                logger.info("Logging options changed")

            if needs_delay:
                self._sleep(max(request.profile_delay, 0))
        return handle

    @staticmethod
    def _dump_stacks(control: SandboxControl, handle: SandboxHandle) -> None:
        logger.info("Retrieving sandbox stacks")
        try:
            stacks = control.stacks()
        except ControlError as exc:
            raise ActionError("retrieving stacks", handle.id, exc.cause) from exc
        logger.info("     *** Stack dump ***\n%s", stacks)
