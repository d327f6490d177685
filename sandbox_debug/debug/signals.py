"""Signal delivery to the sandbox process."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from signal import valid_signals

from sandbox_debug.errors import SignalError

from .request import SandboxHandle

__all__ = ["send_signal"]

logger = logging.getLogger(__name__)


def send_signal(
    handle: SandboxHandle,
    signal: int,
    *,
    kill: Callable[[int, int], None] = os.kill,
) -> bool:
    """Deliver ``signal`` to the sandbox; non-positive values are a no-op.

    Returns whether a delivery was attempted.
    """

    if signal <= 0:
        return False
    if signal not in valid_signals():
        raise SignalError(signal, handle.pid, "not a valid signal number")
    logger.info("Sending signal %d to process: %d", signal, handle.pid)
    try:
        kill(handle.pid, signal)
    except OverflowError as exc:
        raise SignalError(signal, handle.pid, str(exc)) from exc
    except OSError as exc:
        raise SignalError(signal, handle.pid, exc.strerror or str(exc)) from exc
    return True
