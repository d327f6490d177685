"""Client for the sandbox control socket."""

from __future__ import annotations

import json
import socket
from collections.abc import Sequence
from typing import IO, Any, Protocol

from sandbox_debug.errors import ControlError
from sandbox_debug.sandbox.models import LoggingChangeSet
from sandbox_debug.sandbox.registry import Sandbox

__all__ = [
    "SandboxControl",
    "SandboxControlClient",
]

DEBUG_STACKS = "debug.Stacks"
HEAP_PROFILE = "Profile.HeapProfile"
START_CPU_PROFILE = "Profile.StartCPUProfile"
STOP_CPU_PROFILE = "Profile.StopCPUProfile"
START_TRACE = "Profile.StartTrace"
STOP_TRACE = "Profile.StopTrace"
CHANGE_LOGGING = "Logging.Change"

_MAX_RESPONSE = 64 * 1024 * 1024


class SandboxControl(Protocol):
    """Remote diagnostic operations exposed by a running sandbox."""

    def stacks(self) -> str: ...

    def heap_profile(self, output: IO[bytes]) -> None: ...

    def start_cpu_profile(self, output: IO[bytes]) -> None: ...

    def stop_cpu_profile(self) -> None: ...

    def start_trace(self, output: IO[bytes]) -> None: ...

    def stop_trace(self) -> None: ...

    def change_logging(self, change: LoggingChangeSet) -> None: ...


class SandboxControlClient:
    """JSON-lines client that donates output files over a unix socket.

    Every call opens its own connection. Output destinations are passed to
    the sandbox as file descriptors so profile data is written directly by
    the sandbox process.
    """

    def __init__(self, *, address: str, sandbox_id: str, timeout: float = 30.0) -> None:
        self._address = address
        self._sandbox_id = sandbox_id
        self._timeout = timeout

    @classmethod
    def for_sandbox(cls, sandbox: Sandbox, *, timeout: float = 30.0) -> SandboxControlClient:
        return cls(address=sandbox.control_socket, sandbox_id=sandbox.id, timeout=timeout)

    def stacks(self) -> str:
        result = self._call(DEBUG_STACKS)
        if not isinstance(result, str):
            raise ControlError(DEBUG_STACKS, self._sandbox_id, "expected a string result")
        return result

    def heap_profile(self, output: IO[bytes]) -> None:
        self._call(HEAP_PROFILE, files=[output])

    def start_cpu_profile(self, output: IO[bytes]) -> None:
        self._call(START_CPU_PROFILE, files=[output])

    def stop_cpu_profile(self) -> None:
        self._call(STOP_CPU_PROFILE)

    def start_trace(self, output: IO[bytes]) -> None:
        self._call(START_TRACE, files=[output])

    def stop_trace(self) -> None:
        self._call(STOP_TRACE)

    def change_logging(self, change: LoggingChangeSet) -> None:
        self._call(CHANGE_LOGGING, change.to_payload())

    # ------------------------------------------------------------------ helpers
    def _call(
        self,
        method: str,
        arg: dict[str, Any] | None = None,
        *,
        files: Sequence[IO[bytes]] = (),
    ) -> Any:
        request = json.dumps({"method": method, "arg": arg}).encode("utf-8") + b"\n"
        try:
            with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
                sock.settimeout(self._timeout)
                sock.connect(self._address)
                if files:
                    for handle in files:
                        handle.flush()
                    socket.send_fds(sock, [request], [handle.fileno() for handle in files])
                else:
                    sock.sendall(request)
                raw = self._read_line(sock)
        except OSError as exc:
            raise ControlError(method, self._sandbox_id, str(exc)) from exc

        try:
            response = json.loads(raw)
        except ValueError as exc:
            raise ControlError(method, self._sandbox_id, f"malformed response: {exc}") from exc
        if not isinstance(response, dict):
            raise ControlError(method, self._sandbox_id, "malformed response")
        if response.get("error"):
            raise ControlError(method, self._sandbox_id, str(response["error"]))
        return response.get("result")

    @staticmethod
    def _read_line(sock: socket.socket) -> bytes:
        buffer = bytearray()
        while b"\n" not in buffer:
            chunk = sock.recv(65536)
            if not chunk:
                break
            buffer.extend(chunk)
            if len(buffer) > _MAX_RESPONSE:
                raise OSError("response exceeds size limit")
        line, _, _ = bytes(buffer).partition(b"\n")
        if not line:
            raise OSError("connection closed without a response")
        return line
