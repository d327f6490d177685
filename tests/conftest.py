"""Shared pytest fixtures."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import IO

import pytest

from sandbox_debug.errors import ControlError
from sandbox_debug.sandbox import ContainerRegistry, LoggingChangeSet

MakeContainer = Callable[..., Path]


class FakeControl:
    """Records every control call; ``fail`` maps a method name to an error message."""

    def __init__(self, sandbox_id: str = "sandbox-1") -> None:
        self.sandbox_id = sandbox_id
        self.calls: list[str] = []
        self.fail: dict[str, str] = {}
        self.outputs: dict[str, IO[bytes]] = {}
        self.closed_at_stop: dict[str, bool] = {}
        self.logging_changes: list[LoggingChangeSet] = []

    def _record(self, method: str) -> None:
        self.calls.append(method)
        if method in self.fail:
            raise ControlError(method, self.sandbox_id, self.fail[method])

    def stacks(self) -> str:
        self._record("stacks")
        return "goroutine 1 [running]:\nmain.main()"

    def heap_profile(self, output: IO[bytes]) -> None:
        self._record("heap_profile")
        output.write(b"heap")

    def start_cpu_profile(self, output: IO[bytes]) -> None:
        self.outputs["cpu"] = output
        self._record("start_cpu_profile")
        output.write(b"cpu")

    def stop_cpu_profile(self) -> None:
        self.closed_at_stop["cpu"] = self.outputs["cpu"].closed
        self._record("stop_cpu_profile")

    def start_trace(self, output: IO[bytes]) -> None:
        self.outputs["trace"] = output
        self._record("start_trace")
        output.write(b"trace")

    def stop_trace(self) -> None:
        self.closed_at_stop["trace"] = self.outputs["trace"].closed
        self._record("stop_trace")

    def change_logging(self, change: LoggingChangeSet) -> None:
        self._record("change_logging")
        self.logging_changes.append(change)


@pytest.fixture()
def control() -> FakeControl:
    return FakeControl()


@pytest.fixture()
def root_dir(tmp_path: Path) -> Path:
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture()
def make_container(root_dir: Path) -> MakeContainer:
    """Write ``<root>/<id>/meta.json``; the sandbox PID defaults to this process."""

    def _make(
        container_id: str,
        *,
        sandbox_id: str | None = "sandbox-1",
        pid: int | None = None,
        status: str = "running",
    ) -> Path:
        path = root_dir / container_id
        path.mkdir()
        sandbox = None
        if sandbox_id is not None:
            sandbox = {
                "id": sandbox_id,
                "pid": os.getpid() if pid is None else pid,
                "control_socket": str(root_dir / f"{sandbox_id}.sock"),
            }
        meta = {"id": container_id, "status": status, "sandbox": sandbox}
        (path / "meta.json").write_text(json.dumps(meta))
        return path

    return _make


@pytest.fixture()
def registry(root_dir: Path) -> ContainerRegistry:
    return ContainerRegistry(root_dir)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger("sandbox_debug")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
