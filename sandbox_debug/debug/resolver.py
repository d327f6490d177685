"""Locate the sandbox targeted by a debug request."""

from __future__ import annotations

import logging

from sandbox_debug.errors import RegistryError, ResolutionError, ResolutionErrorKind
from sandbox_debug.sandbox.registry import Container, ContainerRegistry

from .request import SandboxHandle

__all__ = ["TargetResolver"]

logger = logging.getLogger(__name__)


class TargetResolver:
    """Turn a container ID or sandbox PID into a handle on a live sandbox."""

    def __init__(self, registry: ContainerRegistry) -> None:
        self.registry = registry

    def resolve(self, *, container_id: str = "", pid: int = 0) -> SandboxHandle:
        if container_id:
            container = self._load(container_id)
        else:
            container = self._find_by_pid(pid)

        sandbox = container.sandbox
        if sandbox is None or not sandbox.is_running():
            raise ResolutionError(
                ResolutionErrorKind.NOT_RUNNING,
                f"container {container.id!r} sandbox is not running",
            )
        logger.info(
            "Found sandbox %r, PID: %d",
            sandbox.id,
            sandbox.pid,
            extra={"container_id": container.id, "sandbox_id": sandbox.id},
        )
        return SandboxHandle(
            id=sandbox.id,
            pid=sandbox.pid,
            running=True,
            container_id=container.id,
            control_socket=sandbox.control_socket,
        )

    def _load(self, container_id: str) -> Container:
        try:
            return self.registry.load(container_id)
        except RegistryError as exc:
            raise ResolutionError(
                ResolutionErrorKind.LOAD_FAILED,
                f"loading container {container_id!r}: {exc}",
            ) from exc

    def _find_by_pid(self, pid: int) -> Container:
        try:
            ids = self.registry.list_ids()
        except RegistryError as exc:
            raise ResolutionError(
                ResolutionErrorKind.LIST_FAILED, f"listing containers: {exc}"
            ) from exc
        for container_id in ids:
            # A container that fails to load aborts the scan.
            candidate = self._load(container_id)
            if candidate.sandbox_pid == pid:
                return candidate
        raise ResolutionError(
            ResolutionErrorKind.NOT_FOUND, f"container with PID {pid} not found"
        )
