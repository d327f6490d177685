"""Read-only access to container state stored under the runtime root directory."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sandbox_debug.errors import RegistryError

__all__ = [
    "METADATA_FILENAME",
    "Container",
    "ContainerRegistry",
    "Sandbox",
]

METADATA_FILENAME = "meta.json"
_CONTROL_SOCKET_PREFIX = "\0sandbox-debug."
_VALID_ID = re.compile(r"^[\w+\-.]+$")


@dataclass(frozen=True, slots=True)
class Sandbox:
    """The sandbox process hosting one or more containers."""

    id: str
    pid: int
    control_socket: str

    def is_running(self) -> bool:
        if self.pid <= 0:
            return False
        try:
            os.kill(self.pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # The process exists but belongs to another user.
            return True
        return True


@dataclass(frozen=True, slots=True)
class Container:
    """Metadata persisted for a single container."""

    id: str
    status: str
    sandbox: Sandbox | None
    path: Path

    @property
    def sandbox_pid(self) -> int:
        return self.sandbox.pid if self.sandbox is not None else -1


class ContainerRegistry:
    """Enumerate and load containers recorded under ``root_dir``.

    Each container lives in ``<root_dir>/<container id>/meta.json``.
    """

    def __init__(self, root_dir: Path) -> None:
        self.root_dir = Path(root_dir)

    def list_ids(self) -> list[str]:
        """Return every container ID under the root, sorted by name."""

        try:
            entries = list(self.root_dir.iterdir())
        except OSError as exc:
            raise RegistryError(f"reading root directory {self.root_dir}: {exc}") from exc
        return sorted(
            entry.name
            for entry in entries
            if entry.is_dir() and (entry / METADATA_FILENAME).is_file()
        )

    def load(self, container_id: str) -> Container:
        """Load a container by full ID or unique ID prefix."""

        if not _VALID_ID.match(container_id):
            raise RegistryError(f"invalid container ID {container_id!r}")
        path = self._find_container_dir(container_id)
        meta_path = path / METADATA_FILENAME
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise RegistryError(f"reading container metadata {meta_path}: {exc}") from exc
        return self._container_from_dict(data, path)

    def _find_container_dir(self, container_id: str) -> Path:
        exact = self.root_dir / container_id
        if (exact / METADATA_FILENAME).is_file():
            return exact
        matches = [cid for cid in self.list_ids() if cid.startswith(container_id)]
        if not matches:
            raise RegistryError(f"container {container_id!r} does not exist")
        if len(matches) > 1:
            raise RegistryError(f"container ID {container_id!r} is ambiguous: {matches}")
        return self.root_dir / matches[0]

    @staticmethod
    def _container_from_dict(data: Any, path: Path) -> Container:
        if not isinstance(data, dict):
            raise RegistryError(f"malformed container metadata in {path}")
        sandbox = None
        raw_sandbox = data.get("sandbox")
        try:
            if raw_sandbox is not None:
                sandbox_id = str(raw_sandbox["id"])
                sandbox = Sandbox(
                    id=sandbox_id,
                    pid=int(raw_sandbox["pid"]),
                    control_socket=str(
                        raw_sandbox.get("control_socket")
                        or f"{_CONTROL_SOCKET_PREFIX}{sandbox_id}"
                    ),
                )
            return Container(
                id=str(data.get("id") or path.name),
                status=str(data.get("status", "unknown")),
                sandbox=sandbox,
                path=path,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise RegistryError(f"malformed container metadata in {path}: {exc}") from exc
