from __future__ import annotations

import os
from pathlib import Path

import pytest

from sandbox_debug.errors import RegistryError
from sandbox_debug.sandbox import ContainerRegistry, Sandbox


def test_list_ids_sorted_and_filtered(
    root_dir: Path, registry: ContainerRegistry, make_container
) -> None:
    make_container("ccc")
    make_container("aaa")
    make_container("bbb")
    (root_dir / "no-meta").mkdir()
    (root_dir / "stray.txt").write_text("x")
    assert registry.list_ids() == ["aaa", "bbb", "ccc"]


def test_list_missing_root(tmp_path: Path) -> None:
    with pytest.raises(RegistryError):
        ContainerRegistry(tmp_path / "absent").list_ids()


def test_load_exact_and_prefix(registry: ContainerRegistry, make_container) -> None:
    make_container("abcdef", sandbox_id="sb-1")
    make_container("abc", sandbox_id="sb-2")
    assert registry.load("abc").sandbox.id == "sb-2"
    assert registry.load("abcd").id == "abcdef"


def test_load_ambiguous_prefix(registry: ContainerRegistry, make_container) -> None:
    make_container("abc1")
    make_container("abc2")
    with pytest.raises(RegistryError, match="ambiguous"):
        registry.load("abc")


@pytest.mark.parametrize("container_id", ["../etc", "a/b", ""])
def test_load_rejects_invalid_ids(registry: ContainerRegistry, container_id: str) -> None:
    with pytest.raises(RegistryError, match="invalid container ID"):
        registry.load(container_id)


def test_load_malformed_metadata(registry: ContainerRegistry, make_container) -> None:
    path = make_container("abc")
    (path / "meta.json").write_text('{"id": "abc", "sandbox": {"id": "sb"}}')
    with pytest.raises(RegistryError, match="malformed"):
        registry.load("abc")


def test_default_control_socket(registry: ContainerRegistry, make_container) -> None:
    path = make_container("abc")
    (path / "meta.json").write_text('{"id": "abc", "sandbox": {"id": "sb-9", "pid": 12}}')
    container = registry.load("abc")
    assert container.sandbox_pid == 12
    assert container.sandbox.control_socket == "\0sandbox-debug.sb-9"
    assert container.status == "unknown"


def test_container_without_sandbox(registry: ContainerRegistry, make_container) -> None:
    make_container("abc", sandbox_id=None)
    container = registry.load("abc")
    assert container.sandbox is None
    assert container.sandbox_pid == -1


def test_is_running(monkeypatch) -> None:
    assert Sandbox(id="sb", pid=os.getpid(), control_socket="").is_running() is True
    assert Sandbox(id="sb", pid=0, control_socket="").is_running() is False

    def _gone(pid: int, sig: int) -> None:
        raise ProcessLookupError

    def _foreign(pid: int, sig: int) -> None:
        raise PermissionError

    monkeypatch.setattr(os, "kill", _gone)
    assert Sandbox(id="sb", pid=99, control_socket="").is_running() is False
    monkeypatch.setattr(os, "kill", _foreign)
    assert Sandbox(id="sb", pid=1, control_socket="").is_running() is True
