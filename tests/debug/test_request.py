from __future__ import annotations

import dataclasses

import pytest

from sandbox_debug.debug import DebugRequest, select_target
from sandbox_debug.errors import UsageError


def test_container_id_required_without_pid() -> None:
    assert select_target(0, ["abc"]) == "abc"
    with pytest.raises(UsageError):
        select_target(0, [])
    with pytest.raises(UsageError):
        select_target(0, ["abc", "def"])


def test_positional_rejected_with_pid() -> None:
    assert select_target(42, []) == ""
    with pytest.raises(UsageError):
        select_target(42, ["abc"])


def test_request_is_immutable() -> None:
    request = DebugRequest(container_id="abc")
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.stacks = True  # type: ignore[misc]
    assert request.profile_delay == 5
    assert request.signal == -1
