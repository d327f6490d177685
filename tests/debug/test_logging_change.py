"""Tests for composing logging reconfiguration requests."""

from __future__ import annotations

import pytest

from sandbox_debug.debug import build_logging_change, parse_bool, parse_log_level
from sandbox_debug.errors import ValidationError, ValidationErrorKind
from sandbox_debug.sandbox import LogLevel


def test_no_options_builds_nothing() -> None:
    assert build_logging_change() is None
    assert build_logging_change("", "", "") is None


def test_strace_off_only_disables() -> None:
    change = build_logging_change(strace="OFF")
    assert change is not None
    assert change.set_strace is True
    assert change.enable_strace is False
    assert change.set_level is False
    assert change.set_log_packets is False


def test_strace_all_traces_everything() -> None:
    change = build_logging_change(strace="All")
    assert change is not None
    assert change.set_strace and change.enable_strace
    assert list(change.strace_whitelist) == []


def test_strace_whitelist_is_split_on_commas() -> None:
    change = build_logging_change(strace="read,write")
    assert change is not None
    assert change.enable_strace is True
    assert list(change.strace_whitelist) == ["read", "write"]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("warning", LogLevel.WARNING),
        ("0", LogLevel.WARNING),
        ("Info", LogLevel.INFO),
        ("1", LogLevel.INFO),
        ("DEBUG", LogLevel.DEBUG),
        ("2", LogLevel.DEBUG),
    ],
)
def test_log_level_aliases(value: str, expected: LogLevel) -> None:
    assert parse_log_level(value) is expected


@pytest.mark.parametrize("value", ["bogus", "3", "-1", "warn", " info"])
def test_invalid_log_level(value: str) -> None:
    with pytest.raises(ValidationError) as excinfo:
        build_logging_change(log_level=value)
    assert excinfo.value.kind is ValidationErrorKind.INVALID_LOG_LEVEL


def test_log_packets_boolean_literals() -> None:
    assert parse_bool("true") is True
    assert parse_bool("T") is True
    assert parse_bool("0") is False
    with pytest.raises(ValidationError) as excinfo:
        parse_bool("yes")
    assert excinfo.value.kind is ValidationErrorKind.INVALID_BOOLEAN


def test_only_supplied_flags_are_set() -> None:
    change = build_logging_change(log_level="debug", log_packets="false")
    assert change is not None
    assert change.set_strace is False
    assert change.set_level is True
    assert change.level is LogLevel.DEBUG
    assert change.set_log_packets is True
    assert change.log_packets is False


def test_invalid_option_rejects_whole_change() -> None:
    with pytest.raises(ValidationError):
        build_logging_change(strace="all", log_level="info", log_packets="maybe")


def test_wire_payload() -> None:
    change = build_logging_change(strace="open,close", log_level="info", log_packets="true")
    assert change is not None
    assert change.to_payload() == {
        "set_strace": True,
        "enable_strace": True,
        "strace_whitelist": ["open", "close"],
        "set_level": True,
        "level": 1,
        "set_log_packets": True,
        "log_packets": True,
    }
