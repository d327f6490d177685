"""Compose the sandbox logging reconfiguration from command-line options."""

from __future__ import annotations

import logging

from sandbox_debug.errors import ValidationError, ValidationErrorKind
from sandbox_debug.sandbox.models import LoggingChangeSet, LogLevel

__all__ = ["build_logging_change", "parse_bool", "parse_log_level"]

logger = logging.getLogger(__name__)

LOG_LEVEL_ALIASES: dict[str, LogLevel] = {
    "warning": LogLevel.WARNING,
    "0": LogLevel.WARNING,
    "info": LogLevel.INFO,
    "1": LogLevel.INFO,
    "debug": LogLevel.DEBUG,
    "2": LogLevel.DEBUG,
}

BOOL_LITERALS: dict[str, bool] = {
    "1": True,
    "t": True,
    "T": True,
    "true": True,
    "TRUE": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "false": False,
    "FALSE": False,
    "False": False,
}


def parse_log_level(value: str) -> LogLevel:
    try:
        return LOG_LEVEL_ALIASES[value.lower()]
    except KeyError:
        raise ValidationError(
            ValidationErrorKind.INVALID_LOG_LEVEL, f"invalid log level {value!r}"
        ) from None


def parse_bool(value: str) -> bool:
    try:
        return BOOL_LITERALS[value]
    except KeyError:
        raise ValidationError(
            ValidationErrorKind.INVALID_BOOLEAN, f"invalid value for log_packets {value!r}"
        ) from None


def build_logging_change(
    strace: str = "",
    log_level: str = "",
    log_packets: str = "",
) -> LoggingChangeSet | None:
    """Validate all three options and merge them into one change set.

    Returns ``None`` when no option was supplied. Nothing is sent from here,
    so a validation failure never leaves the sandbox partially reconfigured.
    """

    if not (strace or log_level or log_packets):
        return None

    fields: dict[str, object] = {}
    if strace:
        fields["set_strace"] = True
        mode = strace.lower()
        if mode == "off":
            logger.info("Disabling strace")
        elif mode == "all":
            fields["enable_strace"] = True
            logger.info("Enabling all straces")
        else:
            fields["enable_strace"] = True
            fields["strace_whitelist"] = tuple(strace.split(","))
            logger.info("Enabling strace for syscalls: %s", strace)

    if log_level:
        level = parse_log_level(log_level)
        fields["set_level"] = True
        fields["level"] = level
        logger.info("Setting log level %s", level.name.lower())

    if log_packets:
        enabled = parse_bool(log_packets)
        fields["set_log_packets"] = True
        fields["log_packets"] = enabled
        logger.info("%s packet logging", "Enabling" if enabled else "Disabling")

    return LoggingChangeSet(**fields)  # type: ignore[arg-type]
