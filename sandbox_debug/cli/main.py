"""Click-based CLI for driving diagnostics against a running sandbox."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import click

from sandbox_debug.config import LOG_FORMATS, DebugSettings, load_settings
from sandbox_debug.debug import (
    DebugOrchestrator,
    DebugRequest,
    TargetResolver,
    select_target,
)
from sandbox_debug.errors import ExitStatus, FatalDebugError, UsageError
from sandbox_debug.logs import configure_logging
from sandbox_debug.sandbox import ContainerRegistry

logger = logging.getLogger(__name__)

_OutputPath = click.Path(dir_okay=False, writable=True, path_type=Path)


@dataclass
class CLIState:
    settings: DebugSettings

    def build_orchestrator(self) -> DebugOrchestrator:
        registry = ContainerRegistry(self.settings.root_dir)
        return DebugOrchestrator(
            TargetResolver(registry),
            sleep=time.sleep,
        )


@click.group()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    help="Runtime root directory holding container state.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS, case_sensitive=False),
    help="Format of the command's own log output.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log at debug verbosity.")
@click.pass_context
def app(ctx: click.Context, root: Path | None, log_format: str | None, verbose: bool) -> None:
    """Inspect and reconfigure running sandboxes."""

    try:
        settings = load_settings()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    settings = settings.merged(
        root_dir=root,
        log_level="debug" if verbose else None,
        log_format=log_format.lower() if log_format else None,
    )
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj = CLIState(settings=settings)


@app.command(short_help="shows a variety of debug information")
@click.argument("container_id", nargs=-1)
@click.option(
    "--pid",
    type=int,
    default=0,
    help="Sandbox process ID. Container ID is not necessary if this is set.",
)
@click.option("--stacks", is_flag=True, help="Dump all sandbox stacks to the log.")
@click.option(
    "--signal", type=int, default=-1, show_default=True, help="Send a signal to the sandbox."
)
@click.option("--profile-heap", type=_OutputPath, help="Write a heap profile to the given file.")
@click.option("--profile-cpu", type=_OutputPath, help="Write a CPU profile to the given file.")
@click.option(
    "--profile-delay",
    type=click.IntRange(min=0),
    help="Seconds to wait before stopping CPU profiling and tracing (default: 5).",
)
@click.option("--trace", type=_OutputPath, help="Write an execution trace to the given file.")
@click.option(
    "--strace",
    default="",
    help='Comma separated list of syscalls to trace. "all" enables all traces, "off" disables all.',
)
@click.option(
    "--log-level",
    default="",
    help="Log level to set: warning (0), info (1), or debug (2).",
)
@click.option(
    "--log-packets",
    default="",
    help="Enable or disable packet logging: true or false.",
)
@click.pass_context
def debug(
    ctx: click.Context,
    container_id: Sequence[str],
    pid: int,
    stacks: bool,
    signal: int,
    profile_heap: Path | None,
    profile_cpu: Path | None,
    profile_delay: int | None,
    trace: Path | None,
    strace: str,
    log_level: str,
    log_packets: str,
) -> None:
    """Show debug information for a sandbox given its CONTAINER_ID or --pid."""

    state: CLIState = ctx.obj
    try:
        target = select_target(pid, container_id)
    except UsageError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    request = DebugRequest(
        pid=pid,
        container_id=target,
        stacks=stacks,
        signal=signal,
        heap_profile=profile_heap,
        cpu_profile=profile_cpu,
        trace=trace,
        profile_delay=state.settings.profile_delay if profile_delay is None else profile_delay,
        strace=strace,
        log_level=log_level,
        log_packets=log_packets,
    )
    orchestrator = state.build_orchestrator()
    try:
        status = orchestrator.execute(request)
    except FatalDebugError as exc:
        logger.critical("%s", exc)
        ctx.exit(ExitStatus.FATAL)
    ctx.exit(status)


def main() -> None:
    """Entry point for console_scripts."""

    app(standalone_mode=True)
