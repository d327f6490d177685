"""Administrative helpers for inspecting the container registry."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from sandbox_debug.config import load_settings
from sandbox_debug.errors import RegistryError

from .registry import ContainerRegistry

app = typer.Typer(help="Inspect containers recorded under the runtime root directory.")

RootOption = Annotated[
    Path | None,
    typer.Option(
        "--root",
        envvar="SANDBOX_DEBUG_ROOT",
        help="Runtime root directory holding container state",
        show_default=False,
    ),
]


def _load_registry(root: Path | None) -> ContainerRegistry:
    settings = load_settings().merged(root_dir=root)
    return ContainerRegistry(settings.root_dir)


@app.command("list")
def list_containers(root: RootOption = None) -> None:
    """Print every container with its sandbox PID and running state."""

    registry = _load_registry(root)
    try:
        ids = registry.list_ids()
    except RegistryError as exc:
        raise typer.BadParameter(str(exc), param_hint="--root") from None
    for container_id in ids:
        try:
            container = registry.load(container_id)
        except RegistryError as exc:
            typer.echo(f"{container_id}: unreadable ({exc})", err=True)
            continue
        sandbox = container.sandbox
        if sandbox is None:
            typer.echo(f"{container.id}: no sandbox | status={container.status}")
            continue
        state = "running" if sandbox.is_running() else "stopped"
        typer.echo(
            f"{container.id}: sandbox={sandbox.id} | pid={sandbox.pid} | "
            f"{state} | status={container.status}"
        )


@app.command()
def show(
    container_id: Annotated[str, typer.Argument(help="Container ID or unique prefix")],
    root: RootOption = None,
) -> None:
    """Print the metadata of a single container."""

    registry = _load_registry(root)
    try:
        container = registry.load(container_id)
    except RegistryError as exc:
        raise typer.BadParameter(str(exc), param_hint="CONTAINER_ID") from None
    typer.echo(f"id: {container.id}")
    typer.echo(f"status: {container.status}")
    typer.echo(f"path: {container.path}")
    if container.sandbox is not None:
        typer.echo(f"sandbox: {container.sandbox.id}")
        typer.echo(f"pid: {container.sandbox.pid}")
        typer.echo(f"running: {str(container.sandbox.is_running()).lower()}")


def main() -> None:
    """Entry point for console_scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover - module executed as a script
    app()
