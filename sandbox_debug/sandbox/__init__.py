"""Container registry and sandbox control collaborators."""

from .control import SandboxControl, SandboxControlClient
from .models import LoggingChangeSet, LogLevel
from .registry import Container, ContainerRegistry, Sandbox

__all__ = [
    "Container",
    "ContainerRegistry",
    "LogLevel",
    "LoggingChangeSet",
    "Sandbox",
    "SandboxControl",
    "SandboxControlClient",
]
