"""Target resolution, profiling sessions, and action sequencing for ``debug``."""

from .logging_change import build_logging_change, parse_bool, parse_log_level
from .orchestrator import DebugOrchestrator
from .profiling import ProfileKind, ProfileSession, capture_heap_profile
from .request import DebugRequest, SandboxHandle, select_target
from .resolver import TargetResolver
from .signals import send_signal

__all__ = [
    "DebugOrchestrator",
    "DebugRequest",
    "ProfileKind",
    "ProfileSession",
    "SandboxHandle",
    "TargetResolver",
    "build_logging_change",
    "capture_heap_profile",
    "parse_bool",
    "parse_log_level",
    "select_target",
    "send_signal",
]
