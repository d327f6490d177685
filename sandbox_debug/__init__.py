"""Diagnostic control for running sandboxed containers."""

__version__ = "0.1.0"

__all__ = ["__version__"]
