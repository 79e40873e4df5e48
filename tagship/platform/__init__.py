"""Platform layer: subprocess execution."""

from .process import MASK, ProcessError, redact, run, run_streaming

__all__ = [
    "MASK",
    "ProcessError",
    "redact",
    "run",
    "run_streaming",
]
