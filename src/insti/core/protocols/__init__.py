"""Core protocols for dependency injection and interface abstraction.

Available protocols:
    ProgressSink: Receives status lines from the backup/restore engines

Usage:
    from insti.core.protocols import ProgressSink, NullProgressSink

"""

from .progress import NullProgressSink, ProgressSink

__all__ = [
    "NullProgressSink",
    "ProgressSink",
]
