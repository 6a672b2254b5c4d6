"""Command handlers for the insti CLI."""

from .backup import BackupHandler, SnapshotHandler
from .base import BaseCommandHandler, ConsoleProgressSink
from .catalog import ListHandler
from .restore import RestoreHandler, RevertHandler, UninstallHandler

__all__ = [
    "BackupHandler",
    "BaseCommandHandler",
    "ConsoleProgressSink",
    "ListHandler",
    "RestoreHandler",
    "RevertHandler",
    "SnapshotHandler",
    "UninstallHandler",
]
