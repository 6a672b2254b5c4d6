"""Backup, restore and uninstall engines.

Public API:
    - backup / restore / uninstall / exists
    - backup_then_uninstall, switch_installation, revert
"""

from insti.core.engine.backup import backup
from insti.core.engine.restore import restore
from insti.core.engine.uninstall import (
    backup_then_uninstall,
    exists,
    revert,
    switch_installation,
    uninstall,
)

__all__ = [
    "backup",
    "backup_then_uninstall",
    "exists",
    "restore",
    "revert",
    "switch_installation",
    "uninstall",
]
