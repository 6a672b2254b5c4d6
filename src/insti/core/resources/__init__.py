"""Operations on manifest resource items.

Each public function dispatches on the item variant; the variant specific
work lives in ``files`` and ``registry``. NetworkService items are
declared in manifests but never backed up, so every operation on them
succeeds without doing anything.
"""

from __future__ import annotations

from insti.core.archive import ProjectArchive
from insti.core.context import InstallationContext
from insti.core.manifest.model import (
    FileTree,
    NetworkService,
    RegistryKey,
    ResourceItem,
)
from insti.core.resources import files, registry
from insti.logger import get_logger

logger = get_logger(__name__)

__all__ = [
    "backup_item",
    "describe_item",
    "item_exists",
    "restore_item",
    "uninstall_item",
]


def _inert(item: NetworkService, operation: str) -> bool:
    logger.debug(
        "%s of tcpip-service '%s' (port %s) is not supported",
        operation,
        item.name,
        item.port,
    )
    return True


def describe_item(item: ResourceItem) -> str:
    """Human readable label reported while an item is processed."""
    match item:
        case FileTree(folder=folder):
            return f"Directory '{folder}'"
        case RegistryKey(key=key):
            return f"Registry '{key}'"
        case NetworkService(name=name, port=port):
            return f"Service '{name}' on port {port}"


def item_exists(item: ResourceItem, ctx: InstallationContext) -> bool:
    match item:
        case FileTree():
            return files.exists(item)
        case RegistryKey():
            return registry.exists(item, ctx)
        case NetworkService():
            return _inert(item, "Existence check")


def backup_item(
    item: ResourceItem, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Store an item in an archive opened for writing."""
    match item:
        case FileTree():
            return files.backup(item, archive, ctx)
        case RegistryKey():
            return registry.backup(item, archive, ctx)
        case NetworkService():
            return _inert(item, "Backup")


def restore_item(
    item: ResourceItem, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Recreate an item from an archive opened read-only."""
    match item:
        case FileTree():
            return files.restore(item, archive, ctx)
        case RegistryKey():
            return registry.restore(item, archive, ctx)
        case NetworkService():
            return _inert(item, "Restore")


def uninstall_item(item: ResourceItem, ctx: InstallationContext) -> bool:
    """Remove an item from the machine."""
    match item:
        case FileTree():
            return files.uninstall(item)
        case RegistryKey():
            return registry.uninstall(item, ctx)
        case NetworkService():
            return _inert(item, "Uninstall")
