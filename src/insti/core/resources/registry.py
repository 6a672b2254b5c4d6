"""Operations for <registry> items: registry subtrees stored as REGEDIT4."""

from __future__ import annotations

import tempfile
from pathlib import Path

from insti.core.archive import ProjectArchive
from insti.core.context import InstallationContext
from insti.core.manifest.model import RegistryKey
from insti.core.regfile import read_reg_file, write_reg_file
from insti.exceptions import ArchiveError, RegistryError
from insti.logger import get_logger

logger = get_logger(__name__)


def exists(item: RegistryKey, ctx: InstallationContext) -> bool:
    try:
        return ctx.registry.read_tree(item.key) is not None
    except RegistryError as e:
        logger.debug("Registry lookup failed: %s", e)
        return False


def backup(
    item: RegistryKey, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Export the subtree and add it to the archive as ``item.archive``."""
    try:
        entry = ctx.registry.read_tree(item.key)
    except RegistryError as e:
        logger.warning("Cannot read %s: %s", item.key, e)
        return False
    if entry is None:
        logger.warning("Cannot back up %s: key does not exist", item.key)
        return False

    with tempfile.TemporaryDirectory(prefix="insti-") as temp_dir:
        reg_file = Path(temp_dir) / "export.reg"
        try:
            write_reg_file(entry, reg_file)
            archive.add_file(reg_file, item.archive)
        except (OSError, RegistryError) as e:
            logger.warning("Cannot archive %s: %s", item.key, e)
            return False
    return True


def restore(
    item: RegistryKey, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Import the ``item.archive`` blob and write it back to the registry.

    A missing entry is logged and treated as nothing to restore.
    """
    if not archive.has_entry(item.archive):
        logger.warning(
            "Archive has no entry %s for %s", item.archive, item.key
        )
        return True

    with tempfile.TemporaryDirectory(prefix="insti-") as temp_dir:
        reg_file = Path(temp_dir) / "import.reg"
        try:
            archive.extract(item.archive, reg_file)
            entry = read_reg_file(reg_file)
            if entry is not None:
                ctx.registry.write_tree(entry, grant_everyone=True)
        except (ArchiveError, RegistryError) as e:
            logger.warning("Cannot restore %s: %s", item.key, e)
            return False
    return True


def uninstall(item: RegistryKey, ctx: InstallationContext) -> bool:
    try:
        ctx.registry.delete_tree(item.key)
    except RegistryError as e:
        logger.warning("Cannot delete %s: %s", item.key, e)
        return False
    return True
