"""Restore of an installation from an archive."""

from __future__ import annotations

from pathlib import Path

from insti.core.archive import ProjectArchive
from insti.core.context import InstallationContext
from insti.core.manifest import Manifest, write_manifest
from insti.core.protocols import NullProgressSink, ProgressSink
from insti.core.resources import describe_item, restore_item
from insti.core.snapshots import archive_path as default_archive_path
from insti.logger import get_logger

logger = get_logger(__name__)


def restore(
    manifest: Manifest,
    ctx: InstallationContext,
    *,
    archive_path: Path | None = None,
    progress: ProgressSink | None = None,
    dry_run: bool = False,
) -> bool:
    """Restore every resource item of ``manifest``.

    Items are restored in order regardless of earlier failures. Afterwards
    the manifest becomes the live installation file, even when some item
    failed, so a partially restored installation can still be uninstalled.

    Args:
        manifest: Installation to restore
        ctx: Installation context
        archive_path: Archive to read (defaults to the regular archive of
            ``manifest``; snapshots pass their own file)
        progress: Receives status lines
        dry_run: Only log what would be restored; the archive is still
            opened but nothing on the machine changes

    Returns:
        True if every item was restored

    Raises:
        ArchiveError: If the archive is missing or unreadable

    """
    progress = progress or NullProgressSink()
    source = archive_path or default_archive_path(
        ctx.base_directory, manifest.archive
    )
    logger.info("Restoring %s from %s", manifest, source)
    progress.report(f"Reading '{source}'")

    success = True
    with ProjectArchive.open_read(source) as archive:
        for item in manifest.items:
            description = describe_item(item)
            if dry_run:
                logger.info("[SIMULATE] Would restore %s", description)
                progress.report(f"Would restore {description}")
                continue
            progress.report(description)
            if not restore_item(item, archive, ctx):
                progress.failure(f"Restore failed: {description}")
                success = False

    if dry_run:
        logger.info(
            "[SIMULATE] Would write %s to %s", manifest, ctx.installation_file
        )
    else:
        write_manifest(manifest, ctx.installation_file)
    progress.report("Done.")
    return success
