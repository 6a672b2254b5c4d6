"""Backup of an installation into its archive or a new snapshot."""

from __future__ import annotations

from insti.constants import MANIFEST_FILENAME
from insti.core.archive import ProjectArchive
from insti.core.context import InstallationContext
from insti.core.hooks import run_shutdown_hooks
from insti.core.manifest import Manifest, serialize_manifest
from insti.core.protocols import NullProgressSink, ProgressSink
from insti.core.resources import backup_item, describe_item
from insti.core.snapshots import SnapshotRotator, archive_path
from insti.logger import get_logger

logger = get_logger(__name__)


def backup(
    manifest: Manifest,
    ctx: InstallationContext,
    *,
    snapshot: bool = False,
    progress: ProgressSink | None = None,
) -> bool:
    """Back up every resource item of ``manifest``.

    Shutdown hooks run first. The archive starts with the serialized
    manifest, followed by each item's payload in manifest order. Every item
    is attempted even after a failure.

    Args:
        manifest: Installation to back up
        ctx: Installation context
        snapshot: Write to a freshly rotated snapshot slot 0 instead of
            the regular archive
        progress: Receives status lines

    Returns:
        True if every shutdown hook and every item succeeded

    Raises:
        ArchiveError: If the archive file cannot be created

    """
    progress = progress or NullProgressSink()
    success = True
    if not run_shutdown_hooks(manifest):
        progress.failure("Shutdown failed: a process could not be stopped")
        success = False

    target = archive_path(ctx.base_directory, manifest.archive)
    if snapshot:
        rotator = SnapshotRotator(
            ctx.base_directory, manifest.archive, ctx.max_snapshots
        )
        rotator.rotate()
        target = rotator.path_for(0)

    logger.info("Backing up %s to %s", manifest, target)
    progress.report(f"Creating '{target}'")

    with ProjectArchive.create(target) as archive:
        archive.add_text(serialize_manifest(manifest), MANIFEST_FILENAME)
        for item in manifest.items:
            description = describe_item(item)
            progress.report(description)
            if not backup_item(item, archive, ctx):
                progress.failure(f"Backup failed: {description}")
                success = False
        progress.report("Compressing...")
    progress.report("Done.")
    return success
