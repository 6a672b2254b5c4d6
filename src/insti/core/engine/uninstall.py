"""Uninstall, existence check and the composite workflows built on them."""

from __future__ import annotations

from pathlib import Path

from insti.core.context import InstallationContext
from insti.core.engine.backup import backup
from insti.core.engine.restore import restore
from insti.core.hooks import run_shutdown_hooks
from insti.core.manifest import Manifest, manifest_from_archive
from insti.core.protocols import NullProgressSink, ProgressSink
from insti.core.resources import describe_item, item_exists, uninstall_item
from insti.core.snapshots import SnapshotRotator
from insti.exceptions import ManifestError, SnapshotError
from insti.logger import get_logger

logger = get_logger(__name__)


def uninstall(
    manifest: Manifest,
    ctx: InstallationContext,
    progress: ProgressSink | None = None,
    *,
    dry_run: bool = False,
) -> bool:
    """Remove every resource item of ``manifest`` from the machine.

    The live installation file is left in place. In a dry run neither
    shutdown hooks nor removals happen; each removal is only logged.

    Returns:
        True if every shutdown hook and every item succeeded

    """
    progress = progress or NullProgressSink()
    if dry_run:
        logger.info("[SIMULATE] Uninstalling %s", manifest)
        for item in manifest.items:
            description = describe_item(item)
            logger.info("[SIMULATE] Would remove %s", description)
            progress.report(f"Would remove {description}")
        return True

    success = True
    if not run_shutdown_hooks(manifest):
        progress.failure("Shutdown failed: a process could not be stopped")
        success = False
    logger.info("Uninstalling %s", manifest)

    for item in manifest.items:
        description = describe_item(item)
        progress.report(f"Removing {description}")
        if not uninstall_item(item, ctx):
            progress.failure(f"Uninstall failed: {description}")
            success = False
    return success


def exists(manifest: Manifest, ctx: InstallationContext) -> bool:
    """Check that every resource item is present (True for no items)."""
    return all(item_exists(item, ctx) for item in manifest.items)


def backup_then_uninstall(
    manifest: Manifest,
    ctx: InstallationContext,
    progress: ProgressSink | None = None,
) -> bool:
    """Back up to the regular archive, then uninstall."""
    backed_up = backup(manifest, ctx, progress=progress)
    removed = uninstall(manifest, ctx, progress)
    return backed_up and removed


def switch_installation(
    current: Manifest | None,
    archive_path: Path,
    ctx: InstallationContext,
    progress: ProgressSink | None = None,
    *,
    dry_run: bool = False,
) -> bool:
    """Replace the current installation with the one stored in an archive.

    Args:
        current: Installed manifest, if any
        archive_path: Archive to install
        ctx: Installation context
        progress: Receives status lines
        dry_run: Log the uninstall and restore steps without doing them

    Returns:
        True if uninstall and restore both succeeded

    Raises:
        ArchiveError: If the archive cannot be read
        ManifestError: If the archive carries no manifest

    """
    target = manifest_from_archive(archive_path)
    if target is None:
        msg = "Archive holds no installation manifest"
        raise ManifestError(msg, str(archive_path))

    removed = True
    if current is not None:
        removed = uninstall(current, ctx, progress, dry_run=dry_run)
    restored = restore(
        target,
        ctx,
        archive_path=archive_path,
        progress=progress,
        dry_run=dry_run,
    )
    return removed and restored


def revert(
    current: Manifest,
    index: int,
    ctx: InstallationContext,
    progress: ProgressSink | None = None,
    *,
    dry_run: bool = False,
) -> bool:
    """Roll the current installation back to snapshot ``index``.

    The snapshot's embedded manifest is restored (falling back to
    ``current`` for archives without one) and becomes the live manifest.

    Raises:
        SnapshotError: If the snapshot does not exist

    """
    rotator = SnapshotRotator(
        ctx.base_directory, current.archive, ctx.max_snapshots
    )
    if not rotator.exists(index):
        msg = f"No snapshot #{index} of {current.archive}"
        raise SnapshotError(msg, str(rotator.path_for(index)))

    snapshot_path = rotator.path_for(index)
    target = manifest_from_archive(snapshot_path) or current
    logger.info("Reverting %s to %s", current, snapshot_path)
    removed = uninstall(current, ctx, progress, dry_run=dry_run)
    restored = restore(
        target,
        ctx,
        archive_path=snapshot_path,
        progress=progress,
        dry_run=dry_run,
    )
    return removed and restored
