"""Catalog of the installations kept in the base directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from insti.constants import ARCHIVE_SUFFIX, SNAPSHOT_SEPARATOR, UNKNOWN_ARCHIVE
from insti.core.context import InstallationContext
from insti.core.engine import exists
from insti.core.manifest import (
    Manifest,
    load_manifest,
    manifest_from_archive,
    manifest_from_default,
)
from insti.exceptions import ArchiveError, ManifestError
from insti.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class InstallationInfo:
    """An archive in the base directory and the manifest it carries."""

    path: Path
    manifest: Manifest
    is_current: bool = False

    @property
    def is_snapshot(self) -> bool:
        return SNAPSHOT_SEPARATOR in self.path.stem


def load_current_installation(ctx: InstallationContext) -> Manifest | None:
    """Load the manifest of what is installed right now.

    Without a live installation file, the template in the base directory is
    used as an unnamed installation, provided all of its items are present.

    Returns:
        Current manifest, or None if nothing is installed

    """
    manifest = load_manifest(ctx.installation_file)
    if manifest is not None:
        return manifest

    template = manifest_from_default(
        ctx.base_directory,
        f"Installation at '{ctx.base_directory}'",
        UNKNOWN_ARCHIVE,
    )
    if template is None:
        logger.debug("No installation file and no template")
        return None
    if not exists(template, ctx):
        logger.debug("Template installation is not present on this machine")
        return None
    return template


def list_archives(base_directory: Path) -> list[Path]:
    """Every ``.zip`` file in the base directory, sorted by name."""
    if not base_directory.is_dir():
        return []
    return sorted(
        (
            path
            for path in base_directory.iterdir()
            if path.is_file() and path.suffix.lower() == ARCHIVE_SUFFIX
        ),
        key=lambda path: path.name.lower(),
    )


def list_installations(ctx: InstallationContext) -> list[InstallationInfo]:
    """Read the manifest of every archive in the base directory.

    Archives that cannot be read are logged and skipped.
    """
    current = load_manifest(ctx.installation_file)
    result = []
    for path in list_archives(ctx.base_directory):
        try:
            manifest = manifest_from_archive(path)
        except (ArchiveError, ManifestError) as e:
            logger.warning("Skipping %s: %s", path.name, e)
            continue
        if manifest is None:
            continue
        is_current = (
            current is not None
            and SNAPSHOT_SEPARATOR not in path.stem
            and manifest.archive.lower() == current.archive.lower()
        )
        result.append(InstallationInfo(path, manifest, is_current))
    return result


def find_candidates(base_directory: Path, fragment: str) -> list[Path]:
    """Files in the base directory whose name contains ``fragment``.

    The comparison ignores case. Results are sorted by name.
    """
    if not base_directory.is_dir():
        return []
    needle = fragment.lower()
    return sorted(
        (
            path
            for path in base_directory.iterdir()
            if path.is_file() and needle in path.name.lower()
        ),
        key=lambda path: path.name.lower(),
    )
