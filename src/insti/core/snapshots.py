"""Numbered snapshot archives and their rotation.

Snapshot ``n`` of archive ``PROAKT_X`` lives next to the regular archive as
``PROAKT_X@n.zip``. Slot 0 is always the most recent one; taking a new
snapshot shifts every existing slot up by one and drops the oldest.
"""

from __future__ import annotations

from pathlib import Path

from insti.constants import (
    ARCHIVE_SUFFIX,
    MAX_SNAPSHOT_LIMIT,
    SNAPSHOT_SEPARATOR,
)
from insti.logger import get_logger

logger = get_logger(__name__)


def archive_path(base_directory: Path, archive: str) -> Path:
    """Regular archive file for an archive identifier, ``.zip`` enforced."""
    if archive.lower().endswith(ARCHIVE_SUFFIX):
        return base_directory / archive
    return base_directory / f"{archive}{ARCHIVE_SUFFIX}"


class SnapshotRotator:
    """Rotation policy for the snapshots of one archive.

    Attributes:
        limit: Highest snapshot index kept

    """

    def __init__(
        self, base_directory: Path, archive: str, max_snapshots: int
    ) -> None:
        self.base_directory = base_directory
        self.archive = archive
        self.limit = (
            max_snapshots
            if 1 <= max_snapshots <= MAX_SNAPSHOT_LIMIT
            else MAX_SNAPSHOT_LIMIT
        )
        regular = archive_path(base_directory, archive)
        self._stem = regular.with_name(regular.name[: -len(ARCHIVE_SUFFIX)])

    def path_for(self, index: int) -> Path:
        """File name of snapshot ``index``."""
        return self._stem.with_name(
            f"{self._stem.name}{SNAPSHOT_SEPARATOR}{index}{ARCHIVE_SUFFIX}"
        )

    def exists(self, index: int) -> bool:
        return self.path_for(index).is_file()

    def existing(self) -> list[int]:
        """Indices of the snapshots present on disk, ascending."""
        return [n for n in range(self.limit + 1) if self.exists(n)]

    def rotate(self) -> None:
        """Free slot 0 by shifting every snapshot one index up.

        The snapshot at ``limit`` is deleted first. Gaps stay gaps, and
        failures are logged without stopping the rotation.

        Slot 0 moves to slot 1 as well. The legacy ``/SNAPSHOT`` tool
        stopped the shift at slot 1, so each new snapshot overwrote slot 0
        and the previous most recent snapshot was lost.
        """
        oldest = self.path_for(self.limit)
        if oldest.exists():
            try:
                oldest.unlink()
                logger.debug("Dropped snapshot %s", oldest)
            except OSError as e:
                logger.warning("Cannot delete snapshot %s: %s", oldest, e)

        for index in range(self.limit - 1, -1, -1):
            source = self.path_for(index)
            if not source.exists():
                continue
            target = self.path_for(index + 1)
            try:
                source.replace(target)
            except OSError as e:
                logger.warning(
                    "Cannot rename %s to %s: %s", source, target, e
                )
