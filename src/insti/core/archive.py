"""Zip container holding a manifest and the payload of every resource item.

The archive is opened once per backup or restore pass and closed on every
exit path::

    with ProjectArchive.create(target) as archive:
        archive.add_text(serialize_manifest(manifest), MANIFEST_FILENAME)
        archive.add_file(path, "data/app.ini")
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path
from types import TracebackType
from typing import Literal

from insti.constants import ARCHIVE_COMPRESSION_LEVEL
from insti.exceptions import ArchiveError
from insti.logger import get_logger

logger = get_logger(__name__)


class ProjectArchive:
    """Thin wrapper around ``zipfile.ZipFile`` with insti's conventions."""

    def __init__(self, path: Path, mode: Literal["r", "w"] = "r") -> None:
        """Open the archive.

        Args:
            path: Location of the zip file
            mode: "r" for read-only, "w" to create (truncating)

        Raises:
            ArchiveError: If the file is missing, unreadable or not a zip

        """
        self.path = Path(path)
        self.mode = mode
        try:
            if mode == "w":
                self.path.parent.mkdir(parents=True, exist_ok=True)
            self._zip = zipfile.ZipFile(
                self.path,
                mode,
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=ARCHIVE_COMPRESSION_LEVEL,
            )
        except FileNotFoundError as e:
            msg = "Archive not found"
            raise ArchiveError(msg, str(self.path)) from e
        except (OSError, zipfile.BadZipFile) as e:
            msg = f"Cannot open archive: {e}"
            raise ArchiveError(msg, str(self.path)) from e
        logger.debug("Opened archive %s (mode=%s)", self.path, mode)

    @classmethod
    def create(cls, path: Path) -> ProjectArchive:
        """Create (or truncate) an archive for writing."""
        return cls(path, "w")

    @classmethod
    def open_read(cls, path: Path) -> ProjectArchive:
        """Open an existing archive read-only."""
        return cls(path, "r")

    def __enter__(self) -> ProjectArchive:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Flush and close the underlying zip file."""
        self._zip.close()

    def _require_writable(self) -> None:
        if self.mode != "w":
            msg = "Archive is opened read-only"
            raise ArchiveError(msg, str(self.path))

    def add_text(self, content: str, name: str) -> None:
        """Store an in-memory text document as ``name``."""
        self._require_writable()
        self._zip.writestr(name, content.encode("utf-8"))

    def add_file(self, source: Path, name: str) -> None:
        """Store a file from disk as ``name``."""
        self._require_writable()
        self._zip.write(source, name)

    def entries(self) -> list[str]:
        """Names of all entries, in archive order."""
        return self._zip.namelist()

    def has_entry(self, name: str) -> bool:
        """Check whether an entry called ``name`` exists."""
        try:
            self._zip.getinfo(name)
        except KeyError:
            return False
        return True

    def extract(self, name: str, target: Path) -> Path:
        """Extract entry ``name`` to the exact path ``target``.

        An existing file at ``target`` is overwritten. The parent directory
        must exist.

        Raises:
            ArchiveError: If the entry does not exist

        """
        try:
            source = self._zip.open(name)
        except KeyError as e:
            msg = f"Entry '{name}' not found"
            raise ArchiveError(msg, str(self.path)) from e

        with source, target.open("wb") as destination:
            shutil.copyfileobj(source, destination)
        return target
