"""Operations for <files> items: directory trees stored in the archive."""

from __future__ import annotations

import fnmatch
import os
import stat
from pathlib import Path, PurePosixPath

from insti.constants import MANIFEST_FILENAME
from insti.core.archive import ProjectArchive
from insti.core.context import FileFilter, InstallationContext
from insti.core.manifest.model import FileTree
from insti.exceptions import ArchiveError
from insti.logger import get_logger
from insti.utils import expand_environment

logger = get_logger(__name__)


def source_folder(item: FileTree) -> Path:
    """Expanded directory an item refers to."""
    return Path(expand_environment(item.folder))


def is_excluded(path: Path, file_filter: FileFilter) -> bool:
    """Decide whether a file is left out of the archive.

    Args:
        path: File inside a FileTree folder
        file_filter: Exclusion rules from the installation context

    Returns:
        True if the file must not be archived

    """
    normalized = path.as_posix().lower()
    for segment in file_filter.skip_segments:
        if segment.lower() in normalized and not any(
            keep.lower() in normalized for keep in file_filter.keep_files
        ):
            return True

    name = path.name.lower()
    if name == MANIFEST_FILENAME:
        return True
    return any(
        fnmatch.fnmatchcase(name, pattern.lower())
        for pattern in file_filter.exclude_patterns
    )


def exists(item: FileTree) -> bool:
    return source_folder(item).is_dir()


def backup(
    item: FileTree, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Add every non-excluded file below the folder to the archive.

    Files are stored as ``<item.archive>/<relative posix path>``.

    Returns:
        False if the folder is missing or a file could not be added

    """
    root = source_folder(item)
    if not root.is_dir():
        logger.warning("Cannot back up %s: directory does not exist", root)
        return False

    success = True
    count = 0
    for directory, _dirs, files in os.walk(root):
        for file_name in sorted(files):
            path = Path(directory) / file_name
            if is_excluded(path, ctx.file_filter):
                logger.debug("Skipping %s", path)
                continue
            name = f"{item.archive}/{path.relative_to(root).as_posix()}"
            try:
                archive.add_file(path, name)
            except OSError as e:
                logger.warning("Cannot add %s to archive: %s", path, e)
                success = False
                continue
            count += 1

    logger.debug("Archived %d files from %s", count, root)
    return success


def _target_for(root: Path, relative: str) -> Path | None:
    parts = PurePosixPath(relative).parts
    if not parts or ".." in parts or PurePosixPath(relative).is_absolute():
        return None
    target = root.joinpath(*parts)
    try:
        target.resolve(strict=False).relative_to(root.resolve(strict=False))
    except ValueError:
        return None
    return target


def restore(
    item: FileTree, archive: ProjectArchive, ctx: InstallationContext
) -> bool:
    """Extract every ``<item.archive>/...`` entry below the folder.

    Existing files are overwritten, so restoring twice yields the same
    tree. Each directory receiving files is created on first use and
    opened up for all local users.

    Returns:
        False if an entry escapes the folder or cannot be extracted

    """
    root = source_folder(item)
    prefix = f"{item.archive}/"
    prepared: set[Path] = set()
    success = True

    for entry in archive.entries():
        if not entry.startswith(prefix) or entry.endswith("/"):
            continue
        target = _target_for(root, entry[len(prefix) :])
        if target is None:
            logger.warning("Refusing to extract %s outside %s", entry, root)
            success = False
            continue

        directory = target.parent
        try:
            if directory not in prepared:
                directory.mkdir(parents=True, exist_ok=True)
                ctx.grant_access(directory)
                prepared.add(directory)
            archive.extract(entry, target)
        except (OSError, ArchiveError) as e:
            logger.warning("Cannot restore %s: %s", target, e)
            success = False

    return success


def _remove(path: Path, *, is_dir: bool) -> bool:
    try:
        if not path.is_symlink():
            path.chmod(path.stat().st_mode | stat.S_IWRITE)
        if is_dir:
            path.rmdir()
        else:
            path.unlink()
    except OSError as e:
        logger.warning("Cannot delete %s: %s", path, e)
        return False
    return True


def uninstall(item: FileTree) -> bool:
    """Delete the folder bottom-up, clearing read-only bits first.

    Returns:
        True if everything was removed, or the folder did not exist

    """
    root = source_folder(item)
    if not root.exists():
        logger.debug("Nothing to uninstall at %s", root)
        return True

    success = True
    for directory, dirs, files in os.walk(root, topdown=False):
        for file_name in files:
            success &= _remove(Path(directory) / file_name, is_dir=False)
        for dir_name in dirs:
            path = Path(directory) / dir_name
            if path.is_symlink():
                success &= _remove(path, is_dir=False)
            else:
                success &= _remove(path, is_dir=True)
    success &= _remove(root, is_dir=True)
    return success
