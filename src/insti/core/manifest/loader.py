"""Ways a manifest comes into existence, and the one way it is persisted."""

import tempfile
from pathlib import Path

from insti.config.paths import Paths
from insti.constants import MANIFEST_FILENAME
from insti.core.archive import ProjectArchive
from insti.core.manifest.document import parse_manifest, serialize_manifest
from insti.core.manifest.model import Manifest
from insti.logger import get_logger

logger = get_logger(__name__)


def load_manifest(path: Path) -> Manifest | None:
    """Load a manifest file.

    Args:
        path: Location of installation.xml

    Returns:
        Parsed manifest, or None if the file does not exist

    Raises:
        ManifestError: If the file exists but cannot be parsed

    """
    if not path.is_file():
        logger.debug("No manifest at %s", path)
        return None
    return parse_manifest(path)


def manifest_from_default(
    base_directory: Path, name: str, archive: str
) -> Manifest | None:
    """Load the bundled template and give it a new identity.

    Args:
        base_directory: Directory holding the installation.xml template
        name: Identity name for the new manifest
        archive: Archive identifier for the new manifest

    Returns:
        Manifest seeded from the template, or None without a template

    """
    template = load_manifest(Paths.template_path(base_directory))
    if template is None:
        return None
    template.name = name
    template.archive = archive
    return template


def manifest_from_archive(archive_path: Path) -> Manifest | None:
    """Read the manifest embedded in an archive.

    The entry is extracted to a temporary directory, parsed and removed.

    Args:
        archive_path: Zip file created by a backup

    Returns:
        Embedded manifest, or None if the archive carries none

    Raises:
        ArchiveError: If the archive cannot be opened
        ManifestError: If the embedded document is malformed

    """
    with ProjectArchive.open_read(archive_path) as archive:
        if not archive.has_entry(MANIFEST_FILENAME):
            logger.warning(
                "%s has no %s entry: not an insti archive",
                archive_path,
                MANIFEST_FILENAME,
            )
            return None

        with tempfile.TemporaryDirectory(prefix="insti-") as temp_dir:
            extracted = archive.extract(
                MANIFEST_FILENAME, Path(temp_dir) / MANIFEST_FILENAME
            )
            return parse_manifest(
                extracted, origin=f"{archive_path}!{MANIFEST_FILENAME}"
            )


def write_manifest(manifest: Manifest, path: Path) -> None:
    """Write a manifest to disk, replacing any existing file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_manifest(manifest), encoding="utf-8")
    logger.debug("Wrote manifest %s to %s", manifest.archive, path)
