"""Explicit configuration passed to every engine and resource operation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from insti.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_KEEP_FILES,
    DEFAULT_MAX_SNAPSHOTS,
    DEFAULT_SKIP_SEGMENTS,
)
from insti.infrastructure.permissions import grant_directory_access
from insti.infrastructure.registry import (
    RegistryBackend,
    default_registry_backend,
)
from insti.types import Settings


@dataclass(frozen=True)
class FileFilter:
    """Rules deciding which files of a FileTree item are archived.

    Attributes:
        exclude_patterns: Case-insensitive wildcards matched against names
        skip_segments: Path fragments whose files are skipped
        keep_files: Path fragments re-admitted inside skipped segments

    """

    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    skip_segments: tuple[str, ...] = DEFAULT_SKIP_SEGMENTS
    keep_files: tuple[str, ...] = DEFAULT_KEEP_FILES


@dataclass
class InstallationContext:
    """Everything the engines need besides the manifest itself.

    Attributes:
        base_directory: Directory holding archives, snapshots and the
            default manifest template
        installation_file: Live manifest of the current installation
        max_snapshots: Configured snapshot limit (out of range means 999)
        file_filter: FileTree backup exclusions
        registry: Backend used by RegistryKey items
        grant_access: Opens a restored directory to all local users

    """

    base_directory: Path
    installation_file: Path
    max_snapshots: int = DEFAULT_MAX_SNAPSHOTS
    file_filter: FileFilter = field(default_factory=FileFilter)
    registry: RegistryBackend = field(default_factory=default_registry_backend)
    grant_access: Callable[[Path], bool] = grant_directory_access

    @classmethod
    def from_settings(cls, settings: Settings) -> InstallationContext:
        """Build a context from parsed settings.conf values."""
        backup = settings["backup"]
        return cls(
            base_directory=settings["directory"]["base"],
            installation_file=settings["directory"]["installation_file"],
            max_snapshots=settings["max_snapshots"],
            file_filter=FileFilter(
                exclude_patterns=tuple(backup["exclude_patterns"]),
                skip_segments=tuple(backup["skip_segments"]),
                keep_files=tuple(backup["keep_files"]),
            ),
        )
