"""Data model of an installation manifest.

Resource items and lifecycle hooks are small frozen dataclasses; the
operations acting on them live in ``insti.core.resources`` and
``insti.core.hooks`` and dispatch on the concrete variant.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from insti.constants import ARCHIVE_NAME_PREFIX, UNKNOWN_ARCHIVE


@dataclass(frozen=True)
class FileTree:
    """A directory tree stored under ``archive`` inside the zip file."""

    folder: str
    archive: str


@dataclass(frozen=True)
class RegistryKey:
    """A registry subtree exported to a single blob at ``archive``."""

    key: str
    archive: str


@dataclass(frozen=True)
class NetworkService:
    """A TCP/IP service declaration. Kept in the manifest, never backed up."""

    name: str
    port: str


@dataclass(frozen=True)
class RunProcess:
    """Launch ``file`` and wait until it exits."""

    file: str


@dataclass(frozen=True)
class KillProcess:
    """Kill every running process called ``process_name``."""

    process_name: str


ResourceItem = FileTree | RegistryKey | NetworkService
LifecycleHook = RunProcess | KillProcess


def _strip_prefix(value: str) -> str:
    if value.upper().startswith(ARCHIVE_NAME_PREFIX):
        return value[len(ARCHIVE_NAME_PREFIX) :]
    return value


@dataclass
class Manifest:
    """Declarative description of one installation.

    Attributes:
        name: Human readable identity
        archive: Archive identifier, used to derive archive file names
        items: Resources in backup/restore order
        startup: Hooks to run after the installation is (re)started
        shutdown: Hooks run before any resource is touched

    """

    name: str
    archive: str
    items: list[ResourceItem] = field(default_factory=list)
    startup: list[LifecycleHook] = field(default_factory=list)
    shutdown: list[LifecycleHook] = field(default_factory=list)

    def __str__(self) -> str:
        return f"Project '{self.name}' ({self.archive})"

    @property
    def is_configured(self) -> bool:
        """False for template manifests whose archive is still UNKNOWN."""
        return self.archive.upper() != UNKNOWN_ARCHIVE

    @property
    def short_name(self) -> str:
        """Archive identifier without prefix, underscores shown as spaces."""
        return _strip_prefix(self.archive).replace("_", " ")

    def set_short_name(self, display_name: str) -> None:
        """Re-derive the archive identifier from a display name.

        Args:
            display_name: Name as entered by a user, e.g. "Test 3"

        """
        stem = _strip_prefix(display_name).replace(" ", "_").upper()
        self.archive = f"{ARCHIVE_NAME_PREFIX}{stem}"

    def clone(self) -> Manifest:
        """Return a deep copy sharing no lists with this manifest."""
        return Manifest(
            name=self.name,
            archive=self.archive,
            items=[replace(item) for item in self.items],
            startup=[replace(hook) for hook in self.startup],
            shutdown=[replace(hook) for hook in self.shutdown],
        )
