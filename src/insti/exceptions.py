"""Exception classes for insti operations."""


class InstiError(Exception):
    """Base exception for insti operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the file, key or archive that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class ManifestError(InstiError):
    """Raised when a manifest document cannot be read."""

    error_prefix = "Invalid manifest"


class ArchiveError(InstiError):
    """Raised when an archive cannot be opened or modified."""

    error_prefix = "Archive operation failed"


class SnapshotError(InstiError):
    """Raised when a requested snapshot does not exist."""

    error_prefix = "Snapshot unavailable"


class RegistryError(InstiError):
    """Raised by registry backends when a key cannot be read or written."""

    error_prefix = "Registry access failed"


class SettingsError(InstiError):
    """Raised when settings.conf holds invalid values."""

    error_prefix = "Invalid settings"
