"""Centralized constants module for insti.

This module serves as the single source of truth for all shared constants
across the insti codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from insti.constants import MANIFEST_FILENAME
"""

from typing import Final

# =============================================================================
# Manifest Constants
# =============================================================================

# Name of the manifest document, both on disk and inside every archive
MANIFEST_FILENAME: Final[str] = "installation.xml"

# Archive identifier of an unconfigured (template) manifest
UNKNOWN_ARCHIVE: Final[str] = "UNKNOWN"

# Prefix stripped from archive identifiers for display
ARCHIVE_NAME_PREFIX: Final[str] = "PROAKT_"

# Element and attribute names of the manifest document
TAG_INSTALLATION: Final[str] = "installation"
TAG_FILES: Final[str] = "files"
TAG_REGISTRY: Final[str] = "registry"
TAG_TCPIP_SERVICE: Final[str] = "tcpip-service"
TAG_STARTUP: Final[str] = "startup"
TAG_SHUTDOWN: Final[str] = "shutdown"
TAG_RUN_SYNC: Final[str] = "run-sync"
TAG_KILL: Final[str] = "kill"

# =============================================================================
# Archive and Snapshot Constants
# =============================================================================

ARCHIVE_SUFFIX: Final[str] = ".zip"

# Separator between archive stem and snapshot index ("name@3.zip")
SNAPSHOT_SEPARATOR: Final[str] = "@"

# Upper bound for the number of kept snapshots (also used when unbounded)
MAX_SNAPSHOT_LIMIT: Final[int] = 999

# zlib level used for every archive entry
ARCHIVE_COMPRESSION_LEVEL: Final[int] = 9

# =============================================================================
# Backup Filter Defaults
# =============================================================================

DEFAULT_EXCLUDE_PATTERNS: Final[tuple[str, ...]] = ("*.log*", "*.mem")
DEFAULT_SKIP_SEGMENTS: Final[tuple[str, ...]] = ("jbos/persistence",)
DEFAULT_KEEP_FILES: Final[tuple[str, ...]] = (
    "jbos/persistence/logging.properties",
)

# =============================================================================
# Configuration Constants
# =============================================================================

SETTINGS_VERSION: Final[str] = "1.0.0"

CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = "insti"
DEFAULT_CONFIG_SUBDIR: Final[str] = ".config"
DEFAULT_BASE_DIR_NAME: Final[str] = "installations"

# Environment overrides
ENV_CONFIG_DIR: Final[str] = "INSTI_CONFIG_DIR"
ENV_LOG_DIR: Final[str] = "INSTI_LOG_DIR"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_MAX_SNAPSHOTS: Final[int] = 10

VALID_LOG_LEVELS: Final[tuple[str, ...]] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_DIRECTORY: Final[str] = "directory"
SECTION_BACKUP: Final[str] = "backup"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_MAX_SNAPSHOTS: Final[str] = "max_snapshots"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

KEY_BASE: Final[str] = "base"
KEY_INSTALLATION_FILE: Final[str] = "installation_file"

KEY_EXCLUDE_PATTERNS: Final[str] = "exclude_patterns"
KEY_SKIP_SEGMENTS: Final[str] = "skip_segments"
KEY_KEEP_FILES: Final[str] = "keep_files"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "insti.log"

# Maximum size for rotated log files (bytes)
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB

LOG_BACKUP_COUNT: Final[int] = 3

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
