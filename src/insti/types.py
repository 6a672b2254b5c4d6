"""Centralized type definitions for insti.

TypedDict definitions for the parsed settings.conf so every consumer sees
the same keys.
"""

from pathlib import Path
from typing import TypedDict


class DirectorySettings(TypedDict):
    """Directory paths configuration."""

    base: Path
    installation_file: Path


class BackupFilterSettings(TypedDict):
    """File filters applied to <files> items during backup."""

    exclude_patterns: list[str]
    skip_segments: list[str]
    keep_files: list[str]


class Settings(TypedDict):
    """Global application settings."""

    config_version: str
    max_snapshots: int
    log_level: str
    console_log_level: str
    directory: DirectorySettings
    backup: BackupFilterSettings
