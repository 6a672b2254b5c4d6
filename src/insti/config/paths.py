"""Path constants and utilities for insti configuration.

This module centralizes path management for the application so the
settings layer, the logger and the CLI agree on defaults.
"""

import os
from pathlib import Path

from insti.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    ENV_CONFIG_DIR,
    MANIFEST_FILENAME,
)
from insti.utils import expand_environment


def _default_config_dir() -> Path:
    env_dir = os.getenv(ENV_CONFIG_DIR)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / DEFAULT_CONFIG_SUBDIR / CONFIG_DIR_NAME


class Paths:
    """Application paths and directory structure."""

    # settings.conf, the live manifest and the archive base by default
    CONFIG_DIR = _default_config_dir()

    @classmethod
    def expand_path(cls, path_str: str) -> Path:
        """Expand and resolve a configured path.

        Args:
            path_str: Path string, may use ~, %VAR% or $VAR

        Returns:
            Expanded and resolved Path object

        Example:
            >>> Paths.expand_path("%HOME%/backups")
            PosixPath('/home/user/backups')

        """
        return Path(expand_environment(path_str)).resolve(strict=False)

    @classmethod
    def template_path(cls, base_directory: Path) -> Path:
        """Get the default manifest template inside a base directory."""
        return base_directory / MANIFEST_FILENAME
