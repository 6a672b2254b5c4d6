"""Configuration management - settings file and path utilities.

This package provides:
- SettingsManager: settings.conf INI management (from settings.py)
- Paths: Path constants and utilities (from paths.py)
- ConfigCommentManager: documentation blocks for settings.conf
"""

from insti.config.parser import ConfigCommentManager
from insti.config.paths import Paths
from insti.config.settings import SettingsManager
from insti.types import Settings

__all__ = [
    "ConfigCommentManager",
    "Paths",
    "Settings",
    "SettingsManager",
]
