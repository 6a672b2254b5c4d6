"""Settings manager for the settings.conf INI file."""

import configparser
from pathlib import Path

from insti.config.parser import ConfigCommentManager
from insti.config.paths import Paths
from insti.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_BASE_DIR_NAME,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_KEEP_FILES,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_SNAPSHOTS,
    DEFAULT_SKIP_SEGMENTS,
    KEY_BASE,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_EXCLUDE_PATTERNS,
    KEY_INSTALLATION_FILE,
    KEY_KEEP_FILES,
    KEY_LOG_LEVEL,
    KEY_MAX_SNAPSHOTS,
    KEY_SKIP_SEGMENTS,
    MANIFEST_FILENAME,
    SECTION_BACKUP,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SETTINGS_VERSION,
    VALID_LOG_LEVELS,
)
from insti.exceptions import SettingsError
from insti.logger import get_logger
from insti.types import BackupFilterSettings, DirectorySettings, Settings
from insti.utils import split_csv

logger = get_logger(__name__)

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]


class SettingsManager:
    """Manages the settings.conf INI file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_settings(self) -> RawConfigDict:
        """Get default settings values as raw strings.

        Returns:
            Default configuration dictionary

        """
        return {
            KEY_CONFIG_VERSION: SETTINGS_VERSION,
            KEY_MAX_SNAPSHOTS: str(DEFAULT_MAX_SNAPSHOTS),
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_DIRECTORY: {
                KEY_BASE: str(self.config_dir / DEFAULT_BASE_DIR_NAME),
                KEY_INSTALLATION_FILE: str(
                    self.config_dir / MANIFEST_FILENAME
                ),
            },
            SECTION_BACKUP: {
                KEY_EXCLUDE_PATTERNS: ", ".join(DEFAULT_EXCLUDE_PATTERNS),
                KEY_SKIP_SEGMENTS: ", ".join(DEFAULT_SKIP_SEGMENTS),
                KEY_KEEP_FILES: ", ".join(DEFAULT_KEEP_FILES),
            },
        }

    def _create_parser(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create a ConfigParser pre-populated with defaults.

        Args:
            defaults: Default configuration values

        Returns:
            ConfigParser populated with defaults

        """
        config = configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_settings(self) -> Settings:
        """Load settings, creating settings.conf with defaults when missing.

        Returns:
            Parsed settings

        Raises:
            SettingsError: If a value cannot be converted

        """
        defaults = self.get_default_settings()
        config = self._create_parser(defaults)

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                msg = f"Cannot parse settings file: {e}"
                raise SettingsError(msg, str(self.settings_file)) from e
        else:
            logger.debug("Creating default settings: %s", self.settings_file)
            settings = self._convert_to_settings(config)
            self.save_settings(settings)
            return settings

        return self._convert_to_settings(config)

    def save_settings(self, settings: Settings) -> None:
        """Save settings to settings.conf with user-friendly comments.

        Args:
            settings: Settings to save

        """
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        comment_manager = ConfigCommentManager()
        section_comments = comment_manager.get_section_comments()
        key_comments = comment_manager.get_key_comments()

        sections: dict[str, dict[str, str]] = {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: settings["config_version"],
                KEY_MAX_SNAPSHOTS: str(settings["max_snapshots"]),
                KEY_LOG_LEVEL: settings["log_level"],
                KEY_CONSOLE_LOG_LEVEL: settings["console_log_level"],
            },
            SECTION_DIRECTORY: {
                key: str(path) for key, path in settings["directory"].items()
            },
            SECTION_BACKUP: {
                key: ", ".join(values)
                for key, values in settings["backup"].items()
            },
        }

        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(comment_manager.get_file_header())
            for section, values in sections.items():
                f.write(section_comments[section])
                f.write(f"[{section}]\n")
                for key, value in values.items():
                    inline_comment = key_comments[section].get(key, "")
                    if inline_comment:
                        f.write(f"{key} = {value}  {inline_comment}\n")
                    else:
                        f.write(f"{key} = {value}\n")

    def _convert_to_settings(
        self, config: configparser.ConfigParser
    ) -> Settings:
        """Convert a populated ConfigParser to typed Settings.

        Args:
            config: Parser holding defaults and user values

        Returns:
            Typed settings

        Raises:
            SettingsError: If max_snapshots or a log level is invalid

        """
        defaults = config.defaults()

        raw_max = defaults.get(KEY_MAX_SNAPSHOTS, str(DEFAULT_MAX_SNAPSHOTS))
        try:
            max_snapshots = int(raw_max)
        except ValueError as e:
            msg = f"max_snapshots must be an integer, got {raw_max!r}"
            raise SettingsError(msg, str(self.settings_file)) from e

        levels = {}
        for key in (KEY_LOG_LEVEL, KEY_CONSOLE_LOG_LEVEL):
            level = defaults.get(key, DEFAULT_LOG_LEVEL).strip().upper()
            if level not in VALID_LOG_LEVELS:
                msg = f"{key} must be one of {', '.join(VALID_LOG_LEVELS)}"
                raise SettingsError(msg, str(self.settings_file))
            levels[key] = level

        directory = DirectorySettings(
            base=Paths.expand_path(config.get(SECTION_DIRECTORY, KEY_BASE)),
            installation_file=Paths.expand_path(
                config.get(SECTION_DIRECTORY, KEY_INSTALLATION_FILE)
            ),
        )

        backup = BackupFilterSettings(
            exclude_patterns=split_csv(
                config.get(SECTION_BACKUP, KEY_EXCLUDE_PATTERNS)
            ),
            skip_segments=split_csv(
                config.get(SECTION_BACKUP, KEY_SKIP_SEGMENTS)
            ),
            keep_files=split_csv(config.get(SECTION_BACKUP, KEY_KEEP_FILES)),
        )

        return Settings(
            config_version=defaults.get(KEY_CONFIG_VERSION, SETTINGS_VERSION),
            max_snapshots=max_snapshots,
            log_level=levels[KEY_LOG_LEVEL],
            console_log_level=levels[KEY_CONSOLE_LOG_LEVEL],
            directory=directory,
            backup=backup,
        )
