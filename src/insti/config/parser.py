"""Comment helpers for writing settings.conf.

configparser drops comments on write, so the settings manager writes the
file by hand and takes its documentation blocks from here.
"""

from datetime import UTC, datetime

from insti.constants import (
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    SECTION_BACKUP,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
    SETTINGS_VERSION,
)


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# insti Installation Manager Configuration
# Settings for backing up, restoring and rotating installations.
#
# Last updated: {timestamp}
# Configuration version: {SETTINGS_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments for each configuration section.

        Returns:
            Dictionary mapping section names to their comment strings

        """
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# max_snapshots: Number of numbered snapshots to keep (0 = up to 999)
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level (DEBUG, INFO, etc.)

""",
            SECTION_DIRECTORY: """
# ========================================
# DIRECTORY PATHS
# ========================================
# Absolute paths, ~ and %VARIABLE% references are accepted.
#
# base: Directory holding archives, snapshots and the default
#       installation.xml template
# installation_file: Manifest describing the current installation

""",
            SECTION_BACKUP: """
# ========================================
# BACKUP FILTERS
# ========================================
# Comma separated lists applied to every <files> item.
#
# exclude_patterns: File name wildcards never archived
# skip_segments: Path fragments whose files are never archived
# keep_files: Paths archived even inside a skipped fragment

""",
        }

    @staticmethod
    def get_key_comments() -> dict[str, dict[str, str]]:
        """Get inline comments for specific configuration keys."""
        return {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: "# DO NOT MODIFY - Config format version",
            },
            SECTION_DIRECTORY: {},
            SECTION_BACKUP: {},
        }
