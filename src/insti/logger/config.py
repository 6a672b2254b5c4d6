"""Configuration loading and updating for logging system.

Bootstrap values are used while modules are imported; the levels stored in
settings.conf are applied later through update_logger_from_config(), which
imports the settings layer lazily to avoid a circular import.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from insti.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)
from insti.exceptions import SettingsError

if TYPE_CHECKING:
    from insti.logger.state import _LoggerState


def load_log_settings() -> tuple[str, str, Path]:
    """Load default console level, file level, and file path.

    Environment Variable Override:
        INSTI_LOG_DIR: Overrides the log directory. The test suite sets it
        so test runs never write into the user's configuration directory.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / DEFAULT_CONFIG_SUBDIR
            / CONFIG_DIR_NAME
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def update_logger_from_config(
    state: "_LoggerState", config_dir: Path | None = None
) -> None:
    """Update logger handler levels from settings.conf.

    Only handler levels change; handlers are never added or removed.

    Args:
        state: Logger state object (from logger.state module)
        config_dir: Optional settings directory override

    """
    try:
        from insti.config import SettingsManager  # noqa: PLC0415

        settings = SettingsManager(config_dir).load_settings()
    except (ImportError, KeyError, AttributeError, OSError, SettingsError):
        # Settings unavailable: keep bootstrap levels
        return

    console_level = getattr(
        logging, settings["console_log_level"], logging.WARNING
    )
    file_level = getattr(logging, settings["log_level"], logging.INFO)

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.setLevel(file_level)
            elif isinstance(handler, logging.StreamHandler):
                handler.setLevel(console_level)

    state.config_applied = True
