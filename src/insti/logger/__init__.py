"""Logging utilities for insti.

Architecture:
    Application -> QueueHandler -> Queue -> QueueListener Thread
                                                |
                                      Console + File Handlers

Usage:
    >>> from insti.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Restoring %s", archive_path)  # %-style formatting

Environment Variables:
    INSTI_LOG_DIR: Override the log directory (used by the test suite)

Rules for contributors:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Never use f-strings in log calls
"""

from pathlib import Path

from insti.logger.config import (
    update_logger_from_config as _update_config,
)
from insti.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from insti.logger.handlers import ConfigurationError
from insti.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
    temporary_console_level,
)
from insti.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "temporary_console_level",
    "update_logger_from_config",
]


def update_logger_from_config(config_dir: Path | None = None) -> None:
    """Update logger handler levels from settings.conf.

    Args:
        config_dir: Optional settings directory override

    """
    _update_config(get_state(), config_dir)
