"""Main logger module providing public API functions.

- setup_logging(): Configure logging with the QueueHandler architecture
- get_logger(): Get or create a logger below the ``insti`` root
- temporary_console_level(): Raise console verbosity for a block
- flush_all_handlers(): Ensure pending records are written
- clear_logger_state(): Reset global logger state for tests
"""

import atexit
import contextlib
import logging
import time
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

from insti.logger.config import load_log_settings
from insti.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from insti.logger.state import get_state


def flush_all_handlers() -> None:
    """Flush all handlers in the QueueListener to ensure writes complete.

    Waits (at most five seconds) for the queue to drain, then flushes each
    handler. Safe to call from any thread.
    """
    state = get_state()
    if state.queue_listener is not None and state.log_queue is not None:
        timeout = 5.0
        start_time = time.time()
        while not state.log_queue.empty():
            if time.time() - start_time > timeout:
                break
            time.sleep(0.01)

        # Give queue listener thread time to process final records
        time.sleep(0.1)

        for handler in state.queue_listener.handlers:
            with contextlib.suppress(OSError, ValueError):
                handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Configure logging and return the requested logger.

    The root ``insti`` logger is initialized exactly once (guarded by the
    state lock); child loggers are plain ``logging.getLogger`` instances
    propagating to it.

    Args:
        name: Logger name, typically __name__
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to log file
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            if console_level is None or file_level is None or log_file is None:
                cfg_console, cfg_file, cfg_path = load_log_settings()
                console_level = console_level or cfg_console
                file_level = file_level or cfg_file
                log_file = log_file or cfg_path

            setup_root_logger(
                state,
                console_level,
                file_level,
                log_file,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get or create a logger instance.

    Use __name__ as the logger name:
        >>> logger = get_logger(__name__)

    Args:
        name: Logger name, typically __name__ for module loggers
        enable_file_logging: Whether to enable file logging (default: True)

    Returns:
        Configured logger instance

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


@contextlib.contextmanager
def temporary_console_level(
    level: str = "INFO",
) -> Generator[None, None, None]:
    """Temporarily set the console handler level.

    Used by ``--verbose`` so debug output reaches the terminal for the
    duration of one command.

    Args:
        level: Log level name ("DEBUG", "INFO", ...)

    Raises:
        ValueError: If level is not a valid logging level name

    Yields:
        None

    """
    if not hasattr(logging, level):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)

    state = get_state()
    console_handlers: list[logging.Handler] = []
    original_levels: list[int] = []

    if state.queue_listener is not None:
        for handler in state.queue_listener.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, RotatingFileHandler
            ):
                console_handlers.append(handler)
                original_levels.append(handler.level)
                handler.setLevel(getattr(logging, level))

    try:
        yield
    finally:
        for handler, orig_level in zip(
            console_handlers, original_levels, strict=True
        ):
            handler.setLevel(orig_level)


def clear_logger_state() -> None:
    """Clear global logger state for testing purposes.

    Stops the QueueListener, closes handlers and resets all flags so the
    next get_logger() call starts from scratch.

    Warning:
        Intended for tests only; it disrupts all active logging.

    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(ROOT_LOGGER_NAME):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
                del logging.Logger.manager.loggerDict[logger_name]
