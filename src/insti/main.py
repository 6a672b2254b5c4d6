"""Main CLI entry point for insti.

This module provides the minimal entry point for the command-line
interface, delegating all functionality to the CLI runner and its
command handlers.
"""

import sys

from insti.cli import CLIRunner
from insti.logger import get_logger

logger = get_logger(__name__)


def main() -> None:
    """Run the CLI application and exit with its status.

    Raises:
        SystemExit: Always, carrying 0 on success and 1 on failure

    """
    logger.debug("CLI started")
    try:
        status = CLIRunner().run()
    except Exception:
        logger.exception("❌ Unexpected error")
        sys.exit(1)
    logger.debug("CLI finished with status %d", status)
    sys.exit(status)


if __name__ == "__main__":
    main()
