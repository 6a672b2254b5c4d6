"""Base command handler for insti CLI commands.

This module provides the abstract base class that all command handlers
inherit from, ensuring consistent interface and shared functionality
across commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace

from insti.core.context import InstallationContext
from insti.core.protocols import ProgressSink
from insti.logger import get_logger

logger = get_logger(__name__)


class ConsoleProgressSink:
    """Progress sink printing engine status lines to stdout."""

    def report(self, message: str) -> None:
        print(message)

    def failure(self, message: str) -> None:
        logger.warning("%s", message)
        print(f"⚠️  {message}")


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    Usage:
        ctx = InstallationContext.from_settings(settings)
        handler = ConcreteHandler(ctx)
        ok = handler.execute(args)

    Note:
        Concrete handlers must implement the execute() method.
        CLIRunner acts as the composition root, creating the context and
        injecting it into every handler.
    """

    def __init__(
        self,
        ctx: InstallationContext,
        progress: ProgressSink | None = None,
    ) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            ctx: Installation context built from settings.conf
            progress: Sink for engine status lines (prints by default)

        """
        self.ctx = ctx
        self.progress = progress or ConsoleProgressSink()

    @abstractmethod
    def execute(self, args: Namespace) -> bool:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        Returns:
            True on success, False if the command failed

        """

    def print_files(self) -> None:
        """Print every file name in the base directory."""
        base = self.ctx.base_directory
        if not base.is_dir():
            print(f"No installations: {base} does not exist")
            return
        for path in sorted(base.iterdir(), key=lambda p: p.name.lower()):
            if path.is_file():
                print(path.name)
