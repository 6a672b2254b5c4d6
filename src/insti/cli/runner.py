"""CLI runner for insti.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers.
"""

from argparse import Namespace
from pathlib import Path

from insti import __version__
from insti.cli.commands import (
    BackupHandler,
    BaseCommandHandler,
    ListHandler,
    RestoreHandler,
    RevertHandler,
    SnapshotHandler,
    UninstallHandler,
)
from insti.cli.parser import CLIParser
from insti.config import SettingsManager
from insti.core.context import InstallationContext
from insti.core.protocols import ProgressSink
from insti.exceptions import InstiError
from insti.logger import (
    get_logger,
    temporary_console_level,
    update_logger_from_config,
)

logger = get_logger(__name__)

LEGACY_USAGE = """USAGE: insti [OPTIONS]
OPTIONS:
/BACKUP [name] .... create a backup with a new name
/RESTORE <name> ... install named version
/UNINSTALL ........ uninstall existing installation
/SNAPSHOT ......... create a new snapshot (max. max_snapshots snapshots)
/REVERT [n] ....... revert to last-known-good (or snapshot n)
"""


class CLIRunner:
    """CLI command runner and composition root."""

    def __init__(
        self,
        ctx: InstallationContext | None = None,
        progress: ProgressSink | None = None,
    ) -> None:
        """Initialize CLI runner.

        Args:
            ctx: Prebuilt context; built from settings.conf when omitted
            progress: Sink handed to every command handler

        """
        self.ctx = ctx
        self.progress = progress
        self.parser = CLIParser()

    def _build_context(self, config_dir: Path | None) -> InstallationContext:
        """Load settings.conf and derive the installation context."""
        update_logger_from_config(config_dir)
        settings = SettingsManager(config_dir).load_settings()
        return InstallationContext.from_settings(settings)

    def _create_handlers(
        self, ctx: InstallationContext
    ) -> dict[str, BaseCommandHandler]:
        return {
            "backup": BackupHandler(ctx, self.progress),
            "snapshot": SnapshotHandler(ctx, self.progress),
            "restore": RestoreHandler(ctx, self.progress),
            "revert": RevertHandler(ctx, self.progress),
            "uninstall": UninstallHandler(ctx, self.progress),
            "list": ListHandler(ctx, self.progress),
        }

    def run(self, argv: list[str] | None = None) -> int:
        """Run the CLI application.

        Args:
            argv: Arguments without program name (defaults to sys.argv)

        Returns:
            Process exit status: 0 on success, 1 on failure

        """
        args = self.parser.parse_args(argv)

        if args.version:
            print(__version__)
            return 0
        if args.command == "help":
            print(LEGACY_USAGE)
            self.parser.create_parser().print_help()
            return 0

        try:
            if args.verbose:
                with temporary_console_level("DEBUG"):
                    ok = self._execute_command(args)
            else:
                ok = self._execute_command(args)
        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            return 1
        except InstiError as e:
            logger.error("%s", e)  # noqa: TRY400
            print(f"❌ {e}")
            return 1
        return 0 if ok else 1

    def _execute_command(self, args: Namespace) -> bool:
        """Execute the specified command with the appropriate handler."""
        config_dir = None
        if args.config_dir:
            config_dir = Path(args.config_dir).expanduser()
        ctx = self.ctx or self._build_context(config_dir)
        handlers = self._create_handlers(ctx)

        if not args.command:
            # Bare invocation shows what can be restored
            handlers["list"].print_files()
            return True

        logger.debug("Running command %s", args.command)
        return handlers[args.command].execute(args)
