"""CLI argument parser for insti.

Besides regular subcommands the parser understands the switch style used
by older tooling and in existing batch files::

    insti /BACKUP "Test 3" PROAKT_TEST_3
    insti /RESTORE test_3
    insti /REVERT 2

Switches are matched case-insensitively and translated to subcommands
before argparse sees them.
"""

import argparse
import sys
from argparse import Namespace

LEGACY_SWITCHES = {
    "/BACKUP": "backup",
    "/RESTORE": "restore",
    "/UNINSTALL": "uninstall",
    "/SNAPSHOT": "snapshot",
    "/REVERT": "revert",
    "/HELP": "help",
    "/?": "help",
}

# Options of the main parser; everything else belongs to the subcommand
_GLOBAL_OPTIONS = ("--version", "--verbose", "--config-dir")

# Global options that consume the following argument
_OPTIONS_WITH_VALUE = ("--config-dir",)


def normalize_legacy_args(argv: list[str]) -> list[str]:
    """Translate ``/SWITCH`` style arguments to subcommand style.

    The last switch wins and arguments after the first switch belong to
    it. Global options move in front of the subcommand. ``/HELP`` or
    ``/?`` anywhere short-circuits to ``help``. Argument lists without
    switches are returned unchanged.

    Args:
        argv: Raw command line arguments (without program name)

    Returns:
        Arguments suitable for the argparse parser

    """
    if not any(arg.upper() in LEGACY_SWITCHES for arg in argv):
        return list(argv)

    options: list[str] = []
    command: str | None = None
    rest: list[str] = []
    args = iter(argv)
    for arg in args:
        switch = LEGACY_SWITCHES.get(arg.upper())
        if switch == "help":
            return [*options, "help"]
        if switch is not None:
            command = switch
        elif arg in _GLOBAL_OPTIONS:
            options.append(arg)
            if arg in _OPTIONS_WITH_VALUE:
                options.append(next(args, ""))
        elif command is not None or arg.startswith("--"):
            rest.append(arg)
    return [*options, command or "help", *rest]


class CLIParser:
    """Command-line argument parser for insti."""

    def parse_args(self, argv: list[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments without program name (defaults to sys.argv)

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self.create_parser()
        if argv is None:
            argv = sys.argv[1:]
        return parser.parse_args(normalize_legacy_args(argv))

    def create_parser(self) -> argparse.ArgumentParser:
        """Build the full parser with global options and subcommands."""
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        """Create the main argument parser.

        Returns:
            argparse.ArgumentParser: The configured main ArgumentParser
                instance.

        """
        return argparse.ArgumentParser(
            prog="insti",
            description="insti - manage multiple installations side by side",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Back up the current installation under a new name
  %(prog)s backup "Test 3" PROAKT_TEST_3

  # Switch to another installation (any unique part of the file name)
  %(prog)s restore test_3

  # Keep numbered snapshots and go back to one of them
  %(prog)s snapshot
  %(prog)s revert 2

  # Legacy switches work too
  %(prog)s /BACKUP PROAKT_TEST_3
  %(prog)s /RESTORE test_3
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        """Add global options to the main parser.

        Args:
            parser (argparse.ArgumentParser): The main parser to add
                options to.

        """
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show insti version and exit",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed logging on the console",
        )
        parser.add_argument(
            "--config-dir",
            default=None,
            help="Directory holding settings.conf (default: ~/.config/insti)",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        """Add all subcommands to the parser."""
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )

        backup_parser = subparsers.add_parser(
            "backup", help="Back up the current installation"
        )
        backup_parser.add_argument(
            "names",
            nargs="*",
            metavar="NAME",
            help="[archive] or [name archive] for the backup",
        )
        backup_parser.add_argument(
            "--uninstall",
            action="store_true",
            help="Uninstall the installation after backing it up",
        )

        restore_parser = subparsers.add_parser(
            "restore", help="Switch to an installation from the base directory"
        )
        restore_parser.add_argument(
            "fragment",
            nargs="*",
            help="Unique part of the archive file name",
        )
        self._add_dry_run_option(restore_parser)

        uninstall_parser = subparsers.add_parser(
            "uninstall", help="Uninstall the current installation"
        )
        self._add_dry_run_option(uninstall_parser)

        snapshot_parser = subparsers.add_parser(
            "snapshot", help="Create a numbered snapshot of the installation"
        )
        snapshot_parser.add_argument(
            "extra", nargs="*", help=argparse.SUPPRESS
        )

        revert_parser = subparsers.add_parser(
            "revert", help="Revert to a snapshot (default: the latest)"
        )
        revert_parser.add_argument(
            "index",
            nargs="*",
            help="Snapshot index, 0 is the most recent",
        )
        self._add_dry_run_option(revert_parser)

        list_parser = subparsers.add_parser(
            "list", help="List installations found in the base directory"
        )
        list_parser.add_argument(
            "--json",
            action="store_true",
            help="Print the list as JSON",
        )

        subparsers.add_parser("help", help="Show usage")

    def _add_dry_run_option(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be removed or restored without doing it",
        )
