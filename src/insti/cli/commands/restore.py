"""Restore, revert and uninstall command handlers."""

from argparse import Namespace

from insti.core.engine import revert, switch_installation, uninstall
from insti.core.installations import find_candidates, load_current_installation
from insti.core.manifest import load_manifest
from insti.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class RestoreHandler(BaseCommandHandler):
    """Switch to the single archive whose file name contains a fragment."""

    def execute(self, args: Namespace) -> bool:
        if len(args.fragment) != 1:
            print("❌ Bad parameters: restore <name>")
            return False

        candidates = find_candidates(self.ctx.base_directory, args.fragment[0])
        if not candidates:
            print("No match found. Possible candidates are:")
            self.print_files()
            return False
        if len(candidates) > 1:
            print("Ambiguous archive name. Possible matches are:")
            for candidate in candidates:
                print(candidate.name)
            return False

        current = load_current_installation(self.ctx)
        if current is not None:
            print(f"Removing this: {current}")
        print(f"Restoring this: {candidates[0].name}")
        return switch_installation(
            current,
            candidates[0],
            self.ctx,
            self.progress,
            dry_run=args.dry_run,
        )


class RevertHandler(BaseCommandHandler):
    """Go back to a numbered snapshot of the configured installation."""

    def execute(self, args: Namespace) -> bool:
        if len(args.index) > 1:
            print("❌ Bad parameters: revert [n]")
            return False
        try:
            index = int(args.index[0]) if args.index else 0
        except ValueError:
            print(f"❌ '{args.index[0]}' is not a snapshot index")
            return False

        manifest = load_manifest(self.ctx.installation_file)
        if manifest is None or not manifest.is_configured:
            print(
                "❌ No installation.xml exists: revert is only possible "
                "for configured installations"
            )
            return False

        print(f"Reverting {manifest} to snapshot #{index}")
        return revert(
            manifest, index, self.ctx, self.progress, dry_run=args.dry_run
        )


class UninstallHandler(BaseCommandHandler):
    """Remove the current installation from this machine."""

    def execute(self, args: Namespace) -> bool:
        current = load_current_installation(self.ctx)
        if current is None:
            print("Warning: no installation found: please check manually")
            return False

        print(f"Removing {current}")
        if uninstall(current, self.ctx, self.progress, dry_run=args.dry_run):
            print("Done.")
            return True
        print(
            "Warning: unable to completely remove existing installation: "
            "please check manually"
        )
        return False
