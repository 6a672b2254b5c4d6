"""Backup and snapshot command handlers."""

from argparse import Namespace

from insti.core.engine import backup, backup_then_uninstall
from insti.core.manifest import Manifest, load_manifest, manifest_from_default
from insti.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class BackupHandler(BaseCommandHandler):
    """Back up the current installation, optionally under a new identity.

    Without an installation file a new installation is seeded from the
    template in the base directory: ``backup ARCHIVE`` or
    ``backup NAME ARCHIVE``. With one, ``backup ARCHIVE`` renames the
    archive and ``backup NAME ARCHIVE`` renames both.
    """

    def execute(self, args: Namespace) -> bool:
        manifest = self._resolve_manifest(args.names)
        if manifest is None:
            return False

        print(f"Creating backup {manifest}")
        if args.uninstall:
            ok = backup_then_uninstall(manifest, self.ctx, self.progress)
        else:
            ok = backup(manifest, self.ctx, progress=self.progress)
        if not ok:
            print("Warning: unable to backup installation")
        return ok

    def _resolve_manifest(self, names: list[str]) -> Manifest | None:
        manifest = load_manifest(self.ctx.installation_file)

        if manifest is None:
            if len(names) == 1:
                manifest = manifest_from_default(
                    self.ctx.base_directory, "", names[0]
                )
            elif len(names) == 2:  # noqa: PLR2004
                manifest = manifest_from_default(
                    self.ctx.base_directory, names[0], names[1]
                )
            else:
                print(
                    "❌ Cannot back up: installation.xml does not exist "
                    "and no archive name was given."
                )
                return None
            if manifest is None:
                print(
                    "❌ No default installation.xml exists in "
                    f"'{self.ctx.base_directory}'"
                )
            return manifest

        if len(names) == 1:
            manifest.archive = names[0]
        elif len(names) == 2:  # noqa: PLR2004
            manifest.name, manifest.archive = names
        elif names:
            print("❌ Bad parameters for backup: expected [name] archive")
            return None

        if not manifest.is_configured:
            print(
                "❌ The installation has no archive name yet: backup ARCHIVE"
            )
            return None
        return manifest


class SnapshotHandler(BaseCommandHandler):
    """Create a new numbered snapshot of the configured installation."""

    def execute(self, args: Namespace) -> bool:
        manifest = load_manifest(self.ctx.installation_file)
        if manifest is None or not manifest.is_configured:
            print(
                "❌ No installation.xml exists: snapshots are only possible "
                "for configured installations"
            )
            return False
        if args.extra:
            print("❌ snapshot takes no arguments")
            return False

        print(f"Creating snapshot {manifest}")
        ok = backup(manifest, self.ctx, snapshot=True, progress=self.progress)
        if not ok:
            print("Warning: unable to backup installation")
        return ok
