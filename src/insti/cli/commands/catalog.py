"""List command handler: installations kept in the base directory."""

from argparse import Namespace

import orjson

from insti.core.installations import InstallationInfo, list_installations
from insti.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


def installation_to_dict(info: InstallationInfo) -> dict[str, object]:
    """JSON-ready summary of one archive."""
    manifest = info.manifest
    return {
        "file": info.path.name,
        "name": manifest.name,
        "archive": manifest.archive,
        "short_name": manifest.short_name,
        "snapshot": info.is_snapshot,
        "current": info.is_current,
        "items": len(manifest.items),
    }


class ListHandler(BaseCommandHandler):
    """Show the installations stored in the base directory."""

    def execute(self, args: Namespace) -> bool:
        installations = list_installations(self.ctx)

        if getattr(args, "json", False):
            payload = [installation_to_dict(info) for info in installations]
            print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
            return True

        if not installations:
            print(f"No installations found in {self.ctx.base_directory}")
            return True

        for info in installations:
            marker = "*" if info.is_current else " "
            print(f"{marker} {info.path.name:<40} {info.manifest}")
        return True
