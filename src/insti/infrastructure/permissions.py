"""Access grants for restored directories and registry keys.

Restored installations are shared by every local user, so restored
directories (and registry keys) are opened up for modification by all of
them. On POSIX systems this means the rwx bits for group and others; on
Windows the well-known "Everyone" SID (S-1-1-0) is granted Modify.
"""

import stat
import subprocess
import sys
from pathlib import Path

from insti.logger import get_logger

logger = get_logger(__name__)

EVERYONE_SID = "S-1-1-0"


def grant_directory_access(path: Path) -> bool:
    """Allow every local user to modify ``path`` and its future contents.

    Args:
        path: Existing directory

    Returns:
        True if the grant was applied

    """
    if sys.platform == "win32":
        command = [
            "icacls",
            str(path),
            "/grant",
            f"*{EVERYONE_SID}:(OI)(CI)M",
            "/Q",
        ]
        return _run_grant(command, path)

    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IRWXU | stat.S_IRWXG | stat.S_IRWXO)
    except OSError as e:
        logger.warning("Cannot open up permissions on %s: %s", path, e)
        return False
    return True


def grant_registry_access(key_path: str) -> bool:
    """Grant full control on a registry key to every user (Windows only)."""
    if sys.platform != "win32":
        return False

    target = f"Registry::{key_path}"
    script = (
        f"$acl = Get-Acl -LiteralPath '{target}'; "
        "$sid = New-Object System.Security.Principal.SecurityIdentifier"
        f"('{EVERYONE_SID}'); "
        "$rule = New-Object System.Security.AccessControl.RegistryAccessRule"
        "($sid, 'FullControl', 'ContainerInherit', 'None', 'Allow'); "
        "$acl.SetAccessRule($rule); "
        f"Set-Acl -LiteralPath '{target}' -AclObject $acl"
    )
    command = [
        "powershell",
        "-NoProfile",
        "-NonInteractive",
        "-Command",
        script,
    ]
    return _run_grant(command, key_path)


def _run_grant(command: list[str], target: Path | str) -> bool:
    try:
        subprocess.run(command, check=True, capture_output=True)  # noqa: S603
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning("Cannot grant shared access on %s: %s", target, e)
        return False
    logger.debug("Granted shared access on %s", target)
    return True
