"""Process launch and termination used by lifecycle hooks."""

import subprocess

import psutil

from insti.logger import get_logger

logger = get_logger(__name__)


def _matches(process_name: str | None, wanted: str) -> bool:
    if not process_name:
        return False
    if process_name == wanted:
        return True
    # Manifests written on Windows name processes without the extension
    return process_name.lower() == f"{wanted.lower()}.exe"


def kill_processes(name: str) -> bool:
    """Force-terminate every running process called ``name``.

    A process that exits on its own before it can be killed counts as
    terminated.

    Args:
        name: Process name as shown by the OS (``.exe`` optional)

    Returns:
        True unless a matching process could not be killed

    """
    killed = 0
    success = True
    for process in psutil.process_iter(["pid", "name"]):
        if not _matches(process.info["name"], name):
            continue
        try:
            logger.info("Kill %s (pid %s)", process.info["name"], process.pid)
            process.kill()
            killed += 1
        except psutil.NoSuchProcess:
            logger.debug("Process %s already exited", process.pid)
        except psutil.AccessDenied:
            logger.warning(
                "Access denied killing %s (pid %s)", name, process.pid
            )
            success = False
    logger.debug("Killed %d instance(s) of %s", killed, name)
    return success


def run_and_wait(command: str) -> int:
    """Launch ``command`` and block until it exits.

    Args:
        command: Executable path (already environment-expanded)

    Returns:
        Exit code of the child process

    Raises:
        OSError: If the executable cannot be started

    """
    logger.debug("Running %s", command)
    completed = subprocess.run([command], check=False)  # noqa: S603
    return completed.returncode
