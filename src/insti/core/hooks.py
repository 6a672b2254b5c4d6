"""Execution of lifecycle hooks (<run-sync> and <kill>)."""

from __future__ import annotations

import subprocess
from collections.abc import Iterable

from insti.core.manifest.model import (
    KillProcess,
    LifecycleHook,
    Manifest,
    RunProcess,
)
from insti.infrastructure.processes import kill_processes, run_and_wait
from insti.logger import get_logger
from insti.utils import expand_environment

logger = get_logger(__name__)


def run_hook(hook: LifecycleHook) -> bool:
    """Execute a single hook.

    Launch failures of <run-sync> hooks are logged and ignored. A <kill>
    hook fails when a matching process survives; absent processes are
    not a failure.

    Returns:
        False only when a <kill> hook left a process running

    """
    match hook:
        case RunProcess(file=file):
            command = expand_environment(file)
            try:
                exit_code = run_and_wait(command)
            except (OSError, subprocess.SubprocessError) as e:
                logger.debug("Cannot run %s: %s", command, e)
                return True
            logger.debug("%s exited with %d", command, exit_code)
            return True
        case KillProcess(process_name=name):
            return kill_processes(name)
    return True


def run_hooks(hooks: Iterable[LifecycleHook]) -> bool:
    """Execute hooks strictly in the given order.

    Every hook runs even after a failure.

    Returns:
        True if every hook succeeded

    """
    success = True
    for hook in hooks:
        if not run_hook(hook):
            success = False
    return success


def run_startup_hooks(manifest: Manifest) -> bool:
    """Execute the <startup> block of a manifest."""
    return run_hooks(manifest.startup)


def run_shutdown_hooks(manifest: Manifest) -> bool:
    """Execute the <shutdown> block of a manifest."""
    return run_hooks(manifest.shutdown)
