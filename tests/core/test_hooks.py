"""Tests for lifecycle hook execution and process control."""

import subprocess
from unittest.mock import MagicMock

import psutil
import pytest

from insti.core.hooks import run_hook, run_hooks, run_startup_hooks
from insti.core.manifest import KillProcess, Manifest, RunProcess
from insti.infrastructure import processes


def test_run_process_expands_environment(
    mocker, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INSTI_TOOLS", "/opt/tools")
    run = mocker.patch("insti.core.hooks.run_and_wait", return_value=0)

    run_hook(RunProcess("%INSTI_TOOLS%/stop.sh"))

    run.assert_called_once_with("/opt/tools/stop.sh")


@pytest.mark.parametrize(
    "error", [OSError("missing"), subprocess.SubprocessError("boom")]
)
def test_run_process_launch_failure_is_swallowed(mocker, error) -> None:
    mocker.patch("insti.core.hooks.run_and_wait", side_effect=error)

    assert run_hook(RunProcess("missing.exe"))


def test_hooks_run_in_order(mocker) -> None:
    calls = []
    mocker.patch(
        "insti.core.hooks.run_and_wait",
        side_effect=lambda cmd: calls.append(("run", cmd)) or 0,
    )
    mocker.patch(
        "insti.core.hooks.kill_processes",
        side_effect=lambda name: calls.append(("kill", name)) or True,
    )

    assert run_hooks([KillProcess("a"), RunProcess("b"), KillProcess("c")])

    assert calls == [("kill", "a"), ("run", "b"), ("kill", "c")]


def test_failed_kill_fails_hooks_but_runs_the_rest(mocker) -> None:
    run = mocker.patch("insti.core.hooks.run_and_wait", return_value=0)
    mocker.patch("insti.core.hooks.kill_processes", return_value=False)

    assert not run_hooks([KillProcess("locked"), RunProcess("next")])
    run.assert_called_once_with("next")


def test_run_startup_hooks(mocker) -> None:
    run = mocker.patch("insti.core.hooks.run_and_wait", return_value=0)
    manifest = Manifest(
        name="x",
        archive="A",
        startup=[RunProcess("start")],
        shutdown=[RunProcess("stop")],
    )

    run_startup_hooks(manifest)

    run.assert_called_once_with("start")


def _process(name: str, pid: int) -> MagicMock:
    process = MagicMock()
    process.info = {"name": name, "pid": pid}
    process.pid = pid
    return process


def test_kill_processes_matches_name_and_exe(mocker) -> None:
    server = _process("appserver", 1)
    server_exe = _process("AppServer.exe", 2)
    other = _process("appserver2", 3)
    mocker.patch.object(
        processes.psutil,
        "process_iter",
        return_value=[server, server_exe, other],
    )

    assert processes.kill_processes("appserver")

    server.kill.assert_called_once()
    server_exe.kill.assert_called_once()
    other.kill.assert_not_called()


def test_kill_processes_reports_denied(mocker) -> None:
    gone = _process("demo", 1)
    gone.kill.side_effect = psutil.NoSuchProcess(1)
    denied = _process("demo", 2)
    denied.kill.side_effect = psutil.AccessDenied(2)
    alive = _process("demo", 3)
    mocker.patch.object(
        processes.psutil, "process_iter", return_value=[gone, denied, alive]
    )

    assert not processes.kill_processes("demo")
    alive.kill.assert_called_once()


def test_kill_processes_vanished_process_is_success(mocker) -> None:
    gone = _process("demo", 1)
    gone.kill.side_effect = psutil.NoSuchProcess(1)
    mocker.patch.object(processes.psutil, "process_iter", return_value=[gone])

    assert processes.kill_processes("demo")


def test_kill_processes_without_match_is_success(mocker) -> None:
    mocker.patch.object(
        processes.psutil, "process_iter", return_value=[_process("other", 1)]
    )

    assert processes.kill_processes("demo")


def test_run_and_wait_returns_exit_code(mocker) -> None:
    completed = subprocess.CompletedProcess(["tool"], 3)
    run = mocker.patch.object(
        processes.subprocess, "run", return_value=completed
    )

    assert processes.run_and_wait("tool") == 3
    run.assert_called_once_with(["tool"], check=False)
