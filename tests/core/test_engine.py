"""End-to-end tests for the backup, restore and uninstall engines."""

import zipfile
from pathlib import Path
from unittest.mock import MagicMock

import psutil
import pytest

from insti.core.context import InstallationContext
from insti.core.engine import (
    backup,
    backup_then_uninstall,
    exists,
    restore,
    revert,
    switch_installation,
    uninstall,
)
from insti.core.manifest import (
    FileTree,
    KillProcess,
    Manifest,
    NetworkService,
    RunProcess,
    load_manifest,
    write_manifest,
)
from insti.core.snapshots import SnapshotRotator
from insti.exceptions import ArchiveError, SnapshotError
from insti.infrastructure import processes


class RecordingSink:
    """Progress sink collecting every line."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.failures: list[str] = []

    def report(self, message: str) -> None:
        self.lines.append(message)

    def failure(self, message: str) -> None:
        self.failures.append(message)


@pytest.fixture(autouse=True)
def no_processes(mocker):
    """Keep hooks from touching real processes."""
    return {
        "kill": mocker.patch(
            "insti.core.hooks.kill_processes", return_value=True
        ),
        "run": mocker.patch("insti.core.hooks.run_and_wait", return_value=0),
    }


@pytest.fixture
def manifest(app_dir: Path) -> Manifest:
    return Manifest(
        name="Demo",
        archive="PROAKT_DEMO",
        items=[FileTree(str(app_dir), "app"), NetworkService("svc", "1")],
        shutdown=[KillProcess("demo")],
    )


def _names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as zf:
        return zf.namelist()


def test_backup_uninstall_restore_cycle(
    ctx: InstallationContext, manifest: Manifest, app_dir: Path
) -> None:
    archive = ctx.base_directory / "PROAKT_DEMO.zip"

    assert backup(manifest, ctx)
    assert _names(archive) == [
        "installation.xml",
        "app/a.txt",
        "app/b.txt",
        "app/conf/app.ini",
    ]

    assert uninstall(manifest, ctx)
    assert not app_dir.exists()
    assert not exists(manifest, ctx)

    assert restore(manifest, ctx)
    names = sorted(p.name for p in app_dir.iterdir())
    assert names == ["a.txt", "b.txt", "conf"]
    assert (app_dir / "a.txt").read_text(encoding="utf-8") == "alpha"
    assert exists(manifest, ctx)
    assert load_manifest(ctx.installation_file) == manifest


def test_backup_reports_progress(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    sink = RecordingSink()

    backup(manifest, ctx, progress=sink)

    target = ctx.base_directory / "PROAKT_DEMO.zip"
    assert sink.lines == [
        f"Creating '{target}'",
        f"Directory '{manifest.items[0].folder}'",
        "Service 'svc' on port 1",
        "Compressing...",
        "Done.",
    ]


def test_backup_runs_shutdown_hooks_first(
    ctx: InstallationContext, manifest: Manifest, no_processes
) -> None:
    backup(manifest, ctx)

    no_processes["kill"].assert_called_once_with("demo")


def test_backup_continues_after_failed_item(
    tmp_path: Path, ctx: InstallationContext, manifest: Manifest
) -> None:
    manifest.items.insert(0, FileTree(str(tmp_path / "missing"), "missing"))
    sink = RecordingSink()

    assert not backup(manifest, ctx, progress=sink)
    assert "app/a.txt" in _names(ctx.base_directory / "PROAKT_DEMO.zip")
    assert len(sink.failures) == 1


def test_snapshot_backup_rotates(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    rotator = SnapshotRotator(ctx.base_directory, manifest.archive, 3)

    assert backup(manifest, ctx, snapshot=True)
    assert backup(manifest, ctx, snapshot=True)

    assert rotator.existing() == [0, 1]
    assert not (ctx.base_directory / "PROAKT_DEMO.zip").exists()


def test_restore_missing_archive_raises(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    with pytest.raises(ArchiveError):
        restore(manifest, ctx)


def test_restore_writes_manifest_even_on_failure(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    backup(manifest, ctx)
    escaping = ctx.base_directory / "PROAKT_DEMO.zip"
    with zipfile.ZipFile(escaping, "a") as zf:
        zf.writestr("app/../../../evil.txt", "x")

    assert not restore(manifest, ctx)
    assert load_manifest(ctx.installation_file) == manifest


def test_exists_is_vacuously_true(ctx: InstallationContext) -> None:
    assert exists(Manifest(name="", archive="A"), ctx)


def test_backup_then_uninstall(
    ctx: InstallationContext, manifest: Manifest, app_dir: Path
) -> None:
    assert backup_then_uninstall(manifest, ctx)

    assert (ctx.base_directory / "PROAKT_DEMO.zip").is_file()
    assert not app_dir.exists()


def test_switch_installation(
    tmp_path: Path, ctx: InstallationContext, manifest: Manifest, app_dir: Path
) -> None:
    backup(manifest, ctx)
    other_dir = tmp_path / "other"
    other_dir.mkdir()
    (other_dir / "o.txt").write_text("other", encoding="utf-8")
    other = Manifest(
        name="Other",
        archive="PROAKT_OTHER",
        items=[FileTree(str(other_dir), "other")],
    )
    backup(other, ctx)
    uninstall(other, ctx)

    assert switch_installation(
        manifest, ctx.base_directory / "PROAKT_OTHER.zip", ctx
    )

    assert not app_dir.exists()
    assert (other_dir / "o.txt").read_text(encoding="utf-8") == "other"
    assert load_manifest(ctx.installation_file) == other


def test_revert_restores_snapshot(
    ctx: InstallationContext, manifest: Manifest, app_dir: Path
) -> None:
    backup(manifest, ctx, snapshot=True)
    (app_dir / "a.txt").write_text("broken", encoding="utf-8")
    (app_dir / "new.txt").write_text("new", encoding="utf-8")

    assert revert(manifest, 0, ctx)

    assert (app_dir / "a.txt").read_text(encoding="utf-8") == "alpha"
    assert not (app_dir / "new.txt").exists()


def test_revert_unknown_snapshot_raises(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    with pytest.raises(SnapshotError):
        revert(manifest, 2, ctx)


def test_run_process_hooks_do_not_fail_uninstall(
    ctx: InstallationContext, manifest: Manifest, no_processes
) -> None:
    no_processes["run"].side_effect = OSError("not found")
    manifest.shutdown.append(RunProcess("C:\\missing.exe"))

    assert uninstall(manifest, ctx)


def test_uninstall_keeps_installation_file(
    ctx: InstallationContext, manifest: Manifest
) -> None:
    write_manifest(manifest, ctx.installation_file)

    assert uninstall(manifest, ctx)

    assert ctx.installation_file.is_file()
    assert load_manifest(ctx.installation_file) == manifest


def test_process_left_running_fails_uninstall(
    ctx: InstallationContext, no_processes
) -> None:
    no_processes["kill"].return_value = False
    sink = RecordingSink()

    assert not uninstall(
        Manifest(name="x", archive="A", shutdown=[KillProcess("locked")]),
        ctx,
        sink,
    )
    assert sink.failures == [
        "Shutdown failed: a process could not be stopped"
    ]


def test_access_denied_kill_fails_uninstall(
    ctx: InstallationContext, mocker, no_processes
) -> None:
    no_processes["kill"].side_effect = processes.kill_processes
    locked = MagicMock()
    locked.info = {"name": "locked", "pid": 7}
    locked.pid = 7
    locked.kill.side_effect = psutil.AccessDenied(7)
    mocker.patch.object(
        processes.psutil, "process_iter", return_value=[locked]
    )

    manifest = Manifest(
        name="x", archive="A", shutdown=[KillProcess("locked")]
    )

    assert not uninstall(manifest, ctx)


def test_process_left_running_fails_backup(
    ctx: InstallationContext, manifest: Manifest, no_processes
) -> None:
    no_processes["kill"].return_value = False
    sink = RecordingSink()

    assert not backup(manifest, ctx, progress=sink)
    assert (ctx.base_directory / "PROAKT_DEMO.zip").is_file()
    assert len(sink.failures) == 1


class TestDryRun:
    """Restore and uninstall that only report what they would do."""

    def test_uninstall_changes_nothing(
        self,
        ctx: InstallationContext,
        manifest: Manifest,
        app_dir: Path,
        no_processes,
    ) -> None:
        sink = RecordingSink()

        assert uninstall(manifest, ctx, sink, dry_run=True)

        assert (app_dir / "a.txt").is_file()
        no_processes["kill"].assert_not_called()
        assert sink.lines == [
            f"Would remove Directory '{app_dir}'",
            "Would remove Service 'svc' on port 1",
        ]

    def test_restore_changes_nothing(
        self, ctx: InstallationContext, manifest: Manifest, app_dir: Path
    ) -> None:
        backup(manifest, ctx)
        uninstall(manifest, ctx)
        sink = RecordingSink()

        assert restore(manifest, ctx, progress=sink, dry_run=True)

        assert not app_dir.exists()
        assert not ctx.installation_file.exists()
        assert f"Would restore Directory '{app_dir}'" in sink.lines

    def test_restore_still_requires_archive(
        self, ctx: InstallationContext, manifest: Manifest
    ) -> None:
        with pytest.raises(ArchiveError):
            restore(manifest, ctx, dry_run=True)

    def test_revert_changes_nothing(
        self, ctx: InstallationContext, manifest: Manifest, app_dir: Path
    ) -> None:
        backup(manifest, ctx, snapshot=True)
        (app_dir / "a.txt").write_text("broken", encoding="utf-8")

        assert revert(manifest, 0, ctx, dry_run=True)

        assert (app_dir / "a.txt").read_text(encoding="utf-8") == "broken"
