"""Tests for resource item operations (files, registry, tcpip-service)."""

import logging
import os
import stat
import zipfile
from pathlib import Path

import pytest

from insti.core.archive import ProjectArchive
from insti.core.context import FileFilter, InstallationContext
from insti.core.manifest import FileTree, NetworkService, RegistryKey
from insti.core.regfile import REG_DWORD, REG_SZ, RegKeyEntry, RegValue
from insti.core.resources import (
    backup_item,
    describe_item,
    item_exists,
    restore_item,
    uninstall_item,
)
from insti.core.resources.files import is_excluded
from insti.exceptions import RegistryError

KEY = "HKEY_LOCAL_MACHINE\\SOFTWARE\\Vendor\\App"


def _backup(item, ctx: InstallationContext, target: Path) -> bool:
    with ProjectArchive.create(target) as archive:
        return backup_item(item, archive, ctx)


def _restore(item, ctx: InstallationContext, source: Path) -> bool:
    with ProjectArchive.open_read(source) as archive:
        return restore_item(item, archive, ctx)


def _names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as zf:
        return sorted(zf.namelist())


class TestFileFilter:
    """Tests for the FileTree exclusion rules."""

    @pytest.mark.parametrize(
        ("path", "excluded"),
        [
            ("app/data.txt", False),
            ("app/app.log", True),
            ("app/server.log.1", True),
            ("app/APP.LOG", True),
            ("app/cache.mem", True),
            ("app/installation.xml", True),
            ("app/jbos/persistence/state.dat", True),
            ("app/JBOS/Persistence/logging.properties", False),
            ("app/jbos/other/state.dat", False),
        ],
    )
    def test_is_excluded(self, path: str, excluded: bool) -> None:
        assert is_excluded(Path(path), FileFilter()) is excluded

    def test_custom_patterns(self) -> None:
        rules = FileFilter(exclude_patterns=("*.tmp",), skip_segments=())

        assert is_excluded(Path("a/b.tmp"), rules)
        assert not is_excluded(Path("a/b.log"), rules)


class TestFileTree:
    """Tests for <files> items."""

    def test_backup_applies_exclusions(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        root = tmp_path / "src"
        root.mkdir()
        for name in ("app.log", "cache.mem", "installation.xml", "data.txt"):
            (root / name).write_text(name, encoding="utf-8")
        target = tmp_path / "out.zip"

        assert _backup(FileTree(str(root), "files"), ctx, target)
        assert _names(target) == ["files/data.txt"]

    def test_backup_stores_relative_posix_paths(
        self, tmp_path: Path, ctx: InstallationContext, app_dir: Path
    ) -> None:
        target = tmp_path / "out.zip"

        assert _backup(FileTree(str(app_dir), "app"), ctx, target)
        assert _names(target) == ["app/a.txt", "app/b.txt", "app/conf/app.ini"]

    def test_backup_expands_environment(
        self,
        tmp_path: Path,
        ctx: InstallationContext,
        app_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("INSTI_TEST_APP", str(app_dir))
        target = tmp_path / "out.zip"

        assert _backup(FileTree("%INSTI_TEST_APP%", "app"), ctx, target)
        assert "app/a.txt" in _names(target)

    def test_backup_missing_folder_fails(
        self,
        tmp_path: Path,
        ctx: InstallationContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        item = FileTree(str(tmp_path / "missing"), "x")

        with caplog.at_level(logging.WARNING):
            assert not _backup(item, ctx, tmp_path / "out.zip")
        assert "does not exist" in caplog.text

    def test_restore_is_reentrant(
        self,
        tmp_path: Path,
        ctx: InstallationContext,
        app_dir: Path,
        granted_dirs: list[Path],
    ) -> None:
        archive = tmp_path / "out.zip"
        _backup(FileTree(str(app_dir), "app"), ctx, archive)
        target = tmp_path / "restored"
        item = FileTree(str(target), "app")

        assert _restore(item, ctx, archive)
        (target / "a.txt").write_text("changed", encoding="utf-8")
        assert _restore(item, ctx, archive)

        assert (target / "a.txt").read_text(encoding="utf-8") == "alpha"
        assert (target / "conf" / "app.ini").is_file()
        assert not (target / "x.log").exists()
        assert target in granted_dirs
        assert target / "conf" in granted_dirs

    def test_restore_ignores_entries_sharing_a_prefix(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        archive = tmp_path / "out.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("app/a.txt", "a")
            zf.writestr("application/b.txt", "b")
            zf.writestr("app/sub/", "")
        target = tmp_path / "restored"

        assert _restore(FileTree(str(target), "app"), ctx, archive)
        assert sorted(p.name for p in target.rglob("*") if p.is_file()) == [
            "a.txt"
        ]

    def test_restore_rejects_escaping_entries(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        archive = tmp_path / "out.zip"
        with zipfile.ZipFile(archive, "w") as zf:
            zf.writestr("app/../../evil.txt", "x")
            zf.writestr("app/ok.txt", "ok")
        target = tmp_path / "restored"

        assert not _restore(FileTree(str(target), "app"), ctx, archive)
        assert (target / "ok.txt").is_file()
        assert not (tmp_path / "evil.txt").exists()

    def test_uninstall_removes_read_only_tree(
        self, ctx: InstallationContext, app_dir: Path
    ) -> None:
        read_only = app_dir / "conf" / "app.ini"
        os.chmod(read_only, stat.S_IREAD)

        assert uninstall_item(FileTree(str(app_dir), "app"), ctx)
        assert not app_dir.exists()

    def test_uninstall_absent_folder_succeeds(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        assert uninstall_item(FileTree(str(tmp_path / "gone"), "x"), ctx)

    def test_exists(
        self, tmp_path: Path, ctx: InstallationContext, app_dir: Path
    ) -> None:
        assert item_exists(FileTree(str(app_dir), "app"), ctx)
        assert not item_exists(FileTree(str(tmp_path / "gone"), "x"), ctx)


class TestRegistryKey:
    """Tests for <registry> items against the in-memory backend."""

    @pytest.fixture
    def installed(self, fake_registry) -> RegKeyEntry:
        entry = RegKeyEntry(KEY)
        entry.values["Port"] = RegValue(REG_DWORD, 8080)
        entry.child("Settings").values["Mode"] = RegValue(REG_SZ, "server")
        fake_registry.write_tree(entry, grant_everyone=False)
        return entry

    def test_backup_restore_uninstall(
        self,
        tmp_path: Path,
        ctx: InstallationContext,
        fake_registry,
        installed: RegKeyEntry,
    ) -> None:
        item = RegistryKey(KEY, "registry/app.reg")
        archive = tmp_path / "out.zip"

        assert item_exists(item, ctx)
        assert _backup(item, ctx, archive)
        assert _names(archive) == ["registry/app.reg"]

        assert uninstall_item(item, ctx)
        assert not item_exists(item, ctx)

        assert _restore(item, ctx, archive)
        restored = fake_registry.read_tree(KEY)
        assert restored.values["Port"] == RegValue(REG_DWORD, 8080)
        assert restored.child("Settings").values["Mode"].data == "server"
        assert fake_registry.granted == [KEY]

    def test_backup_missing_key_fails(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        item = RegistryKey(KEY, "app.reg")

        assert not _backup(item, ctx, tmp_path / "out.zip")

    def test_backend_errors_are_reported_as_failure(
        self, tmp_path: Path, ctx: InstallationContext, mocker
    ) -> None:
        mocker.patch.object(
            ctx.registry, "read_tree", side_effect=RegistryError("denied", KEY)
        )
        mocker.patch.object(
            ctx.registry,
            "delete_tree",
            side_effect=RegistryError("denied", KEY),
        )
        item = RegistryKey(KEY, "app.reg")

        assert not item_exists(item, ctx)
        assert not _backup(item, ctx, tmp_path / "out.zip")
        assert not uninstall_item(item, ctx)

    def test_restore_without_entry_is_noop(
        self, tmp_path: Path, ctx: InstallationContext, fake_registry
    ) -> None:
        archive = tmp_path / "out.zip"
        ProjectArchive.create(archive).close()

        assert _restore(RegistryKey(KEY, "app.reg"), ctx, archive)
        assert fake_registry.trees == {}


class TestNetworkService:
    """<tcpip-service> items are declared but never acted upon."""

    def test_every_operation_succeeds(
        self, tmp_path: Path, ctx: InstallationContext
    ) -> None:
        item = NetworkService("appserver", "8080")
        archive = tmp_path / "out.zip"

        assert item_exists(item, ctx)
        assert _backup(item, ctx, archive)
        assert _names(archive) == []
        assert _restore(item, ctx, archive)
        assert uninstall_item(item, ctx)


def test_describe_item() -> None:
    assert describe_item(FileTree("C:\\App", "app")) == "Directory 'C:\\App'"
    assert describe_item(RegistryKey(KEY, "r")) == f"Registry '{KEY}'"
    assert describe_item(NetworkService("s", "1")) == "Service 's' on port 1"
