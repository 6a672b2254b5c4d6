"""Tests for settings.conf management and path helpers."""

from pathlib import Path

import pytest

from insti.config import Paths, SettingsManager
from insti.core.context import InstallationContext
from insti.exceptions import SettingsError


@pytest.fixture
def manager(tmp_path: Path) -> SettingsManager:
    return SettingsManager(tmp_path / "insti")


def test_defaults_created_on_first_load(manager: SettingsManager) -> None:
    settings = manager.load_settings()

    assert manager.settings_file.is_file()
    assert settings["max_snapshots"] == 10
    assert settings["log_level"] == "INFO"
    assert settings["console_log_level"] == "WARNING"
    assert settings["directory"]["base"] == (
        manager.config_dir / "installations"
    ).resolve()
    assert settings["directory"]["installation_file"] == (
        manager.config_dir / "installation.xml"
    ).resolve()
    assert set(settings["directory"]) == {"base", "installation_file"}
    assert settings["backup"]["exclude_patterns"] == ["*.log*", "*.mem"]
    assert settings["backup"]["skip_segments"] == ["jbos/persistence"]
    assert settings["backup"]["keep_files"] == [
        "jbos/persistence/logging.properties"
    ]


def test_written_file_is_commented(manager: SettingsManager) -> None:
    manager.load_settings()
    text = manager.settings_file.read_text(encoding="utf-8")

    assert text.startswith("# insti Installation Manager Configuration")
    assert "[directory]" in text
    assert "[backup]" in text
    assert "# DO NOT MODIFY" in text


def test_user_values_override_defaults(
    manager: SettingsManager, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("INSTI_TEST_ROOT", str(tmp_path))
    manager.config_dir.mkdir(parents=True)
    manager.settings_file.write_text(
        "[DEFAULT]\n"
        "max_snapshots = 5  # keep five\n"
        "log_level = debug\n"
        "[directory]\n"
        "base = %INSTI_TEST_ROOT%/archives\n"
        "[backup]\n"
        "exclude_patterns = *.tmp, *.bak\n",
        encoding="utf-8",
    )

    settings = manager.load_settings()

    assert settings["max_snapshots"] == 5
    assert settings["log_level"] == "DEBUG"
    assert settings["directory"]["base"] == (tmp_path / "archives").resolve()
    assert settings["backup"]["exclude_patterns"] == ["*.tmp", "*.bak"]
    assert settings["backup"]["skip_segments"] == ["jbos/persistence"]


def test_save_then_load(manager: SettingsManager) -> None:
    settings = manager.load_settings()
    settings["max_snapshots"] = 42
    settings["backup"]["keep_files"] = ["a/b", "c/d"]

    manager.save_settings(settings)
    reloaded = manager.load_settings()

    assert reloaded["max_snapshots"] == 42
    assert reloaded["backup"]["keep_files"] == ["a/b", "c/d"]


@pytest.mark.parametrize(
    "content",
    [
        "[DEFAULT]\nmax_snapshots = many\n",
        "[DEFAULT]\nconsole_log_level = LOUD\n",
        "this is not an ini file\n",
    ],
)
def test_invalid_settings_raise(
    manager: SettingsManager, content: str
) -> None:
    manager.config_dir.mkdir(parents=True)
    manager.settings_file.write_text(content, encoding="utf-8")

    with pytest.raises(SettingsError):
        manager.load_settings()


def test_context_from_settings(manager: SettingsManager) -> None:
    settings = manager.load_settings()

    ctx = InstallationContext.from_settings(settings)

    assert ctx.base_directory == settings["directory"]["base"]
    assert ctx.installation_file == settings["directory"]["installation_file"]
    assert ctx.max_snapshots == 10
    assert ctx.file_filter.exclude_patterns == ("*.log*", "*.mem")


def test_expand_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("INSTI_TEST_ROOT", str(tmp_path))

    expanded = Paths.expand_path("%INSTI_TEST_ROOT%/x")
    assert expanded == (tmp_path / "x").resolve()
    expanded = Paths.expand_path("$INSTI_TEST_ROOT/y")
    assert expanded == (tmp_path / "y").resolve()


def test_template_path(tmp_path: Path) -> None:
    assert Paths.template_path(tmp_path) == tmp_path / "installation.xml"


def test_stale_logs_key_is_ignored(manager: SettingsManager) -> None:
    manager.config_dir.mkdir(parents=True)
    manager.settings_file.write_text(
        "[directory]\nlogs = /somewhere/else\n", encoding="utf-8"
    )

    settings = manager.load_settings()

    assert "logs" not in settings["directory"]
