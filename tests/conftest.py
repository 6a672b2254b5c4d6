"""Pytest configuration and fixtures for insti tests."""

import logging
import os
import tempfile
from pathlib import Path

# Keep logs and settings of test runs out of the user's ~/.config/insti.
# Must happen before any insti module is imported.
_TEST_HOME = Path(tempfile.mkdtemp(prefix="insti-tests-"))
os.environ.setdefault("INSTI_LOG_DIR", str(_TEST_HOME / "logs"))
os.environ.setdefault("INSTI_CONFIG_DIR", str(_TEST_HOME / "config"))

import pytest  # noqa: E402

from insti.core.context import FileFilter, InstallationContext  # noqa: E402
from insti.core.manifest import (  # noqa: E402
    FileTree,
    KillProcess,
    Manifest,
    NetworkService,
    RegistryKey,
    RunProcess,
)
from insti.core.regfile import RegKeyEntry  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("insti"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


class FakeRegistry:
    """In-memory registry backend keyed by lower-case key path."""

    def __init__(self) -> None:
        self.trees: dict[str, RegKeyEntry] = {}
        self.granted: list[str] = []

    def read_tree(self, key_path: str) -> RegKeyEntry | None:
        return self.trees.get(key_path.lower())

    def write_tree(self, entry: RegKeyEntry, *, grant_everyone: bool) -> None:
        self.trees[entry.path.lower()] = entry
        if grant_everyone:
            self.granted.append(entry.path)

    def delete_tree(self, key_path: str) -> None:
        self.trees.pop(key_path.lower(), None)


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def granted_dirs() -> list[Path]:
    """Directories the context was asked to open up."""
    return []


@pytest.fixture
def ctx(
    tmp_path: Path, fake_registry: FakeRegistry, granted_dirs
) -> InstallationContext:
    """Installation context rooted in tmp_path with fake platform access."""
    base = tmp_path / "base"
    base.mkdir()

    def grant(path: Path) -> bool:
        granted_dirs.append(path)
        return True

    return InstallationContext(
        base_directory=base,
        installation_file=tmp_path / "config" / "installation.xml",
        max_snapshots=3,
        file_filter=FileFilter(),
        registry=fake_registry,
        grant_access=grant,
    )


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """Installed application directory with a few files."""
    root = tmp_path / "app"
    (root / "conf").mkdir(parents=True)
    (root / "a.txt").write_text("alpha", encoding="utf-8")
    (root / "b.txt").write_text("beta", encoding="utf-8")
    (root / "x.log").write_text("noise", encoding="utf-8")
    (root / "conf" / "app.ini").write_text(
        "[app]\nport=8080\n", encoding="utf-8"
    )
    return root


@pytest.fixture
def sample_manifest() -> Manifest:
    return Manifest(
        name="Test installation",
        archive="PROAKT_TEST_3",
        items=[
            FileTree("C:\\ProAKT\\bin", "bin"),
            RegistryKey(
                "HKEY_LOCAL_MACHINE\\SOFTWARE\\Vendor\\App", "registry.reg"
            ),
            NetworkService("appserver", "8080"),
        ],
        startup=[RunProcess("%PROGRAMFILES%\\App\\start.exe")],
        shutdown=[KillProcess("appserver"), RunProcess("C:\\stop.bat")],
    )
