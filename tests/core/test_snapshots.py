"""Tests for snapshot naming and rotation."""

from pathlib import Path

import pytest

from insti.core.snapshots import SnapshotRotator, archive_path


def _touch(rotator: SnapshotRotator, index: int, content: str) -> None:
    rotator.path_for(index).write_text(content, encoding="utf-8")


def _content(rotator: SnapshotRotator, index: int) -> str:
    return rotator.path_for(index).read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("configured", "expected"),
    [(3, 3), (1, 1), (999, 999), (0, 999), (-5, 999), (1000, 999)],
)
def test_limit(tmp_path: Path, configured: int, expected: int) -> None:
    assert SnapshotRotator(tmp_path, "A", configured).limit == expected


def test_archive_path_enforces_zip(tmp_path: Path) -> None:
    assert archive_path(tmp_path, "PROAKT_A") == tmp_path / "PROAKT_A.zip"
    assert archive_path(tmp_path, "PROAKT_A.ZIP") == tmp_path / "PROAKT_A.ZIP"


def test_path_for(tmp_path: Path) -> None:
    rotator = SnapshotRotator(tmp_path, "PROAKT_A.zip", 3)

    assert rotator.path_for(0) == tmp_path / "PROAKT_A@0.zip"
    assert rotator.path_for(12) == tmp_path / "PROAKT_A@12.zip"


def test_rotate_shifts_and_drops_oldest(tmp_path: Path) -> None:
    rotator = SnapshotRotator(tmp_path, "PROAKT_A", 3)
    for index in range(4):
        _touch(rotator, index, f"s{index}")

    rotator.rotate()

    assert not rotator.exists(0)
    assert _content(rotator, 1) == "s0"
    assert _content(rotator, 2) == "s1"
    assert _content(rotator, 3) == "s2"
    assert rotator.existing() == [1, 2, 3]


def test_rotate_keeps_gaps(tmp_path: Path) -> None:
    rotator = SnapshotRotator(tmp_path, "PROAKT_A", 5)
    _touch(rotator, 0, "s0")
    _touch(rotator, 2, "s2")

    rotator.rotate()

    assert rotator.existing() == [1, 3]
    assert _content(rotator, 1) == "s0"
    assert _content(rotator, 3) == "s2"


def test_repeated_rotation_never_exceeds_limit(tmp_path: Path) -> None:
    rotator = SnapshotRotator(tmp_path, "PROAKT_A", 2)

    for round_number in range(5):
        rotator.rotate()
        _touch(rotator, 0, f"round{round_number}")

    assert rotator.existing() == [0, 1, 2]
    assert _content(rotator, 0) == "round4"
    assert _content(rotator, 2) == "round2"
