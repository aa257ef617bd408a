"""Tests for the rename engine."""
from pathlib import Path
from unittest.mock import patch

import pytest

from showsorter.config import Config
from showsorter.models import RenameStatus
from showsorter.renamer import RenameEngine, is_single_name, paths_are_equivalent


@pytest.fixture
def engine() -> RenameEngine:
    return RenameEngine(Config())


@pytest.fixture
def dry_engine() -> RenameEngine:
    return RenameEngine(Config(dry_run=True))


@pytest.fixture
def force_engine() -> RenameEngine:
    return RenameEngine(Config(force=True))


class TestRenameFolder:
    """Tests for RenameEngine.rename_folder."""

    def test_renames(self, engine, tmp_path: Path):
        original = tmp_path / "supernatural_s01"
        original.mkdir()

        result = engine.rename_folder(original, "Supernatural (2005)")

        assert result == tmp_path / "Supernatural (2005)"
        assert result.is_dir()
        assert not original.exists()

    def test_already_correct(self, engine, tmp_path: Path):
        folder = tmp_path / "Dark (2017)"
        folder.mkdir()
        outcome = engine.rename_folder_outcome(folder, "Dark (2017)")
        assert outcome.status is RenameStatus.ALREADY_CORRECT
        assert outcome.path == folder

    def test_dry_run_leaves_filesystem_untouched(self, dry_engine, tmp_path: Path):
        original = tmp_path / "old"
        original.mkdir()

        outcome = dry_engine.rename_folder_outcome(original, "new")

        assert outcome.status is RenameStatus.SKIPPED_DRY_RUN
        assert outcome.path == original
        assert original.is_dir()
        assert not (tmp_path / "new").exists()

    def test_existing_directory_is_reused(self, engine, tmp_path: Path):
        original = tmp_path / "old"
        existing = tmp_path / "new"
        original.mkdir()
        existing.mkdir()

        outcome = engine.rename_folder_outcome(original, "new")

        assert outcome.status is RenameStatus.SKIPPED_CONFLICT
        assert outcome.path == existing
        assert original.is_dir()

    def test_existing_file_blocks_rename(self, engine, tmp_path: Path):
        original = tmp_path / "old"
        original.mkdir()
        (tmp_path / "new").write_text("x")

        outcome = engine.rename_folder_outcome(original, "new")

        assert outcome.status is RenameStatus.FAILED
        assert engine.rename_folder(original, "new") == original

    def test_missing_source_fails(self, engine, tmp_path: Path):
        outcome = engine.rename_folder_outcome(tmp_path / "missing", "new")
        assert outcome.status is RenameStatus.FAILED

    def test_move_error_is_reported(self, engine, tmp_path: Path):
        original = tmp_path / "old"
        original.mkdir()
        with patch("showsorter.renamer.shutil.move", side_effect=PermissionError("denied")):
            outcome = engine.rename_folder_outcome(original, "new")
        assert outcome.status is RenameStatus.FAILED
        assert "denied" in outcome.reason
        assert outcome.path == original

    def test_repeat_call_is_harmless(self, engine, tmp_path: Path):
        original = tmp_path / "old"
        original.mkdir()
        first = engine.rename_folder(original, "new")
        second = engine.rename_folder(first, "new")
        assert first == second == tmp_path / "new"


class TestRenameFile:
    """Tests for RenameEngine.rename_file."""

    def test_renames(self, engine, tmp_path: Path, make_files):
        (original,) = make_files(tmp_path, "E01.mkv")
        target = tmp_path / "S01E01_Pilot.mkv"

        assert engine.rename_file(original, target) is True
        assert target.read_text() == "E01.mkv"
        assert not original.exists()

    def test_creates_missing_parent(self, engine, tmp_path: Path, make_files):
        (original,) = make_files(tmp_path, "E01.mkv")
        target = tmp_path / "Season 1" / "S01E01.mkv"
        assert engine.rename_file(original, target)
        assert target.exists()

    def test_same_path_is_already_correct(self, engine, tmp_path: Path, make_files):
        (original,) = make_files(tmp_path, "S01E01.mkv")
        outcome = engine.rename_file_outcome(original, original)
        assert outcome.status is RenameStatus.ALREADY_CORRECT
        assert original.exists()

    def test_dry_run(self, dry_engine, tmp_path: Path, make_files):
        (original,) = make_files(tmp_path, "E01.mkv")
        target = tmp_path / "S01E01.mkv"

        assert dry_engine.rename_file(original, target) is True
        assert original.exists()
        assert not target.exists()

    def test_conflict_without_force_keeps_both(self, engine, tmp_path: Path, make_files):
        original, target = make_files(tmp_path, "E01.mkv", "S01E01.mkv")

        outcome = engine.rename_file_outcome(original, target)

        assert outcome.status is RenameStatus.SKIPPED_CONFLICT
        assert outcome.ok
        assert original.read_text() == "E01.mkv"
        assert target.read_text() == "S01E01.mkv"

    def test_conflict_with_force_overwrites(self, force_engine, tmp_path: Path, make_files):
        original, target = make_files(tmp_path, "E01.mkv", "S01E01.mkv")

        outcome = force_engine.rename_file_outcome(original, target)

        assert outcome.status is RenameStatus.PERFORMED
        assert target.read_text() == "E01.mkv"
        assert not original.exists()

    def test_force_repeat_call_does_not_delete_target(self, force_engine, tmp_path: Path, make_files):
        original, target = make_files(tmp_path, "E01.mkv", "S01E01.mkv")
        force_engine.rename_file(original, target)

        # Source is gone now; the destination must survive a second call
        assert force_engine.rename_file(original, target) is True
        assert target.read_text() == "E01.mkv"

    def test_missing_source_fails(self, engine, tmp_path: Path):
        assert engine.rename_file(tmp_path / "gone.mkv", tmp_path / "S01E01.mkv") is False

    def test_move_error_is_reported(self, engine, tmp_path: Path, make_files):
        (original,) = make_files(tmp_path, "E01.mkv")
        with patch("showsorter.renamer.shutil.move", side_effect=OSError("disk full")):
            outcome = engine.rename_file_outcome(original, tmp_path / "S01E01.mkv")
        assert outcome.status is RenameStatus.FAILED
        assert outcome.reason == "disk full"
        assert not outcome.ok


class TestPathsAreEquivalent:

    def test_same_file(self, tmp_path: Path):
        path = tmp_path / "a"
        path.touch()
        assert paths_are_equivalent(path, tmp_path / "." / "a")

    def test_missing_path(self, tmp_path: Path):
        path = tmp_path / "a"
        path.touch()
        assert not paths_are_equivalent(path, tmp_path / "b")


class TestInvalidFolderNames:

    @pytest.mark.parametrize("new_name", ["", "  ", ".", "..", "a/b", "a\\b", None])
    def test_rejected(self, engine, tmp_path: Path, new_name):
        original = tmp_path / "Show_S01"
        original.mkdir()

        outcome = engine.rename_folder_outcome(original, new_name)

        assert outcome.status is RenameStatus.FAILED
        assert outcome.path == original
        assert engine.rename_folder(original, new_name) == original
        assert original.is_dir()

    def test_rejected_before_dry_run(self, dry_engine, tmp_path: Path):
        original = tmp_path / "Show_S01"
        original.mkdir()
        assert dry_engine.rename_folder_outcome(original, "").status is RenameStatus.FAILED

    @pytest.mark.parametrize("name,expected", [
        ("Dark (2017)", True),
        ("S01_The.Final", True),
        ("", False),
        ("..", False),
        ("x/y", False),
    ])
    def test_is_single_name(self, name, expected):
        assert is_single_name(name) is expected
