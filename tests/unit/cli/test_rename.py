"""Unit tests for the rename CLI command."""

from pathlib import Path

import pytest
from shareacl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def default_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Use built-in defaults instead of the user config."""
    monkeypatch.setattr(
        "shareacl.core.config.get_config_path", lambda: tmp_path / "config" / "shareacl.toml"
    )


@pytest.fixture
def folder(tmp_path: Path) -> Path:
    root = tmp_path / "data"
    (root / "Q1 #final").mkdir(parents=True)
    (root / "Budget#2026.xlsx").write_text("x")
    (root / "Q1 #final" / "notes&draft.txt").write_text("y")
    return root


class TestRenameCommand:
    """Tests for shareacl rename."""

    def test_renames_root_files(self, folder: Path) -> None:
        """Files in the root are cleaned."""
        result = runner.invoke(app, ["rename", str(folder)])

        assert result.exit_code == 0
        assert "Renamed 1 item(s)." in result.output
        assert (folder / "Budget2026.xlsx").exists()
        assert (folder / "Q1 #final" / "notes&draft.txt").exists()

    def test_recurse_with_dirs(self, folder: Path) -> None:
        """--recurse --dirs cleans everything bottom-up."""
        result = runner.invoke(app, ["rename", str(folder), "--recurse", "--dirs"])

        assert result.exit_code == 0
        assert "Renamed 3 item(s)." in result.output
        assert (folder / "Q1 final" / "notesdraft.txt").exists()

    def test_dry_run(self, folder: Path) -> None:
        """--dry-run leaves names alone."""
        result = runner.invoke(app, ["rename", str(folder), "-r", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry-run: 2 item(s) would be renamed." in result.output
        assert (folder / "Budget#2026.xlsx").exists()

    def test_custom_strip_chars(self, folder: Path) -> None:
        """--strip overrides the configured characters."""
        result = runner.invoke(app, ["rename", str(folder), "-r", "--strip", "&"])

        assert result.exit_code == 0
        assert (folder / "Budget#2026.xlsx").exists()
        assert (folder / "Q1 #final" / "notesdraft.txt").exists()

    def test_strip_chars_from_config(self, folder: Path, tmp_path: Path) -> None:
        """The configured strip characters are used by default."""
        config = tmp_path / "custom.toml"
        config.write_text('[rename]\nstrip_chars = "&"\n')

        result = runner.invoke(app, ["rename", str(folder), "-r", "--config", str(config)])

        assert result.exit_code == 0
        assert (folder / "Budget#2026.xlsx").exists()
        assert (folder / "Q1 #final" / "notesdraft.txt").exists()

    def test_collision_exits_1(self, folder: Path) -> None:
        """A skipped collision is reported and sets exit code 1."""
        (folder / "Budget2026.xlsx").write_text("existing")

        result = runner.invoke(app, ["rename", str(folder)])

        assert result.exit_code == 1
        assert "0 renamed, 1 skipped, 0 failed" in result.output
        assert (folder / "Budget2026.xlsx").read_text() == "existing"

    def test_nothing_to_rename(self, tmp_path: Path) -> None:
        """A clean folder reports nothing to do."""
        (tmp_path / "clean.txt").write_text("x")

        result = runner.invoke(app, ["rename", str(tmp_path)])

        assert result.exit_code == 0
        assert "Nothing to rename." in result.output

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root exits 1."""
        result = runner.invoke(app, ["rename", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Path not found" in result.output
