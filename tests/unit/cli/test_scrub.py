"""Unit tests for the scrub CLI command."""

from pathlib import Path

import pytest
import typer
from shareacl.cli.commands.scrub import parse_rule
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
def reports(tmp_path: Path) -> Path:
    root = tmp_path / "reports"
    root.mkdir()
    (root / "acl.csv").write_text("Acme Storage,SN-1001\nAcme Storage,SN-1002\n")
    (root / "notes.txt").write_text("nothing here\n")
    return root


class TestParseRule:
    """Tests for parse_rule."""

    def test_find_and_replacement(self) -> None:
        """The first '=' splits find and replacement."""
        rule = parse_rule("a=b=c")
        assert rule.pattern == "a"
        assert rule.replacement == "b=c"

    def test_find_only_removes(self) -> None:
        """Without '=' the text is removed."""
        assert parse_rule("Acme").replacement == ""

    def test_empty_find_rejected(self) -> None:
        """An empty find part is a bad parameter."""
        with pytest.raises(typer.BadParameter):
            parse_rule("=x")

    def test_invalid_regex_rejected(self) -> None:
        """Invalid regex rules are bad parameters."""
        with pytest.raises(typer.BadParameter):
            parse_rule("(=x", regex=True)


class TestScrubCommand:
    """Tests for shareacl scrub."""

    def test_literal_rule(self, reports: Path) -> None:
        """Literal rules rewrite matching files."""
        result = runner.invoke(app, ["scrub", str(reports), "--rule", "Acme Storage=Vendor"])

        assert result.exit_code == 0
        assert "Scrubbed 1 of 2 file(s), 2 replacement(s)." in result.output
        assert (reports / "acl.csv").read_text() == "Vendor,SN-1001\nVendor,SN-1002\n"

    def test_regex_rule(self, reports: Path) -> None:
        """Regex rules are applied after literal rules."""
        result = runner.invoke(
            app, ["scrub", str(reports), "-r", "Acme Storage=", "-R", r"SN-\d+=SN-x"]
        )

        assert result.exit_code == 0
        assert (reports / "acl.csv").read_text() == ",SN-x\n,SN-x\n"

    def test_dry_run(self, reports: Path) -> None:
        """--dry-run counts without rewriting."""
        result = runner.invoke(app, ["scrub", str(reports), "-r", "Acme", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry-run: 2 replacement(s) in 1 of 2 file(s)." in result.output
        assert "Acme" in (reports / "acl.csv").read_text()

    def test_extension_filter(self, reports: Path) -> None:
        """--ext limits the files processed."""
        result = runner.invoke(app, ["scrub", str(reports), "-r", "nothing", "--ext", "txt"])

        assert result.exit_code == 0
        assert "Scrubbed 1 of 1 file(s)" in result.output

    def test_rules_from_config(self, reports: Path, tmp_path: Path) -> None:
        """Configured rules are used when none are given."""
        config = tmp_path / "custom.toml"
        config.write_text('[[scrub.rules]]\npattern = "acme storage"\nignore_case = true\n')

        result = runner.invoke(app, ["scrub", str(reports), "--config", str(config)])

        assert result.exit_code == 0
        assert (reports / "acl.csv").read_text() == ",SN-1001\n,SN-1002\n"

    def test_no_rules(self, reports: Path) -> None:
        """Without any rules the command exits 1."""
        result = runner.invoke(app, ["scrub", str(reports)])

        assert result.exit_code == 1
        assert "No scrub rules given" in result.output

    def test_no_matching_files(self, tmp_path: Path) -> None:
        """An empty folder reports no files."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(app, ["scrub", str(empty), "-r", "Acme"])

        assert result.exit_code == 0
        assert "No matching files found." in result.output

    def test_unreadable_file_exits_1(self, reports: Path) -> None:
        """Undecodable files are reported and set exit code 1."""
        (reports / "binary.log").write_bytes(b"\xff\xfe\xfa")

        result = runner.invoke(app, ["scrub", str(reports), "-r", "Acme"])

        assert result.exit_code == 1
        assert "1 file(s) scrubbed, 1 failed" in result.output

    def test_bad_rule_is_usage_error(self, reports: Path) -> None:
        """An invalid regex is rejected before any file is touched."""
        result = runner.invoke(app, ["scrub", str(reports), "-R", "(=x"])

        assert result.exit_code != 0
        assert "Acme" in (reports / "acl.csv").read_text()

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root exits 1."""
        result = runner.invoke(app, ["scrub", str(tmp_path / "missing"), "-r", "Acme"])

        assert result.exit_code == 1
        assert "Path not found" in result.output
