"""Unit tests for report text scrubbing."""

import re
from pathlib import Path

import pytest
from shareacl.core.errors import PathNotFoundError
from shareacl.scrub.scrubber import ReportScrubber, ScrubRule, apply_rules


class TestScrubRule:
    """Tests for ScrubRule."""

    def test_empty_pattern_rejected(self) -> None:
        """An empty pattern is an error."""
        with pytest.raises(ValueError, match="empty"):
            ScrubRule(pattern="")

    def test_invalid_regex_rejected(self) -> None:
        """Regex rules must compile."""
        with pytest.raises(ValueError, match="Invalid scrub pattern"):
            ScrubRule(pattern="(unclosed", regex=True)

    def test_literal_is_escaped(self) -> None:
        """Literal patterns match regex metacharacters verbatim."""
        compiled = ScrubRule(pattern="Acme (EU).").compile()
        assert compiled.search("by Acme (EU). Ltd")
        assert not compiled.search("by Acme EU Ltd")

    def test_ignore_case(self) -> None:
        """ignore_case compiles a case-insensitive pattern."""
        assert ScrubRule(pattern="acme", ignore_case=True).compile().flags & re.IGNORECASE


class TestApplyRules:
    """Tests for apply_rules."""

    def test_rules_applied_in_order(self) -> None:
        """Each rule sees the output of the previous one."""
        compiled = [
            (re.compile("Acme"), "Vendor", False),
            (re.compile("Vendor Storage"), "Storage", False),
        ]
        assert apply_rules("Acme Storage array", compiled) == ("Storage array", 2)

    def test_literal_replacement_keeps_backslashes(self) -> None:
        """Literal replacements are inserted verbatim."""
        compiled = [(re.compile(re.escape("SRV01")), "\\\\nas\\share", False)]
        assert apply_rules("path SRV01", compiled) == ("path \\\\nas\\share", 1)

    def test_regex_group_references(self) -> None:
        """Regex replacements may use group references."""
        compiled = [(re.compile(r"(SN)-\d+"), r"\1-xxx", True)]
        assert apply_rules("SN-12345", compiled) == ("SN-xxx", 1)


class TestReportScrubber:
    """Tests for ReportScrubber."""

    def test_requires_rules(self) -> None:
        """At least one rule is needed."""
        with pytest.raises(ValueError, match="rule"):
            ReportScrubber([])

    def test_scrubs_matching_files(self, tmp_path: Path) -> None:
        """Matching files are rewritten with the replacements."""
        report = tmp_path / "report.csv"
        report.write_text("Acme Storage,ok\nAcme Storage,fail\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme Storage", replacement="Vendor")])

        results = list(scrubber.scrub(tmp_path))

        assert len(results) == 1
        assert results[0].changed
        assert results[0].replacements == 2
        assert report.read_text() == "Vendor,ok\nVendor,fail\n"

    def test_regex_rule(self, tmp_path: Path) -> None:
        """Regex rules scrub variable identifiers."""
        report = tmp_path / "inventory.txt"
        report.write_text("serial SN-1234 and SN-98\n")
        scrubber = ReportScrubber([ScrubRule(pattern=r"SN-\d+", replacement="SN-x", regex=True)])

        list(scrubber.scrub(tmp_path))

        assert report.read_text() == "serial SN-x and SN-x\n"

    def test_unchanged_file_not_rewritten(self, tmp_path: Path) -> None:
        """Files without matches keep their modification time."""
        report = tmp_path / "report.csv"
        report.write_text("nothing to see\n")
        before = report.stat().st_mtime_ns
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")])

        results = list(scrubber.scrub(tmp_path))

        assert not results[0].changed
        assert results[0].replacements == 0
        assert report.stat().st_mtime_ns == before

    def test_dry_run(self, tmp_path: Path) -> None:
        """Dry-run counts replacements without writing."""
        report = tmp_path / "report.csv"
        report.write_text("Acme Acme\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")], dry_run=True)

        results = list(scrubber.scrub(tmp_path))

        assert results[0].replacements == 2
        assert results[0].changed
        assert results[0].dry_run
        assert report.read_text() == "Acme Acme\n"

    def test_extension_filter(self, tmp_path: Path) -> None:
        """Only files with matching extensions are processed."""
        (tmp_path / "report.CSV").write_text("Acme\n")
        (tmp_path / "image.png").write_text("Acme\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")], extensions=["csv"])

        results = list(scrubber.scrub(tmp_path))

        assert [Path(r.path).name for r in results] == ["report.CSV"]
        assert (tmp_path / "image.png").read_text() == "Acme\n"

    def test_recurses_in_sorted_order(self, tmp_path: Path) -> None:
        """Subdirectories are processed in name order."""
        for name in ("b", "a"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "r.log").write_text("Acme\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")])

        results = list(scrubber.scrub(tmp_path))

        assert [Path(r.path).parent.name for r in results] == ["a", "b"]

    def test_single_file_root(self, tmp_path: Path) -> None:
        """A file root is scrubbed regardless of extension."""
        report = tmp_path / "report.dat"
        report.write_text("Acme\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme", replacement="X")])

        results = list(scrubber.scrub(report))

        assert len(results) == 1
        assert report.read_text() == "X\n"

    def test_crlf_preserved(self, tmp_path: Path) -> None:
        """Windows line endings survive a rewrite."""
        report = tmp_path / "report.csv"
        report.write_bytes(b"Acme,1\r\nAcme,2\r\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme", replacement="V")])

        list(scrubber.scrub(tmp_path))

        assert report.read_bytes() == b"V,1\r\nV,2\r\n"

    def test_undecodable_file_reported(self, tmp_path: Path) -> None:
        """Files that cannot be decoded produce an error result."""
        bad = tmp_path / "bad.txt"
        bad.write_bytes(b"\xff\xfe\xfa")
        (tmp_path / "good.txt").write_text("Acme\n")
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")])

        results = {Path(r.path).name: r for r in scrubber.scrub(tmp_path)}

        assert not results["bad.txt"].success
        assert results["good.txt"].changed

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root raises PathNotFoundError."""
        scrubber = ReportScrubber([ScrubRule(pattern="Acme")])
        with pytest.raises(PathNotFoundError):
            list(scrubber.scrub(tmp_path / "missing"))
