"""Literal and regex text scrubbing for report files."""

from shareacl.scrub.scrubber import (
    DEFAULT_EXTENSIONS,
    ReportScrubber,
    ScrubResult,
    ScrubRule,
    apply_rules,
)

__all__ = ["DEFAULT_EXTENSIONS", "ReportScrubber", "ScrubResult", "ScrubRule", "apply_rules"]
