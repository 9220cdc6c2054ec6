"""Text scrubbing for report files.

Applies an ordered list of literal or regular-expression substitutions
to every matching file under a root, typically to strip vendor names
and product identifiers from exported reports before they are shared.
Files are only rewritten when their content actually changes.
"""

import logging
import os
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from shareacl.core.errors import PathNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".csv", ".txt", ".log", ".htm", ".html", ".xml")


@dataclass(frozen=True, slots=True)
class ScrubRule:
    """A single substitution.

    Attributes:
        pattern: Literal text or regular expression to find.
        replacement: Replacement text (regex group references allowed when regex=True).
        regex: If True, pattern is a regular expression.
        ignore_case: If True, matching is case-insensitive.
    """

    pattern: str
    replacement: str = ""
    regex: bool = False
    ignore_case: bool = False

    def __post_init__(self) -> None:
        """Validate the pattern."""
        if not self.pattern:
            msg = "Scrub pattern cannot be empty"
            raise ValueError(msg)
        if self.regex:
            try:
                re.compile(self.pattern)
            except re.error as e:
                msg = f"Invalid scrub pattern {self.pattern!r}: {e}"
                raise ValueError(msg) from e

    def compile(self) -> re.Pattern[str]:
        """Compile the rule to a regex; literal patterns are escaped."""
        source = self.pattern if self.regex else re.escape(self.pattern)
        return re.compile(source, re.IGNORECASE if self.ignore_case else 0)


@dataclass(frozen=True, slots=True)
class ScrubResult:
    """Result of scrubbing a single file.

    Attributes:
        path: File path.
        replacements: Number of substitutions made (or that would be made).
        changed: Whether the file content changed.
        error: Error message if the file could not be processed.
        dry_run: Whether this was a dry-run (file not rewritten).
    """

    path: str
    replacements: int = 0
    changed: bool = False
    error: str | None = None
    dry_run: bool = False

    @property
    def success(self) -> bool:
        """Check if the file was processed without error."""
        return self.error is None


def apply_rules(
    text: str,
    compiled: Sequence[tuple[re.Pattern[str], str, bool]],
) -> tuple[str, int]:
    """Apply compiled substitutions to text in order.

    Args:
        text: Input text.
        compiled: Tuples of (regex, replacement, is_regex).

    Returns:
        Tuple of (new text, total substitution count).
    """
    total = 0
    for regex, replacement, is_regex in compiled:
        if is_regex:
            text, count = regex.subn(replacement, text)
        else:
            # Literal replacements must not interpret backslashes
            text, count = regex.subn(lambda _m, r=replacement: r, text)
        total += count
    return text, total


class ReportScrubber:
    """Scrubs text out of report files.

    Args:
        rules: Substitutions applied in order.
        extensions: File extensions to process (case-insensitive).
        encoding: Text encoding of the files.
        dry_run: If True, count substitutions without rewriting files.
    """

    def __init__(
        self,
        rules: Iterable[ScrubRule],
        *,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        encoding: str = "utf-8",
        dry_run: bool = False,
    ) -> None:
        self._rules = tuple(rules)
        if not self._rules:
            msg = "At least one scrub rule is required"
            raise ValueError(msg)
        self._compiled = tuple(
            (rule.compile(), rule.replacement, rule.regex) for rule in self._rules
        )
        self._extensions = tuple(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
        )
        self._encoding = encoding
        self._dry_run = dry_run

    def scrub(self, root: str | Path) -> Iterator[ScrubResult]:
        """Scrub a single file or every matching file under a directory.

        Args:
            root: File or directory path.

        Yields:
            ScrubResult per processed file.

        Raises:
            PathNotFoundError: If root does not exist.
        """
        root_path = Path(root)
        if root_path.is_file():
            yield self.scrub_file(root_path)
            return
        if not root_path.is_dir():
            raise PathNotFoundError(str(root))

        for dirpath, dirnames, filenames in os.walk(root_path):
            dirnames.sort()
            for name in sorted(filenames):
                if self._matches(name):
                    yield self.scrub_file(Path(dirpath) / name)

    def scrub_file(self, path: Path) -> ScrubResult:
        """Apply all rules to one file.

        Args:
            path: File to scrub.

        Returns:
            ScrubResult for the file.
        """
        try:
            # newline="" keeps CRLF line endings intact on rewrite
            with path.open(encoding=self._encoding, newline="") as f:
                original = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return ScrubResult(path=str(path), error=str(e), dry_run=self._dry_run)

        text, count = apply_rules(original, self._compiled)
        changed = text != original

        if changed and not self._dry_run:
            try:
                with path.open("w", encoding=self._encoding, newline="") as f:
                    f.write(text)
            except OSError as e:
                logger.warning("Cannot write %s: %s", path, e)
                return ScrubResult(path=str(path), replacements=count, error=str(e))
            logger.info("Scrubbed %d occurrence(s) in %s", count, path)

        return ScrubResult(
            path=str(path),
            replacements=count,
            changed=changed,
            dry_run=self._dry_run,
        )

    def _matches(self, name: str) -> bool:
        return name.lower().endswith(self._extensions)
