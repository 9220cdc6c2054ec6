"""Human-readable transcript of ACL removal runs.

Every folder touched by a removal run is written to the log before and
after its descriptor is changed, so the previous state of each folder
can be reconstructed by hand.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import TextIO

from shareacl.acl.models import AccessRule
from shareacl.core.paths import ensure_dir, get_log_dir

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
FILENAME_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def default_log_path(log_dir: Path | None = None, now: datetime | None = None) -> Path:
    """Build a timestamped removal log path.

    Args:
        log_dir: Directory for the log. Defaults to the state log directory.
        now: Timestamp to use. Defaults to the current local time.

    Returns:
        Path like <log_dir>/acl-remove_20260101_120000.log.
    """
    stamp = (now or datetime.now()).strftime(FILENAME_TIMESTAMP_FORMAT)
    return (log_dir or get_log_dir()) / f"acl-remove_{stamp}.log"


class RemovalLog:
    """Appends a removal transcript to a text file.

    Use as a context manager: entering writes the START marker,
    leaving writes the END marker and closes the file.

    Attributes:
        path: Log file path.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._handle: TextIO | None = None

    def __enter__(self) -> RemovalLog:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is not None:
            self.write(f"Run aborted: {exc_type.__name__ if exc_type else 'error'}: {exc}")
        self.close()

    def open(self) -> None:
        """Create the log file and write the START marker.

        Raises:
            RuntimeError: If the log directory cannot be created.
            OSError: If the file cannot be opened.
        """
        ensure_dir(self.path.parent, "log")
        self._handle = self.path.open(mode="a", encoding="utf-8")
        self.write("START acl remove")

    def close(self) -> None:
        """Write the END marker and close the file."""
        if self._handle is None:
            return
        self.write("END acl remove")
        self._handle.close()
        self._handle = None

    def write(self, message: str) -> None:
        """Write one timestamped line.

        Args:
            message: Line content without trailing newline.
        """
        if self._handle is None:
            msg = "Removal log is not open"
            raise RuntimeError(msg)
        stamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        self._handle.write(f"[{stamp}] {message}\n")
        self._handle.flush()

    def folder(self, path: str) -> None:
        """Write the folder header."""
        self.write(f"Folder: {path}")

    def rules(self, label: str, rules: Iterable[AccessRule]) -> None:
        """Write a labelled rule set, one rule per line."""
        rules = tuple(rules)
        self.write(f"  {label} ({len(rules)}):")
        for rule in rules:
            self.write(f"    {rule.describe()}")

    def planned(self, rule: AccessRule) -> None:
        """Write a rule that is about to be removed."""
        self.write(f"  To remove: {rule.describe()}")

    def removed(self, rule: AccessRule, dry_run: bool = False) -> None:
        """Write a single removed rule, once the descriptor was written."""
        verb = "Would remove" if dry_run else "Removed"
        self.write(f"  {verb}: {rule.describe()}")

    def failure(self, path: str, error: str) -> None:
        """Write a per-folder failure."""
        self.write(f"  FAILED {path}: {error}")
