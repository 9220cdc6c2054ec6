"""Bulk filename character stripping.

Removes a configurable set of characters from file (and optionally
folder) names. A rename whose target already exists is skipped and
logged; the rest of the batch continues.
"""

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from shareacl.core.errors import NameCollisionError
from shareacl.core.paths import resolve_root

logger = logging.getLogger(__name__)

# Characters that break scripts, URLs or SharePoint/OneDrive sync
DEFAULT_STRIP_CHARS = "#%&{}<>*?$!'\":@+`|="


@dataclass(frozen=True, slots=True)
class RenameResult:
    """Result of a single rename operation.

    Attributes:
        source: Original path.
        target: New path.
        success: Whether the rename completed (or would complete in dry-run).
        skipped: Whether the entry was skipped because the target exists.
        error: Error message if the rename failed or was skipped.
        dry_run: Whether this was a dry-run (nothing renamed).
    """

    source: str
    target: str
    success: bool
    skipped: bool = False
    error: str | None = None
    dry_run: bool = False


def strip_name(name: str, strip_chars: str) -> str:
    """Remove strip characters from a file name.

    The extension is preserved as-is apart from stripped characters, and
    whitespace left at either end of the stem is trimmed.

    Args:
        name: File or folder name (no directory part).
        strip_chars: Characters to remove.

    Returns:
        The cleaned name. May have an empty stem, which callers must reject.
    """
    table = str.maketrans("", "", strip_chars)
    stem, dot, suffix = name.rpartition(".")
    if not dot or not stem:
        return name.translate(table).strip()
    return f"{stem.translate(table).strip()}.{suffix.translate(table)}"


class FileRenamer:
    """Renames files (and optionally folders) by stripping characters.

    Args:
        strip_chars: Characters to remove from names.
        recurse: If True, process all descendants of the root.
        include_dirs: If True, rename folders as well as files.
        dry_run: If True, report renames without performing them.
    """

    def __init__(
        self,
        strip_chars: str = DEFAULT_STRIP_CHARS,
        *,
        recurse: bool = False,
        include_dirs: bool = False,
        dry_run: bool = False,
    ) -> None:
        if not strip_chars:
            msg = "strip_chars cannot be empty"
            raise ValueError(msg)
        self._strip_chars = strip_chars
        self._recurse = recurse
        self._include_dirs = include_dirs
        self._dry_run = dry_run

    def rename(self, root: str | Path) -> Iterator[RenameResult]:
        """Rename every entry under root whose name contains strip characters.

        Entries are visited bottom-up so a folder is renamed only after
        its contents. Unchanged names produce no result.

        Args:
            root: Root directory.

        Yields:
            RenameResult per entry whose name changes.

        Raises:
            PathNotFoundError: If the root does not exist.
        """
        root_path = resolve_root(root)

        for dirpath, dirnames, filenames in self._walk(root_path):
            names = sorted(filenames)
            if self._include_dirs:
                names += sorted(dirnames)
            for name in names:
                result = self._rename_entry(Path(dirpath), name)
                if result is not None:
                    yield result

    def _walk(self, root: Path) -> Iterator[tuple[str, list[str], list[str]]]:
        if self._recurse:
            yield from os.walk(root, topdown=False)
            return

        dirnames: list[str] = []
        filenames: list[str] = []
        for entry in root.iterdir():
            (dirnames if entry.is_dir() else filenames).append(entry.name)
        yield str(root), dirnames, filenames

    def _rename_entry(self, directory: Path, name: str) -> RenameResult | None:
        new_name = strip_name(name, self._strip_chars)
        if new_name == name:
            return None

        source = directory / name
        target = directory / new_name

        # Dotfiles keep their leading dot; any other name must keep a stem
        lost_stem = new_name.startswith(".") and not name.startswith(".")
        if not new_name or new_name in (".", "..") or lost_stem:
            error = f"Name would be empty after stripping: {name}"
            logger.warning("Cannot rename %s: %s", source, error)
            return RenameResult(str(source), str(target), success=False, error=error)

        try:
            self._check_collision(source, target)
        except NameCollisionError as e:
            logger.warning("Skipping %s: %s", source, e)
            return RenameResult(
                str(source), str(target), success=False, skipped=True, error=str(e)
            )

        if self._dry_run:
            logger.info("Dry-run: would rename %s -> %s", source, new_name)
            return RenameResult(str(source), str(target), success=True, dry_run=True)

        try:
            source.rename(target)
        except OSError as e:
            logger.warning("Cannot rename %s: %s", source, e)
            return RenameResult(str(source), str(target), success=False, error=str(e))

        logger.info("Renamed %s -> %s", source, new_name)
        return RenameResult(str(source), str(target), success=True)

    @staticmethod
    def _check_collision(source: Path, target: Path) -> None:
        """Raise if target exists and is not the source itself.

        A case-only rename on a case-insensitive filesystem resolves
        target to the source, which is not a collision.
        """
        if not target.exists():
            return
        try:
            same = source.samefile(target)
        except OSError:
            same = False
        if not same:
            raise NameCollisionError(str(source), str(target))
