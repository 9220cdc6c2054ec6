"""Folder traversal and ACL report scanning.

Walks a directory tree depth-first and reads the explicit access-control
entries of every folder visited. Folders whose descriptor cannot be read
are reported with an error and the walk continues.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from shareacl.acl.backend import SecurityBackend
from shareacl.acl.identity import ExclusionSet, filter_report
from shareacl.acl.models import FolderRecord
from shareacl.core.errors import ShareAclError
from shareacl.core.paths import resolve_root

logger = logging.getLogger(__name__)


def iter_folders(
    root: str | Path,
    *,
    recurse: bool = True,
    include_root: bool = True,
) -> Iterator[str]:
    """Yield folder paths under a root directory.

    Traversal is depth-first pre-order with children in name order.
    Symbolic links are not followed. A folder that cannot be listed is
    still yielded, but its children are not; the error is logged.

    Args:
        root: Root directory.
        recurse: If True, yield all descendants, otherwise only direct children.
        include_root: If True, the root itself is yielded first.

    Yields:
        Folder paths as strings.

    Raises:
        PathNotFoundError: If the root does not exist (raised on first iteration).
    """
    top = str(resolve_root(root))

    stack = [top]
    while stack:
        current = stack.pop()
        if current != top or include_root:
            yield current
        if current != top and not recurse:
            continue

        try:
            with os.scandir(current) as entries:
                children = sorted(
                    entry.path for entry in entries if entry.is_dir(follow_symlinks=False)
                )
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", current, e)
            continue
        # Reversed so the first child in name order is popped next
        stack.extend(reversed(children))


class AclScanner:
    """Scans a folder tree and reports explicit ACL entries.

    Args:
        root: Root directory to scan.
        backend: Security backend that reads descriptors.
        recurse: If True, scan all descendants, otherwise only direct children.
        include_root: If True, the root itself is scanned.
        include_inherited: If True, inherited entries are read too.
        exclusions: Identity fragments left out of the report.
        all_rules: If True, ignore exclusions (unfiltered audit pass).
    """

    def __init__(
        self,
        root: str | Path,
        backend: SecurityBackend,
        *,
        recurse: bool = True,
        include_root: bool = True,
        include_inherited: bool = False,
        exclusions: ExclusionSet | None = None,
        all_rules: bool = False,
    ) -> None:
        self._root = root
        self._backend = backend
        self._recurse = recurse
        self._include_root = include_root
        self._include_inherited = include_inherited
        self._exclusions = exclusions
        self._all_rules = all_rules

    def folders(self) -> Iterator[str]:
        """Yield the folders this scanner visits, in traversal order."""
        return iter_folders(
            self._root,
            recurse=self._recurse,
            include_root=self._include_root,
        )

    def scan(self) -> Iterator[FolderRecord]:
        """Scan every folder and yield its filtered entries.

        Yields:
            FolderRecord per folder, in traversal order. Folders whose
            descriptor could not be read carry an error and no rules.

        Raises:
            PathNotFoundError: If the root does not exist.
        """
        for folder in self.folders():
            yield self.scan_folder(folder)

    def scan_folder(self, folder: str) -> FolderRecord:
        """Read and filter the entries of a single folder.

        Args:
            folder: Folder path.

        Returns:
            FolderRecord with the entries that pass the exclusion filter.
        """
        try:
            rules = self._backend.read_rules(folder, include_inherited=self._include_inherited)
        except (ShareAclError, OSError) as e:
            logger.warning("Cannot read ACL of %s: %s", folder, e)
            return FolderRecord(path=folder, error=str(e))

        return FolderRecord(
            path=folder,
            rules=filter_report(rules, self._exclusions, all_rules=self._all_rules),
        )
