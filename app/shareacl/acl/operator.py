"""ACL removal operator.

Deletes every explicit entry that is not protected by the keep policy
and writes the reduced descriptor back, one folder at a time. Each
folder is logged before and after the change. A failure on one folder
is logged and the run moves on to the next.
"""

import logging
from collections.abc import Iterable, Iterator

from shareacl.acl.backend import SecurityBackend
from shareacl.acl.identity import KeepPolicy, partition_for_removal
from shareacl.acl.models import AccessRule, RemovalResult
from shareacl.acl.removal_log import RemovalLog
from shareacl.core.errors import ShareAclError

logger = logging.getLogger(__name__)


class AclRemover:
    """Removes unprotected explicit entries from folder descriptors.

    Attributes:
        _backend: Security backend that reads and writes descriptors.
        _policy: Keep policy; entries it protects are never removed.
        _log: Optional removal transcript.
        _dry_run: If True, report removals without writing descriptors.
    """

    def __init__(
        self,
        backend: SecurityBackend,
        policy: KeepPolicy | None = None,
        *,
        log: RemovalLog | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the AclRemover.

        Args:
            backend: Security backend used for reads and writes.
            policy: Keep policy. Defaults to the built-in protected identities.
            log: Removal transcript receiving pre- and post-images.
            dry_run: If True, nothing is written back.
        """
        self._backend = backend
        self._policy = policy if policy is not None else KeepPolicy()
        self._log = log
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if remover is in dry-run mode."""
        return self._dry_run

    def remove(self, folders: Iterable[str]) -> Iterator[RemovalResult]:
        """Process folders in order and yield one result per folder.

        Args:
            folders: Folder paths, typically from iter_folders().

        Yields:
            RemovalResult per folder.
        """
        for folder in folders:
            yield self.remove_folder(folder)

    def remove_folder(self, folder: str) -> RemovalResult:
        """Remove unprotected explicit entries from a single folder.

        Reads the explicit entries, splits them into retained and removed
        sets, replaces the explicit entries with the retained set and
        re-reads the descriptor for the post-image. Folders without
        anything to remove are not written.

        Args:
            folder: Folder path.

        Returns:
            RemovalResult describing what happened.
        """
        self._log_folder(folder)

        try:
            original = tuple(self._backend.read_rules(folder, include_inherited=False))
        except (ShareAclError, OSError) as e:
            return self._failed(folder, str(e))

        if self._log is not None:
            self._log.rules("Original", original)

        retained, removed = partition_for_removal(original, self._policy)

        if not removed:
            logger.debug("Nothing to remove on %s", folder)
            if self._log is not None:
                self._log.write("  No entries to remove")
            return RemovalResult(
                path=folder,
                original=original,
                resulting=original,
                dry_run=self._dry_run,
            )

        verb = "Would remove" if self._dry_run else "Removing"
        for rule in removed:
            logger.info("%s %s on %s", verb, rule.describe(), folder)
            if self._log is not None:
                if self._dry_run:
                    self._log.removed(rule, dry_run=True)
                else:
                    self._log.planned(rule)

        if self._dry_run:
            return RemovalResult(
                path=folder,
                original=original,
                removed=removed,
                resulting=retained,
                dry_run=True,
            )

        try:
            self._backend.replace_explicit_rules(folder, retained)
        except (ShareAclError, OSError) as e:
            return self._failed(folder, str(e), original=original)

        if self._log is not None:
            for rule in removed:
                self._log.removed(rule)

        try:
            resulting = tuple(self._backend.read_rules(folder, include_inherited=False))
        except (ShareAclError, OSError) as e:
            return self._failed(folder, f"Removed, but re-read failed: {e}", original=original)

        if self._log is not None:
            self._log.rules("Resulting", resulting)

        return RemovalResult(
            path=folder,
            original=original,
            removed=removed,
            resulting=resulting,
        )

    # === Private helpers ===

    def _log_folder(self, folder: str) -> None:
        if self._log is not None:
            self._log.folder(folder)

    def _failed(
        self,
        folder: str,
        error: str,
        original: tuple[AccessRule, ...] = (),
    ) -> RemovalResult:
        logger.warning("Cannot process ACL of %s: %s", folder, error)
        if self._log is not None:
            self._log.failure(folder, error)
        return RemovalResult(
            path=folder,
            original=original,
            success=False,
            error=error,
            dry_run=self._dry_run,
        )
