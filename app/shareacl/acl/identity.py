"""Identity matching for report exclusions and removal protection.

Report mode drops entries whose bare identity fragment is in an
exclusion set. Remove mode keeps entries whose identity is protected
and deletes everything else. Both values are immutable and built once
from configuration at startup.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from shareacl.acl.models import AccessRule

DOMAIN_SEPARATOR = "\\"

# Identities that are never removed. Case-insensitive regex searches
# against the full identity; the defaults only match a whole account
# name, so "CONTOSO\FileSystemAdmins" is not protected by "SYSTEM".
PROTECTED_IDENTITY_PATTERNS: tuple[str, ...] = (
    r"(^|\\)SYSTEM$",
    r"(^|\\)Administrators$",
    r"(^|\\)NETWORK SERVICE$",
)

DEFAULT_EXCLUSIONS: tuple[str, ...] = (
    "CREATOR OWNER",
    "SYSTEM",
    "Administrators",
)


def identity_fragment(identity: str) -> str:
    """Strip the domain or built-in prefix from an identity.

    Args:
        identity: Identity such as "BUILTIN\\Administrators", "Everyone"
            or a string SID.

    Returns:
        Text after the last backslash, or the whole identity if it has none.
    """
    return identity.rpartition(DOMAIN_SEPARATOR)[2]


@dataclass(frozen=True, slots=True)
class ExclusionSet:
    """Ordered, case-insensitive set of bare identity fragments.

    Members are normalized to their fragment on construction, so
    "BUILTIN\\Users" and "Users" are the same member. Matching is exact
    equality on fragments: "Users" does not exclude "Power Users".

    Attributes:
        names: Fragments in the order they were given, without duplicates.
    """

    names: tuple[str, ...] = ()
    _folded: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize and deduplicate members."""
        ordered: list[str] = []
        seen: set[str] = set()
        for name in self.names:
            fragment = identity_fragment(name.strip())
            key = fragment.casefold()
            if not fragment or key in seen:
                continue
            seen.add(key)
            ordered.append(fragment)
        object.__setattr__(self, "names", tuple(ordered))
        object.__setattr__(self, "_folded", frozenset(seen))

    @classmethod
    def of(cls, names: Iterable[str]) -> ExclusionSet:
        """Build an exclusion set from any iterable of names."""
        return cls(names=tuple(names))

    def __contains__(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        return identity_fragment(identity).casefold() in self._folded

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def excludes(self, rule: AccessRule) -> bool:
        """Check if a rule's identity is excluded from reports."""
        return rule.identity in self


@dataclass(frozen=True, slots=True)
class KeepPolicy:
    """Decides which explicit entries survive a removal run.

    An identity is kept if any protected pattern is found in it
    (case-insensitive regex search) or if it equals one of the explicit
    keep identities (case-insensitive, full identity including domain).

    Attributes:
        patterns: Protected identity regex patterns.
        keep: Explicit identities to keep, e.g. "CONTOSO\\Backup_Ops".
    """

    patterns: tuple[str, ...] = PROTECTED_IDENTITY_PATTERNS
    keep: tuple[str, ...] = ()
    _compiled: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _keep_folded: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile protected patterns.

        Raises:
            ValueError: If a pattern is not a valid regular expression.
        """
        compiled: list[re.Pattern[str]] = []
        for pattern in self.patterns:
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                msg = f"Invalid protected identity pattern {pattern!r}: {e}"
                raise ValueError(msg) from e
        object.__setattr__(self, "_compiled", tuple(compiled))
        object.__setattr__(
            self,
            "_keep_folded",
            frozenset(name.strip().casefold() for name in self.keep if name.strip()),
        )

    def is_protected(self, identity: str) -> bool:
        """Check if an identity must never be removed.

        Args:
            identity: Full identity string (e.g., "NT AUTHORITY\\SYSTEM").

        Returns:
            True if the identity matches a protected pattern or a keep identity.
        """
        if identity.casefold() in self._keep_folded:
            return True
        return any(regex.search(identity) for regex in self._compiled)


def filter_report(
    rules: Iterable[AccessRule],
    exclusions: ExclusionSet | None,
    *,
    all_rules: bool = False,
) -> tuple[AccessRule, ...]:
    """Select the entries that appear in a report.

    Args:
        rules: Entries read from one descriptor.
        exclusions: Fragments to leave out. None excludes nothing.
        all_rules: If True, skip exclusion filtering entirely.

    Returns:
        Entries to report, in descriptor order.
    """
    if all_rules or not exclusions:
        return tuple(rules)
    return tuple(rule for rule in rules if not exclusions.excludes(rule))


def partition_for_removal(
    rules: Iterable[AccessRule],
    policy: KeepPolicy,
) -> tuple[tuple[AccessRule, ...], tuple[AccessRule, ...]]:
    """Split entries into the ones to keep and the ones to delete.

    Builds both collections fresh; the input is never modified.

    Args:
        rules: Explicit entries read from one descriptor.
        policy: Keep policy deciding protected identities.

    Returns:
        Tuple of (retained, removed), each in descriptor order.
    """
    retained: list[AccessRule] = []
    removed: list[AccessRule] = []
    for rule in rules:
        if policy.is_protected(rule.identity):
            retained.append(rule)
        else:
            removed.append(rule)
    return tuple(retained), tuple(removed)
