"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, most
importantly an in-memory security backend that stands in for NTFS
descriptors on any platform.
"""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from shareacl.acl.backend import SecurityBackend
from shareacl.acl.models import (
    AccessRule,
    AccessType,
    FileSystemRights,
    InheritanceFlags,
    PropagationFlags,
)
from shareacl.core.errors import AccessDeniedError, PathNotFoundError


class FakeSecurityBackend(SecurityBackend):
    """Security backend keeping descriptors in a dictionary.

    Attributes:
        rules: Path -> entries (explicit and inherited) in descriptor order.
        deny_read: Paths whose descriptor cannot be read.
        deny_write: Paths whose descriptor cannot be written.
        writes: Paths written by replace_explicit_rules, in call order.
    """

    def __init__(
        self,
        rules: dict[str, list[AccessRule]] | None = None,
        *,
        deny_read: Sequence[str] = (),
        deny_write: Sequence[str] = (),
        available: bool = True,
    ) -> None:
        self.rules: dict[str, list[AccessRule]] = {
            path: list(entries) for path, entries in (rules or {}).items()
        }
        self.deny_read = set(deny_read)
        self.deny_write = set(deny_write)
        self.writes: list[str] = []
        self._available = available

    @property
    def name(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return self._available

    def read_rules(self, path: str, *, include_inherited: bool = False) -> list[AccessRule]:
        if path in self.deny_read:
            raise AccessDeniedError(path)
        if not Path(path).exists():
            raise PathNotFoundError(path)
        return [
            rule
            for rule in self.rules.get(path, [])
            if include_inherited or not rule.is_inherited
        ]

    def replace_explicit_rules(self, path: str, retained: Sequence[AccessRule]) -> None:
        if path in self.deny_write:
            raise AccessDeniedError(path)
        inherited = [rule for rule in self.rules.get(path, []) if rule.is_inherited]
        self.rules[path] = [*retained, *inherited]
        self.writes.append(path)


def _make_rule(
    identity: str,
    rights: FileSystemRights = FileSystemRights.MODIFY | FileSystemRights.SYNCHRONIZE,
    *,
    access_type: AccessType = AccessType.ALLOW,
    inherited: bool = False,
) -> AccessRule:
    return AccessRule(
        identity=identity,
        rights=rights,
        access_type=access_type,
        is_inherited=inherited,
        inheritance_flags=InheritanceFlags.CONTAINER_INHERIT | InheritanceFlags.OBJECT_INHERIT,
        propagation_flags=PropagationFlags.NONE,
    )


@pytest.fixture
def make_rule() -> Callable[..., AccessRule]:
    """Factory for access rules with share-typical defaults."""
    return _make_rule


@pytest.fixture
def share_tree(tmp_path: Path) -> Path:
    """Create a small share layout.

    share/
        Finance/
            Payroll/
        Marketing/
    """
    root = tmp_path / "share"
    (root / "Finance" / "Payroll").mkdir(parents=True)
    (root / "Marketing").mkdir()
    return root


@pytest.fixture
def fake_backend(share_tree: Path) -> FakeSecurityBackend:
    """Fake backend with typical descriptors for every folder of share_tree."""
    system = _make_rule("NT AUTHORITY\\SYSTEM", FileSystemRights.FULL_CONTROL)
    admins = _make_rule("BUILTIN\\Administrators", FileSystemRights.FULL_CONTROL)
    return FakeSecurityBackend(
        {
            str(share_tree): [
                system,
                admins,
                _make_rule("CONTOSO\\Domain Users", FileSystemRights.READ_AND_EXECUTE),
            ],
            str(share_tree / "Finance"): [
                system,
                _make_rule("CONTOSO\\Finance"),
                _make_rule("CONTOSO\\Backup_Ops", FileSystemRights.READ),
                _make_rule("CONTOSO\\Domain Users", inherited=True),
            ],
            str(share_tree / "Finance" / "Payroll"): [
                _make_rule("CONTOSO\\Payroll"),
                _make_rule("CONTOSO\\Finance", inherited=True),
            ],
            str(share_tree / "Marketing"): [
                admins,
                _make_rule("CONTOSO\\Marketing"),
                _make_rule("CREATOR OWNER", FileSystemRights.FULL_CONTROL),
            ],
        }
    )
