"""Security descriptor backends.

A backend reads the access-control entries of a filesystem object and
writes a replacement set of explicit entries back. The Windows
implementation talks to the security API through pywin32; pywin32 is
only imported when the backend is first used, so the rest of shareacl
imports on any platform.
"""

import logging
import sys
from abc import ABC, abstractmethod
from collections import Counter
from collections.abc import Sequence
from typing import Any

from shareacl.acl.models import (
    AccessRule,
    AccessType,
    FileSystemRights,
    InheritanceFlags,
    PropagationFlags,
)
from shareacl.core.errors import AccessDeniedError, PathNotFoundError, ShareAclError

logger = logging.getLogger(__name__)

# Win32 error codes mapped to domain errors
_ERROR_FILE_NOT_FOUND = 2
_ERROR_PATH_NOT_FOUND = 3
_ERROR_ACCESS_DENIED = 5
_ERROR_PRIVILEGE_NOT_HELD = 1314


class SecurityBackend(ABC):
    """Abstract access to filesystem security descriptors.

    Example:
        >>> backend = get_backend()
        >>> if backend.is_available():
        ...     for rule in backend.read_rules(r"D:\\Shares\\Finance"):
        ...         print(rule.describe())
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this backend."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend can be used on the current system."""

    @abstractmethod
    def read_rules(self, path: str, *, include_inherited: bool = False) -> list[AccessRule]:
        """Read the access-control entries of a filesystem object.

        Args:
            path: Filesystem path.
            include_inherited: If False, only explicit entries are returned.

        Returns:
            Entries in descriptor order.

        Raises:
            AccessDeniedError: If the descriptor cannot be read.
            PathNotFoundError: If the path does not exist.
            OSError: For any other OS-level failure.
        """

    @abstractmethod
    def replace_explicit_rules(self, path: str, retained: Sequence[AccessRule]) -> None:
        """Replace the explicit entries of a filesystem object.

        Inherited entries are left to the operating system. Explicit
        allow/deny entries not in ``retained`` are gone after the call;
        explicit entries of any other ACE type are kept unchanged.

        Args:
            path: Filesystem path.
            retained: Explicit entries to keep, as returned by read_rules.

        Raises:
            AccessDeniedError: If the descriptor cannot be written.
            PathNotFoundError: If the path does not exist.
            OSError: For any other OS-level failure.
        """


def rule_key(rule: AccessRule) -> tuple[str | None, str, int, int, int]:
    """Identity of a rule inside one descriptor.

    Two entries with the same key are interchangeable when rebuilding
    a DACL.
    """
    return (
        rule.sid or rule.identity,
        rule.access_type.value,
        int(rule.rights),
        int(rule.inheritance_flags),
        int(rule.propagation_flags),
    )


class Win32SecurityBackend(SecurityBackend):
    """Reads and writes NTFS DACLs through pywin32.

    Account names are resolved with LookupAccountSid and cached for the
    lifetime of the backend. SIDs that cannot be resolved (deleted
    accounts, foreign domains) are reported as string SIDs.
    """

    def __init__(self) -> None:
        self._names: dict[str, str] = {}
        self._win32security: Any = None
        self._ntsecuritycon: Any = None
        self._pywintypes: Any = None

    @property
    def name(self) -> str:
        return "win32"

    def is_available(self) -> bool:
        """Check if pywin32 can be imported on this system."""
        if sys.platform != "win32":
            return False
        try:
            self._load()
        except ImportError:
            return False
        return True

    def read_rules(self, path: str, *, include_inherited: bool = False) -> list[AccessRule]:
        win32security, ntc = self._load()
        descriptor = self._get_descriptor(path)
        dacl = descriptor.GetSecurityDescriptorDacl()
        if dacl is None:
            # Null DACL grants everyone full access; there are no entries
            logger.debug("Null DACL on %s", path)
            return []

        rules: list[AccessRule] = []
        for index in range(dacl.GetAceCount()):
            ace = dacl.GetAce(index)
            ace_type, ace_flags = ace[0]
            access_type = self._access_type(ace_type)
            if access_type is None:
                # Object, callback and conditional ACEs are not reported
                logger.debug("Skipping ACE type %d on %s", ace_type, path)
                continue
            mask, sid = ace[1], ace[2]

            is_inherited = bool(ace_flags & ntc.INHERITED_ACE)
            if is_inherited and not include_inherited:
                continue

            rules.append(
                AccessRule(
                    identity=self._resolve(sid),
                    rights=FileSystemRights(mask & 0xFFFFFFFF),
                    access_type=access_type,
                    is_inherited=is_inherited,
                    inheritance_flags=self._inheritance_flags(ace_flags),
                    propagation_flags=self._propagation_flags(ace_flags),
                    sid=win32security.ConvertSidToStringSid(sid),
                )
            )
        return rules

    def replace_explicit_rules(self, path: str, retained: Sequence[AccessRule]) -> None:
        win32security, ntc = self._load()
        descriptor = self._get_descriptor(path)
        dacl = descriptor.GetSecurityDescriptorDacl()
        control, _revision = descriptor.GetSecurityDescriptorControl()

        wanted = Counter(rule_key(rule) for rule in retained)
        if dacl is None:
            dacl = win32security.ACL()

        # Edited in place. Inherited ACEs go (the OS recomputes them) along
        # with unwanted explicit allow/deny ACEs; other ACE types stay.
        drop: list[int] = []
        for index in range(dacl.GetAceCount()):
            ace = dacl.GetAce(index)
            ace_type, ace_flags = ace[0]
            if ace_flags & ntc.INHERITED_ACE:
                drop.append(index)
                continue
            access_type = self._access_type(ace_type)
            if access_type is None:
                logger.debug("Keeping ACE type %d on %s unchanged", ace_type, path)
                continue

            mask, sid = ace[1], ace[2]
            key = (
                win32security.ConvertSidToStringSid(sid),
                access_type.value,
                mask & 0xFFFFFFFF,
                int(self._inheritance_flags(ace_flags)),
                int(self._propagation_flags(ace_flags)),
            )
            if wanted[key] > 0:
                wanted[key] -= 1
            else:
                drop.append(index)

        missing = [key for key, count in wanted.items() if count > 0]
        if missing:
            msg = f"Descriptor of {path} changed while processing: {len(missing)} entries missing"
            raise ShareAclError(msg)

        # Highest index first so earlier indexes stay valid
        for index in reversed(drop):
            dacl.DeleteAce(index)

        info = win32security.DACL_SECURITY_INFORMATION
        if control & ntc.SE_DACL_PROTECTED:
            info |= win32security.PROTECTED_DACL_SECURITY_INFORMATION
        else:
            info |= win32security.UNPROTECTED_DACL_SECURITY_INFORMATION

        try:
            win32security.SetNamedSecurityInfo(
                path, win32security.SE_FILE_OBJECT, info, None, None, dacl, None
            )
        except self._pywintypes.error as e:
            raise self._translate(path, e) from e

    # === Private helpers ===

    def _load(self) -> tuple[Any, Any]:
        """Import pywin32 modules on first use."""
        if self._win32security is None:
            import ntsecuritycon
            import pywintypes
            import win32security

            self._win32security = win32security
            self._ntsecuritycon = ntsecuritycon
            self._pywintypes = pywintypes
        return self._win32security, self._ntsecuritycon

    def _get_descriptor(self, path: str) -> Any:
        win32security, _ = self._load()
        try:
            return win32security.GetNamedSecurityInfo(
                path,
                win32security.SE_FILE_OBJECT,
                win32security.DACL_SECURITY_INFORMATION,
            )
        except self._pywintypes.error as e:
            raise self._translate(path, e) from e

    def _resolve(self, sid: Any) -> str:
        """Translate a SID to DOMAIN\\name, caching the result."""
        win32security, _ = self._load()
        sid_string = win32security.ConvertSidToStringSid(sid)
        if sid_string in self._names:
            return self._names[sid_string]

        try:
            name, domain, _account_type = win32security.LookupAccountSid(None, sid)
            identity = f"{domain}\\{name}" if domain else name
        except self._pywintypes.error as e:
            logger.debug("Cannot resolve %s: %s", sid_string, e.strerror)
            identity = sid_string

        self._names[sid_string] = identity
        return identity

    def _access_type(self, ace_type: int) -> AccessType | None:
        """Map a plain allow/deny ACE type; None for every other type."""
        ntc = self._ntsecuritycon
        if ace_type == ntc.ACCESS_ALLOWED_ACE_TYPE:
            return AccessType.ALLOW
        if ace_type == ntc.ACCESS_DENIED_ACE_TYPE:
            return AccessType.DENY
        return None

    def _inheritance_flags(self, ace_flags: int) -> InheritanceFlags:
        ntc = self._ntsecuritycon
        flags = InheritanceFlags.NONE
        if ace_flags & ntc.CONTAINER_INHERIT_ACE:
            flags |= InheritanceFlags.CONTAINER_INHERIT
        if ace_flags & ntc.OBJECT_INHERIT_ACE:
            flags |= InheritanceFlags.OBJECT_INHERIT
        return flags

    def _propagation_flags(self, ace_flags: int) -> PropagationFlags:
        ntc = self._ntsecuritycon
        flags = PropagationFlags.NONE
        if ace_flags & ntc.NO_PROPAGATE_INHERIT_ACE:
            flags |= PropagationFlags.NO_PROPAGATE_INHERIT
        if ace_flags & ntc.INHERIT_ONLY_ACE:
            flags |= PropagationFlags.INHERIT_ONLY
        return flags

    @staticmethod
    def _translate(path: str, error: Any) -> Exception:
        """Map a pywintypes.error to a domain exception."""
        code = getattr(error, "winerror", None)
        message = f"{path}: {getattr(error, 'strerror', error)}"
        if code in (_ERROR_ACCESS_DENIED, _ERROR_PRIVILEGE_NOT_HELD):
            return AccessDeniedError(path, message)
        if code in (_ERROR_FILE_NOT_FOUND, _ERROR_PATH_NOT_FOUND):
            return PathNotFoundError(path, message)
        return OSError(code, message)


def get_backend(name: str = "win32") -> SecurityBackend:
    """Create a security backend by name.

    Args:
        name: Backend name. Only "win32" ships with shareacl.

    Returns:
        SecurityBackend instance.

    Raises:
        ValueError: If the name is not recognized.
    """
    backends: dict[str, type[SecurityBackend]] = {
        "win32": Win32SecurityBackend,
    }
    if name not in backends:
        msg = f"Unknown security backend: {name}. Available: {list(backends)}"
        raise ValueError(msg)
    return backends[name]()

