"""ACL domain models.

This module defines the data structures for access-control entries read
from NTFS security descriptors, the per-folder records produced by a
report scan, and the per-folder results of a removal run.
"""

from dataclasses import dataclass
from enum import Enum, IntFlag


class FileSystemRights(IntFlag):
    """NTFS file system access mask bits.

    Values match the Windows access mask constants. Composite members
    (READ, WRITE, MODIFY, ...) are the standard groupings shown by
    Windows security tooling.
    """

    READ_DATA = 0x1
    CREATE_FILES = 0x2
    APPEND_DATA = 0x4
    READ_EXTENDED_ATTRIBUTES = 0x8
    WRITE_EXTENDED_ATTRIBUTES = 0x10
    EXECUTE_FILE = 0x20
    DELETE_SUBDIRECTORIES_AND_FILES = 0x40
    READ_ATTRIBUTES = 0x80
    WRITE_ATTRIBUTES = 0x100
    DELETE = 0x10000
    READ_PERMISSIONS = 0x20000
    CHANGE_PERMISSIONS = 0x40000
    TAKE_OWNERSHIP = 0x80000
    SYNCHRONIZE = 0x100000

    GENERIC_ALL = 0x10000000
    GENERIC_EXECUTE = 0x20000000
    GENERIC_WRITE = 0x40000000
    GENERIC_READ = 0x80000000

    READ = READ_DATA | READ_EXTENDED_ATTRIBUTES | READ_ATTRIBUTES | READ_PERMISSIONS
    WRITE = CREATE_FILES | APPEND_DATA | WRITE_EXTENDED_ATTRIBUTES | WRITE_ATTRIBUTES
    READ_AND_EXECUTE = READ | EXECUTE_FILE
    MODIFY = READ_AND_EXECUTE | WRITE | DELETE
    FULL_CONTROL = (
        MODIFY
        | DELETE_SUBDIRECTORIES_AND_FILES
        | CHANGE_PERMISSIONS
        | TAKE_OWNERSHIP
        | SYNCHRONIZE
    )


# Display names in the order they are tried, largest groupings first.
_RIGHTS_DISPLAY: tuple[tuple[FileSystemRights, str], ...] = (
    (FileSystemRights.FULL_CONTROL, "FullControl"),
    (FileSystemRights.MODIFY, "Modify"),
    (FileSystemRights.READ_AND_EXECUTE, "ReadAndExecute"),
    (FileSystemRights.READ, "Read"),
    (FileSystemRights.WRITE, "Write"),
    (FileSystemRights.READ_DATA, "ReadData"),
    (FileSystemRights.CREATE_FILES, "CreateFiles"),
    (FileSystemRights.APPEND_DATA, "AppendData"),
    (FileSystemRights.READ_EXTENDED_ATTRIBUTES, "ReadExtendedAttributes"),
    (FileSystemRights.WRITE_EXTENDED_ATTRIBUTES, "WriteExtendedAttributes"),
    (FileSystemRights.EXECUTE_FILE, "ExecuteFile"),
    (FileSystemRights.DELETE_SUBDIRECTORIES_AND_FILES, "DeleteSubdirectoriesAndFiles"),
    (FileSystemRights.READ_ATTRIBUTES, "ReadAttributes"),
    (FileSystemRights.WRITE_ATTRIBUTES, "WriteAttributes"),
    (FileSystemRights.DELETE, "Delete"),
    (FileSystemRights.READ_PERMISSIONS, "ReadPermissions"),
    (FileSystemRights.CHANGE_PERMISSIONS, "ChangePermissions"),
    (FileSystemRights.TAKE_OWNERSHIP, "TakeOwnership"),
    (FileSystemRights.SYNCHRONIZE, "Synchronize"),
    (FileSystemRights.GENERIC_ALL, "GenericAll"),
    (FileSystemRights.GENERIC_EXECUTE, "GenericExecute"),
    (FileSystemRights.GENERIC_WRITE, "GenericWrite"),
    (FileSystemRights.GENERIC_READ, "GenericRead"),
)


def format_rights(mask: int) -> str:
    """Render an access mask the way Windows security tooling does.

    Composite groupings are consumed first, then single bits. Bits that
    have no name are appended as a decimal number.

    Args:
        mask: Raw access mask.

    Returns:
        Comma-separated rights names (e.g., "Modify, Synchronize"),
        or "0" for an empty mask.
    """
    if mask == 0:
        return "0"

    remaining = int(mask)
    names: list[str] = []
    for flag, name in _RIGHTS_DISPLAY:
        value = int(flag)
        if remaining & value == value:
            names.append(name)
            remaining &= ~value
        if not remaining:
            break

    if remaining:
        names.append(str(remaining))
    return ", ".join(names)


class AccessType(str, Enum):
    """Whether an access-control entry grants or denies its rights."""

    ALLOW = "Allow"
    DENY = "Deny"


class InheritanceFlags(IntFlag):
    """How an entry is inherited by child objects."""

    NONE = 0
    CONTAINER_INHERIT = 1
    OBJECT_INHERIT = 2


class PropagationFlags(IntFlag):
    """How inheritance of an entry propagates to descendants."""

    NONE = 0
    NO_PROPAGATE_INHERIT = 1
    INHERIT_ONLY = 2


def format_flags(value: IntFlag) -> str:
    """Render inheritance/propagation flags as comma-separated names.

    Args:
        value: An InheritanceFlags or PropagationFlags value.

    Returns:
        CamelCase member names (e.g., "ContainerInherit, ObjectInherit"),
        or "None" when no flag is set.
    """
    names = [
        "".join(part.capitalize() for part in member.name.split("_"))
        for member in type(value)
        if member.value and value & member == member and member.name
    ]
    return ", ".join(names) if names else "None"


@dataclass(frozen=True, slots=True)
class AccessRule:
    """A single access-control entry of a filesystem object.

    Attributes:
        identity: Trustee name (e.g., "CONTOSO\\Finance", "BUILTIN\\Users")
            or a string SID when the account cannot be resolved.
        rights: Access mask granted or denied.
        access_type: Allow or Deny.
        is_inherited: True if inherited from a parent container.
        inheritance_flags: Container/object inheritance of this entry.
        propagation_flags: Propagation behaviour of this entry.
        sid: String SID of the trustee, if known.
    """

    identity: str
    rights: FileSystemRights
    access_type: AccessType = AccessType.ALLOW
    is_inherited: bool = False
    inheritance_flags: InheritanceFlags = InheritanceFlags.NONE
    propagation_flags: PropagationFlags = PropagationFlags.NONE
    sid: str | None = None

    def __post_init__(self) -> None:
        """Validate rule data after initialization."""
        if not self.identity:
            msg = "Identity cannot be empty"
            raise ValueError(msg)

    @property
    def rights_display(self) -> str:
        """Rights rendered as display names."""
        return format_rights(self.rights)

    def describe(self) -> str:
        """One-line human readable description of the rule."""
        inherited = " (inherited)" if self.is_inherited else ""
        return f"{self.identity} {self.access_type.value} {self.rights_display}{inherited}"


@dataclass(frozen=True, slots=True)
class FolderRecord:
    """Access-control entries reported for one directory.

    Attributes:
        path: Directory path.
        rules: Entries left after filtering, in descriptor order.
        error: Error message if the descriptor could not be read.
    """

    path: str
    rules: tuple[AccessRule, ...] = ()
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the descriptor could not be read."""
        return self.error is not None


@dataclass(frozen=True, slots=True)
class RemovalResult:
    """Result of removing unprotected entries from one directory.

    Attributes:
        path: Directory path.
        original: Explicit entries before mutation.
        removed: Entries deleted (or that would be deleted in dry-run).
        resulting: Explicit entries after mutation, re-read from the descriptor.
        success: Whether the folder was processed without error.
        error: Error message if processing failed.
        dry_run: Whether this was a dry-run (nothing written back).
    """

    path: str
    original: tuple[AccessRule, ...] = ()
    removed: tuple[AccessRule, ...] = ()
    resulting: tuple[AccessRule, ...] = ()
    success: bool = True
    error: str | None = None
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        """Check if entries were actually removed from the descriptor."""
        return self.success and bool(self.removed) and not self.dry_run
