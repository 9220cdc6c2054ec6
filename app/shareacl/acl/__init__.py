"""ACL enumeration, reporting and removal.

This module provides the security backend abstraction, the folder
scanner for ACL reports, identity filters, the removal operator with
its transcript log, and CSV export.
"""

from shareacl.acl.backend import SecurityBackend, Win32SecurityBackend, get_backend
from shareacl.acl.export import export_records
from shareacl.acl.identity import (
    DEFAULT_EXCLUSIONS,
    PROTECTED_IDENTITY_PATTERNS,
    ExclusionSet,
    KeepPolicy,
    filter_report,
    identity_fragment,
    partition_for_removal,
)
from shareacl.acl.models import (
    AccessRule,
    AccessType,
    FileSystemRights,
    FolderRecord,
    InheritanceFlags,
    PropagationFlags,
    RemovalResult,
)
from shareacl.acl.operator import AclRemover
from shareacl.acl.removal_log import RemovalLog
from shareacl.acl.scanner import AclScanner, iter_folders

__all__ = [
    "DEFAULT_EXCLUSIONS",
    "PROTECTED_IDENTITY_PATTERNS",
    "AccessRule",
    "AccessType",
    "AclRemover",
    "AclScanner",
    "ExclusionSet",
    "FileSystemRights",
    "FolderRecord",
    "InheritanceFlags",
    "KeepPolicy",
    "PropagationFlags",
    "RemovalLog",
    "RemovalResult",
    "SecurityBackend",
    "Win32SecurityBackend",
    "export_records",
    "filter_report",
    "get_backend",
    "identity_fragment",
    "iter_folders",
    "partition_for_removal",
]
