"""Bulk filename character stripping."""

from shareacl.rename.renamer import DEFAULT_STRIP_CHARS, FileRenamer, RenameResult, strip_name

__all__ = ["DEFAULT_STRIP_CHARS", "FileRenamer", "RenameResult", "strip_name"]
