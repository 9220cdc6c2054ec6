"""CSV export of ACL report records."""

import csv
from collections.abc import Iterable
from datetime import datetime
from itertools import chain
from pathlib import Path

from shareacl.acl.models import FolderRecord, format_flags

BASE_COLUMNS: tuple[str, ...] = ("FolderPath", "IdentityReference", "FileSystemRights")
EXTENDED_COLUMNS: tuple[str, ...] = (
    *BASE_COLUMNS,
    "AccessControlType",
    "IsInherited",
    "InheritanceFlags",
    "PropagationFlags",
)


def export_filename(prefix: str = "acl-report", now: datetime | None = None) -> str:
    """Build a timestamped export file name (e.g. acl-report_20260101_120000.csv)."""
    stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{stamp}.csv"


def export_records(
    records: Iterable[FolderRecord],
    directory: Path,
    *,
    all_rules: bool = False,
    prefix: str = "acl-report",
    delimiter: str = ",",
) -> tuple[Path, int]:
    """Write report records to a timestamped CSV file.

    One row is written per entry; folders without entries and folders
    that failed to read produce no rows. The extended column set is used
    for unfiltered audit exports.

    The first record is pulled before the file is created, so a scan
    that fails at its root never leaves an empty export behind.

    Args:
        records: Report records in traversal order.
        directory: Output directory (created if missing).
        all_rules: If True, write the extended column set.
        prefix: File name prefix.
        delimiter: CSV field delimiter.

    Returns:
        Tuple of (written file path, number of rows).

    Raises:
        PathNotFoundError: Propagated from the scan if the root is missing.
        OSError: If the file cannot be written.
    """
    iterator = iter(records)
    first = next(iterator, None)

    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(prefix)
    columns = EXTENDED_COLUMNS if all_rules else BASE_COLUMNS

    rows = 0
    # utf-8-sig so Excel detects the encoding of DOMAIN\name values
    with path.open("w", newline="", encoding="utf-8-sig") as f:
        writer = csv.writer(f, delimiter=delimiter)
        writer.writerow(columns)
        if first is None:
            return path, rows
        for record in chain((first,), iterator):
            for rule in record.rules:
                row = [record.path, rule.identity, rule.rights_display]
                if all_rules:
                    row.extend(
                        [
                            rule.access_type.value,
                            str(rule.is_inherited),
                            format_flags(rule.inheritance_flags),
                            format_flags(rule.propagation_flags),
                        ]
                    )
                writer.writerow(row)
                rows += 1

    return path, rows

