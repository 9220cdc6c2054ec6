"""Shared Rich display functions for command results.

Provides table builders and summary printers for report records,
removal results, rename results and scrub results.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from shareacl.acl.models import FolderRecord, RemovalResult
from shareacl.rename.renamer import RenameResult
from shareacl.scrub.scrubber import ScrubResult
from shareacl.utils.formatting import (
    console,
    create_rule_table,
    format_rule_row,
    print_info,
    print_success,
    print_warning,
)


def create_report_table(records: list[FolderRecord], *, extended: bool = False) -> Table:
    """Create a Rich table with one row per reported entry.

    Folders that failed to read get a single error row.

    Args:
        records: Report records in traversal order.
        extended: If True, show the extended rule columns.

    Returns:
        Rich Table configured for report display.
    """
    title = "Access Rules (all)" if extended else "Access Rules"
    table = create_rule_table(title, extended=extended)

    for record in records:
        if record.failed:
            error = escape(record.error or "")
            table.add_row(escape(record.path), "[error]unreadable[/]", f"[muted]{error}[/]")
            continue
        for rule in record.rules:
            table.add_row(*format_rule_row(record.path, rule, extended=extended))

    return table


def print_report_summary(records: list[FolderRecord]) -> None:
    """Print folder and entry counts for a report."""
    rule_count = sum(len(r.rules) for r in records)
    failed = sum(1 for r in records if r.failed)
    console.print(f"\n[dim]Scanned {len(records)} folder(s), {rule_count} rule(s) reported[/]")
    if failed:
        print_warning(f"{failed} folder(s) could not be read")


def create_removal_table(results: list[RemovalResult]) -> Table:
    """Create a Rich table for removal results.

    Args:
        results: Removal results in traversal order.

    Returns:
        Rich Table with one row per folder that had something to report.
    """
    dry_run = any(r.dry_run for r in results)
    table = Table(
        title="Removal Results (Dry Run)" if dry_run else "Removal Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Folder", style="folder", overflow="fold")
    table.add_column("Removed")
    table.add_column("Kept", style="kept")

    for result in results:
        if not result.success:
            status = "[error]FAIL[/]"
            removed = f"[muted]{escape(result.error or 'Unknown error')}[/]"
        elif not result.removed:
            continue
        else:
            status = "[info]dry-run[/]" if result.dry_run else "[success]OK[/]"
            removed = ", ".join(f"[removed]{escape(rule.identity)}[/]" for rule in result.removed)
        kept = ", ".join(escape(rule.identity) for rule in result.resulting)
        table.add_row(status, escape(result.path), removed, kept)

    return table


def print_removal_summary(results: list[RemovalResult]) -> None:
    """Print processed vs. changed folder counts for a removal run."""
    processed = len(results)
    failed = sum(1 for r in results if not r.success)
    removed = sum(len(r.removed) for r in results if r.success)

    if any(r.dry_run for r in results):
        affected = sum(1 for r in results if r.success and r.removed)
        print_info(
            f"Dry-run: {removed} rule(s) would be removed from "
            f"{affected} of {processed} folder(s)."
        )
    elif failed:
        print_warning(f"{processed - failed} processed, {failed} failed")
    else:
        changed = sum(1 for r in results if r.changed)
        print_success(
            f"Processed {processed} folder(s), changed {changed}, removed {removed} rule(s)."
        )


def create_rename_table(results: list[RenameResult]) -> Table:
    """Create a Rich table for rename results."""
    table = Table(title="Rename Results", show_lines=False)
    table.add_column("Status", width=8)
    table.add_column("Source", style="bold", overflow="fold")
    table.add_column("New Name", overflow="fold")

    for r in results:
        if r.dry_run:
            status = "[info]dry-run[/]"
        elif r.success:
            status = "[success]renamed[/]"
        elif r.skipped:
            status = "[warning]skipped[/]"
        else:
            status = "[error]failed[/]"
        detail = escape(Path(r.target).name)
        if r.error:
            detail = f"{detail} [muted]({escape(r.error)})[/]"
        table.add_row(status, escape(r.source), detail)

    return table


def print_rename_summary(results: list[RenameResult]) -> None:
    """Print a summary of rename results."""
    renamed = sum(1 for r in results if r.success and not r.dry_run)
    would = sum(1 for r in results if r.dry_run)
    skipped = sum(1 for r in results if r.skipped)
    failed = sum(1 for r in results if not r.success and not r.skipped)

    if would:
        print_info(f"Dry-run: {would} item(s) would be renamed.")
    elif failed or skipped:
        print_warning(f"{renamed} renamed, {skipped} skipped, {failed} failed")
    else:
        print_success(f"Renamed {renamed} item(s).")


def create_scrub_table(results: list[ScrubResult]) -> Table:
    """Create a Rich table for scrub results; unchanged files are omitted."""
    table = Table(title="Scrub Results", show_lines=False)
    table.add_column("Status", width=8)
    table.add_column("File", style="bold", overflow="fold")
    table.add_column("Replacements", justify="right")

    for r in results:
        if r.error:
            table.add_row("[error]failed[/]", escape(r.path), f"[muted]{escape(r.error)}[/]")
        elif r.changed:
            status = "[info]dry-run[/]" if r.dry_run else "[success]scrubbed[/]"
            table.add_row(status, escape(r.path), str(r.replacements))

    return table


def print_scrub_summary(results: list[ScrubResult]) -> None:
    """Print a summary of scrub results."""
    changed = sum(1 for r in results if r.changed)
    replacements = sum(r.replacements for r in results)
    failed = sum(1 for r in results if r.error)

    if any(r.dry_run for r in results):
        print_info(
            f"Dry-run: {replacements} replacement(s) in {changed} of {len(results)} file(s)."
        )
    elif failed:
        print_warning(f"{changed} file(s) scrubbed, {failed} failed")
    else:
        print_success(
            f"Scrubbed {changed} of {len(results)} file(s), {replacements} replacement(s)."
        )
