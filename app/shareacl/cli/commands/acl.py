"""ACL report, export and removal commands.

Provides commands to report the explicit permissions of a folder tree,
export them to CSV, and strip every unprotected explicit entry before a
share migration.
"""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from shareacl.acl.export import export_records
from shareacl.acl.models import FolderRecord, RemovalResult, format_flags
from shareacl.acl.operator import AclRemover
from shareacl.acl.removal_log import RemovalLog, default_log_path
from shareacl.acl.scanner import AclScanner, iter_folders
from shareacl.cli.display import (
    create_removal_table,
    create_report_table,
    print_removal_summary,
    print_report_summary,
)
from shareacl.cli.types import OutputFormat, require_backend, require_config, require_root
from shareacl.core.errors import ShareAclError
from shareacl.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Report, export and remove explicit folder permissions.",
    invoke_without_command=True,
    no_args_is_help=True,
)

RootArgument = Annotated[
    Path,
    typer.Argument(help="Root folder of the share to process."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to shareacl.toml."),
]
NoRecurseOption = Annotated[
    bool,
    typer.Option("--no-recurse", help="Only process the root and its direct subfolders."),
]
NoRootOption = Annotated[
    bool,
    typer.Option("--no-root", help="Skip the root folder itself."),
]


@app.command()
def report(
    root: RootArgument,
    all_rules: Annotated[
        bool,
        typer.Option("--all", "-a", help="Report every explicit entry, ignoring exclusions."),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-x",
            help="Identity to leave out of the report (repeatable, replaces config).",
        ),
    ] = None,
    include_inherited: Annotated[
        bool,
        typer.Option("--include-inherited", help="Also report inherited entries."),
    ] = False,
    no_recurse: NoRecurseOption = False,
    no_root: NoRootOption = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    config_path: ConfigOption = None,
) -> None:
    """Report explicit permissions of every folder under ROOT."""
    config = require_config(config_path)
    root_path = require_root(root)
    backend = require_backend()

    scanner = AclScanner(
        root_path,
        backend,
        recurse=not no_recurse,
        include_root=not no_root,
        include_inherited=include_inherited,
        exclusions=config.acl.exclusion_set(exclude),
        all_rules=all_rules,
    )
    records = _scan(scanner)

    if output_format == OutputFormat.JSON:
        _print_json(records)
    else:
        console.print(create_report_table(records, extended=all_rules))
        print_report_summary(records)

    if any(r.failed for r in records):
        raise typer.Exit(code=1)


@app.command()
def export(
    root: RootArgument,
    all_rules: Annotated[
        bool,
        typer.Option("--all", "-a", help="Export every explicit entry with extended columns."),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-x",
            help="Identity to leave out of the export (repeatable, replaces config).",
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory for the CSV file."),
    ] = None,
    prefix: Annotated[
        str,
        typer.Option("--prefix", help="CSV file name prefix."),
    ] = "acl-report",
    include_inherited: Annotated[
        bool,
        typer.Option("--include-inherited", help="Also export inherited entries."),
    ] = False,
    no_recurse: NoRecurseOption = False,
    no_root: NoRootOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Export explicit permissions under ROOT to a timestamped CSV file."""
    config = require_config(config_path)
    root_path = require_root(root)
    backend = require_backend()

    scanner = AclScanner(
        root_path,
        backend,
        recurse=not no_recurse,
        include_root=not no_root,
        include_inherited=include_inherited,
        exclusions=config.acl.exclusion_set(exclude),
        all_rules=all_rules,
    )
    records: list[FolderRecord] = []

    def _collect() -> Iterator[FolderRecord]:
        for record in scanner.scan():
            records.append(record)
            yield record

    directory = output_dir or config.acl.effective_export_dir
    try:
        path, rows = export_records(
            _collect(),
            directory,
            all_rules=all_rules,
            prefix=prefix,
            delimiter=config.acl.delimiter,
        )
    except ShareAclError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Exported {rows} row(s) from {len(records)} folder(s) to {path}")

    failed = [r for r in records if r.failed]
    if failed:
        print_warning(f"{len(failed)} folder(s) could not be read")
        raise typer.Exit(code=1)


@app.command()
def remove(
    root: RootArgument,
    keep: Annotated[
        list[str] | None,
        typer.Option(
            "--keep",
            "-k",
            help="Identity to keep in addition to the protected set (repeatable).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be removed."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", "-l", help="Removal log path (default: timestamped)."),
    ] = None,
    no_recurse: NoRecurseOption = False,
    no_root: NoRootOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Remove every unprotected explicit entry from folders under ROOT."""
    config = require_config(config_path)
    root_path = require_root(root)
    backend = require_backend()
    policy = config.acl.keep_policy(keep)

    protected = escape(", ".join([*policy.patterns, *policy.keep]))
    print_info(f"Keeping entries matching: {protected}")

    # Confirm unless --yes or --dry-run
    if not dry_run and not yes:
        confirmed = typer.confirm(
            f"\nRemove all other explicit entries from folders under {root_path}?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    log_path = log_file or default_log_path(config.acl.effective_log_dir)
    folders = iter_folders(root_path, recurse=not no_recurse, include_root=not no_root)

    try:
        with RemovalLog(log_path) as log:
            remover = AclRemover(backend, policy, log=log, dry_run=dry_run)
            with console.status("Removing entries..."):
                results = list(remover.remove(folders))
    except ShareAclError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except (OSError, RuntimeError) as e:
        print_error(f"Cannot write removal log {log_path}: {e}")
        raise typer.Exit(code=1) from e

    _print_removal(results)
    print_info(f"Log written to {log_path}")

    # Exit with error if any folder failed
    if any(not r.success for r in results):
        raise typer.Exit(code=1)


# === Private helper functions ===


def _scan(scanner: AclScanner) -> list[FolderRecord]:
    """Run a scan, converting a vanished root into a clean exit."""
    try:
        with console.status("Reading permissions..."):
            return list(scanner.scan())
    except ShareAclError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _print_json(records: list[FolderRecord]) -> None:
    """Display report records as JSON."""
    data = [
        {
            "path": record.path,
            "error": record.error,
            "rules": [
                {
                    "identity": rule.identity,
                    "rights": rule.rights_display,
                    "access_type": rule.access_type.value,
                    "is_inherited": rule.is_inherited,
                    "inheritance_flags": format_flags(rule.inheritance_flags),
                    "propagation_flags": format_flags(rule.propagation_flags),
                    "sid": rule.sid,
                }
                for rule in record.rules
            ],
        }
        for record in records
    ]
    console.print_json(json.dumps(data))


def _print_removal(results: list[RemovalResult]) -> None:
    """Display removal results and the summary."""
    if any(r.removed or not r.success for r in results):
        console.print(create_removal_table(results))
    print_removal_summary(results)
