"""
ProfileKit - Console output and confirmation prompt using Rich + InquirerPy.
"""

from __future__ import annotations

from typing import List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from InquirerPy import inquirer

from models import (
    CleanupReport, DeletedFileRecord, GenerationResult, HidingType,
    _format_duration, _format_size,
)

console = Console()

TYPE_TAGS = {
    HidingType.FOLDER_OR_KEY: "KEY/DIR",
    HidingType.FILE_OR_VALUE: "FILE",
}


def show_generation_report(result: GenerationResult) -> None:
    """Display the rules written by the generator."""
    if result.entries:
        table = Table(
            box=box.ROUNDED,
            title="Hiding Rules Written",
            title_style="bold cyan",
        )
        table.add_column("#", justify="right", width=4)
        table.add_column("Path", max_width=90)
        table.add_column("Type", justify="center", width=9)
        for idx, entry in enumerate(result.entries, 1):
            table.add_row(str(idx), entry.path, TYPE_TAGS[entry.hiding_type])
        console.print(table)

    appended = "\n[yellow]Rules were appended to an existing file.[/]" if result.existed_before else ""
    console.print(Panel.fit(
        f"[bold green]{result.rule_count:,}[/] rules\n"
        f"Rule file: [cyan]{result.rule_file}[/]{appended}",
        border_style="green",
        title="[bold]ProfileKit Rule Generator[/]",
    ))


def _records_table(records: List[DeletedFileRecord], title: str) -> Table:
    table = Table(box=box.SIMPLE, title=title, title_style="bold cyan")
    table.add_column("Target", width=14)
    table.add_column("Path", max_width=75)
    table.add_column("Size", justify="right", width=10)
    table.add_column("Status", justify="center", width=9)
    for record in records:
        if record.deleted:
            status = "[green]deleted[/]"
        elif record.error:
            status = "[red]failed[/]"
        else:
            status = "[dim]-[/]"
        table.add_row(record.target, record.path, record.size_human, status)
    return table


def confirm_deletion(records: List[DeletedFileRecord]) -> bool:
    """
    Show the files about to be removed and ask for confirmation.

    Returns True if the user confirms deletion; False keeps it a preview.
    """
    console.print(_records_table(records, "Files Selected for Deletion"))
    total = sum(r.size for r in records)
    console.print(Panel(
        f"[bold red]WARNING: This will permanently delete {len(records):,} files "
        f"({_format_size(total)}).[/]",
        border_style="red",
    ))
    try:
        return bool(inquirer.confirm(message="Delete these files?", default=False).execute())
    except KeyboardInterrupt:
        return False


def show_cleanup_report(report: CleanupReport) -> None:
    """Display the final cleanup report."""
    if report.records:
        console.print(_records_table(report.records, "Matching Files"))

    if report.dry_run:
        console.print(Panel.fit(
            f"[bold yellow]Preview only[/] - no files were deleted.\n\n"
            f"  Matched:  [bold]{len(report.records):,}[/] files\n"
            f"  Size:     [bold]{report.targeted_mb:.2f} MB[/]",
            border_style="yellow",
            title="[bold]ProfileKit Cleanup[/]",
        ))
        return

    log_line = f"\n  Log file: [cyan]{report.log_path}[/]" if report.log_path else ""
    console.print(Panel.fit(
        f"[bold green]Cleanup Complete![/]\n\n"
        f"  Deleted:  [bold green]{report.deleted_count:,}[/] files\n"
        f"  Failed:   [bold {'red' if report.failed_count else 'dim'}]{report.failed_count:,}[/] files\n"
        f"  Freed:    [bold green]{report.freed_mb:.2f} MB[/]\n"
        f"  Duration: [bold cyan]{_format_duration(report.duration_s)}[/]"
        f"{log_line}",
        border_style="green",
        title="[bold]ProfileKit Cleanup[/]",
    ))
