"""
ProfileKit - Profile cleanup: deletion engine with preview mode and logging.
"""

from __future__ import annotations

import csv
import logging
import os
import stat
import time
from datetime import datetime
from typing import Callable, List, Mapping, Optional

from rich.progress import Progress, BarColumn, TextColumn, TimeRemainingColumn

from models import CleanupReport, DeletedFileRecord
from scanner import scan_aged
from targets import expand_placeholders, load_targets

logger = logging.getLogger(__name__)

ConfirmCallback = Optional[Callable[[List[DeletedFileRecord]], bool]]
# confirm(records) -> True to delete, False to only preview


def clean_profile(
    xml_path: str,
    dry_run: bool = False,
    environ: Optional[Mapping[str, str]] = None,
    now: Optional[float] = None,
    confirm: ConfirmCallback = None,
    log_dir: str = "",
    show_progress: bool = False,
) -> CleanupReport:
    """
    Delete every file older than its target's age threshold.

    Args:
        xml_path: Targets XML document (see targets.py).
        dry_run: Report what would be deleted without deleting it.
        environ: Environment used to expand %NAME% placeholders.
        now: Reference timestamp for the age cutoff (default: current time).
        confirm: Optional gate called with the candidate list before deleting.
        log_dir: Directory to write the deletion log CSV ("" = no log).
        show_progress: Render a progress bar while deleting.

    Returns:
        CleanupReport listing every matching file, deleted or not.

    Raises:
        ConfigurationError: the XML document cannot be read or parsed.
    """
    targets = load_targets(xml_path)
    if now is None:
        now = time.time()

    candidates: List[DeletedFileRecord] = []
    seen = set()
    for target in targets:
        for entry in target.entries:
            path = expand_placeholders(entry.path, environ)
            found = scan_aged(path, entry.days, now=now, target=target.name)
            logger.info("%s: %d files older than %d days in %s",
                        target.name, len(found), entry.days, path)
            for record in found:
                # Overlapping targets can reach the same file twice
                key = os.path.normcase(os.path.abspath(record.path))
                if key in seen:
                    continue
                seen.add(key)
                candidates.append(record)

    return delete_files(
        candidates,
        dry_run=dry_run,
        confirm=confirm,
        log_dir=log_dir,
        show_progress=show_progress,
    )


def delete_files(
    records: List[DeletedFileRecord],
    dry_run: bool = False,
    confirm: ConfirmCallback = None,
    log_dir: str = "",
    show_progress: bool = False,
) -> CleanupReport:
    """
    Delete the given files one by one. A failure on one file is recorded
    and does not stop the others. The report always contains every record.
    """
    if not dry_run and confirm is not None and records:
        dry_run = not confirm(records)

    report = CleanupReport(records=records, dry_run=dry_run)
    if dry_run or not records:
        for record in records:
            logger.info("Would delete %s (%s)", record.path, record.size_human)
        return report

    clean_start = time.perf_counter()

    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        TimeRemainingColumn(),
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Cleaning...", total=len(records))

        for record in records:
            try:
                _delete_file(record.path)
                record.deleted = True
            except (OSError, PermissionError) as exc:
                record.error = str(exc)
                logger.warning("Could not delete %s: %s", record.path, exc)
            progress.advance(task)

    report.duration_s = time.perf_counter() - clean_start

    if log_dir:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report.log_path = os.path.join(log_dir, f"cleanup_log_{timestamp}.csv")
        _write_log(report.log_path, records)

    return report


def _delete_file(path: str) -> None:
    """Delete a single file, clearing the read-only attribute first."""
    if not os.path.lexists(path):
        return  # Already gone
    if not os.path.islink(path):
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    os.remove(path)


def _write_log(log_path: str, records: List[DeletedFileRecord]) -> None:
    """Write deletion log as CSV."""
    fieldnames = ["timestamp", "target", "path", "size_bytes", "modified", "status", "error"]
    try:
        with open(log_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for record in records:
                writer.writerow({
                    "timestamp": datetime.now().isoformat(),
                    "target": record.target,
                    "path": record.path,
                    "size_bytes": record.size,
                    "modified": datetime.fromtimestamp(record.modified).isoformat(),
                    "status": "deleted" if record.deleted else "failed",
                    "error": record.error,
                })
    except (OSError, PermissionError) as exc:
        logger.warning("Could not write cleanup log %s: %s", log_path, exc)
