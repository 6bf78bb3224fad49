r"""
ProfileKit - Windows profile management utilities

Entry point for the two tools:

Usage:
    python main.py rules Visio                    Build "Microsoft Visio.fxr" in Documents
    python main.py rules Visio Vsto --folder D:\X Scan extra folders instead of the defaults
    python main.py cleanup targets.xml            Delete aged files declared in targets.xml
    python main.py cleanup targets.xml --dry-run  Show what would be deleted
    python main.py cleanup targets.xml --confirm  Ask before deleting
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from errors import ConfigurationError

console = Console()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="profilekit",
        description="ProfileKit - hiding-rule generator and profile cleanup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show progress details")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show errors")

    sub = parser.add_subparsers(dest="command", required=True)

    rules = sub.add_parser("rules", help="Generate an app-masking hiding rule set")
    rules.add_argument("terms", nargs="+", metavar="TERM", help="Search terms (first names the file)")
    rules.add_argument(
        "--folder",
        dest="folders",
        action="append",
        default=None,
        metavar="DIR",
        help="Folder to scan for matching files/folders (repeatable; default: Office locations)",
    )
    rules.add_argument(
        "--output-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Where to write the rule file (default: your Documents folder)",
    )

    cleanup = sub.add_parser("cleanup", help="Delete aged files declared in a targets XML file")
    cleanup.add_argument("xml", metavar="XML", help="Targets XML document")
    cleanup.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without actually deleting anything",
    )
    cleanup.add_argument(
        "--confirm",
        action="store_true",
        help="Ask for confirmation before deleting",
    )
    cleanup.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory to save the cleanup log CSV",
    )
    return parser.parse_args(argv)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.INFO if verbose else (logging.ERROR if quiet else logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def run_rules(args: argparse.Namespace) -> int:
    from config import load_config
    from generator import generate_hiding_rules
    from ui import show_generation_report

    config = load_config()
    folders = args.folders or config.scan_folders or None
    output_dir = args.output_dir or config.output_dir or None

    result = generate_hiding_rules(
        args.terms,
        folders=folders,
        output_dir=output_dir,
        comment=config.comment,
    )
    show_generation_report(result)
    return 0


def run_cleanup(args: argparse.Namespace) -> int:
    from config import load_config
    from cleaner import clean_profile
    from ui import confirm_deletion, show_cleanup_report

    config = load_config()
    report = clean_profile(
        args.xml,
        dry_run=args.dry_run,
        confirm=confirm_deletion if args.confirm else None,
        log_dir=args.log_dir or config.log_dir,
        show_progress=True,
    )
    show_cleanup_report(report)

    if report.failed_count > 0:
        console.print(
            f"[yellow]Note: {report.failed_count} files could not be deleted "
            f"(likely locked by another process).[/]"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    try:
        if args.command == "rules":
            return run_rules(args)
        return run_cleanup(args)
    except (ConfigurationError, ValueError) as exc:
        console.print(f"[bold red]Error:[/] {exc}")
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        sys.exit(130)
