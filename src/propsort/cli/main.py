#!/usr/bin/env python3
"""
PROPSORT CLI
------------
Command line front end of the sorter.

    propsort sort <path>    sort files in place (with confirmation)
    propsort check <path>   report unsorted files; exit 1 if any

Flags map onto SortOptions; a --config file supplies the base options
and flags given on the command line override it.

Author: PropSort Team
Date: 2026-10-18
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
    BarColumn,
    TaskProgressColumn
)

from propsort.cli.formatter import ReportFormatter
from propsort.core.engine import SortEngine
from propsort.core.errors import PropSortError
from propsort.core.options import EXTENSION_MAP, load_config

VERSION = "1.0.0"

# Global console for consistent styling across the application
console = Console()


class PropSortCLI:
    """
    Translates command line arguments into SortEngine runs and renders
    their reports.
    """

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="propsort",
            description="PropSort - Sort properties of TS, CSS, Go, JSON and YAML sources in place",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.formatter = ReportFormatter(console)
        self._setup_args()

    def _setup_args(self):
        self.parser.add_argument("-V", "--version", action="version", version=f"propsort v{VERSION}")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        sort_parser = subparsers.add_parser("sort", help="Sort properties and write the files")
        self._add_common(sort_parser)
        sort_parser.add_argument("--dry-run", action="store_true", help="Preview results without writing")
        sort_parser.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

        check_parser = subparsers.add_parser("check", help="Report files whose properties are out of order")
        self._add_common(check_parser)

    def _add_common(self, sub: argparse.ArgumentParser):
        sub.add_argument("path", help="File or directory to process")
        sub.add_argument("--ext", action="append", help="Extension filter, repeatable (default: all supported)")
        sub.add_argument("--max-depth", type=int, default=10, help="Directory recursion limit")
        sub.add_argument("--diff", action="store_true", help="Show a unified diff for changed files")
        sub.add_argument("--config", help="JSON or YAML options file")
        sub.add_argument("--verbose", action="store_true", help="Debug logging")

        group = sub.add_argument_group("sorting")
        group.add_argument("--order", dest="sort_order", choices=("asc", "desc"))
        group.add_argument("--case-insensitive", dest="case_sensitive", action="store_const", const=False)
        group.add_argument("--natural", dest="natural_sort", action="store_const", const=True)
        group.add_argument("--custom-order", help="Comma separated names that sort first")
        group.add_argument("--group-by-type", action="store_const", const=True)
        group.add_argument("--prioritize-required", action="store_const", const=True)
        group.add_argument("--no-nested", dest="sort_nested_objects", action="store_const", const=False)
        group.add_argument("--no-comments", dest="include_comments", action="store_const", const=False)

        lang = sub.add_argument_group("languages")
        lang.add_argument("--css-importance", dest="sort_by_importance", action="store_const", const=True)
        lang.add_argument("--css-vendor-groups", dest="group_vendor_prefixes", action="store_const", const=True)
        lang.add_argument("--css-categories", dest="group_by_category", action="store_const", const=True)
        lang.add_argument("--sort-keyframes", action="store_const", const=True)
        lang.add_argument("--go-strategy", dest="sort_struct_fields",
                          choices=("alphabetical", "by-type", "by-size", "preserve-tags"))
        lang.add_argument("--json-sort-arrays", dest="preserve_array_order", action="store_const", const=False)
        lang.add_argument("--json-schema", dest="group_by_schema", action="store_const", const=True)

        fmt = sub.add_argument_group("formatting")
        fmt.add_argument("--line-ending", choices=("auto", "lf", "crlf"))
        fmt.add_argument("--trailing-commas", choices=("preserve", "add", "remove"))
        fmt.add_argument("--property-spacing", choices=("compact", "spaced", "aligned"))
        fmt.add_argument("--comment-style", choices=("preserve", "single-line", "multi-line"))

    # --- Option assembly ---

    OPTION_DESTS = (
        "sort_order", "case_sensitive", "natural_sort", "group_by_type", "prioritize_required",
        "sort_nested_objects", "include_comments", "sort_by_importance", "group_vendor_prefixes",
        "group_by_category", "sort_keyframes", "sort_struct_fields", "preserve_array_order",
        "group_by_schema", "line_ending", "trailing_commas", "property_spacing", "comment_style",
    )

    def build_options(self, args: argparse.Namespace) -> Dict[str, Any]:
        options: Dict[str, Any] = load_config(args.config) if args.config else {}
        for dest in self.OPTION_DESTS:
            value = getattr(args, dest, None)
            if value is not None:
                options[dest] = value
        if args.custom_order:
            options["custom_order"] = [name.strip() for name in args.custom_order.split(",") if name.strip()]
        return options

    # --- Execution ---

    def print_header(self, subtitle: str):
        console.print(Panel.fit(
            f"[bold cyan]PropSort v{VERSION}[/bold cyan]",
            title=f"[bold white]{subtitle}[/bold white]",
            border_style="cyan"
        ))

    def _confirm_action(self, target_count: int, args: argparse.Namespace) -> bool:
        if args.dry_run or args.yes:
            return True
        noun = "this file" if target_count == 1 else f"{target_count} files"
        choice = console.input(f"\n[bold yellow]Sort {noun}? (y/N): [/bold yellow]").lower()
        return choice == "y"

    def _targets(self, input_path: Path, args: argparse.Namespace) -> List[Path]:
        if input_path.is_file():
            return [input_path]
        exts = {(e if e.startswith(".") else f".{e}").lower() for e in (args.ext or EXTENSION_MAP)}
        return sorted(
            f for f in input_path.rglob("*")
            if f.is_file() and not f.is_symlink() and f.suffix.lower() in exts
            and len(f.relative_to(input_path).parts) <= args.max_depth
        )

    def run_engine(self, args: argparse.Namespace, write: bool) -> int:
        input_path = Path(args.path).resolve()
        if not input_path.exists():
            console.print(f"[bold red]Error:[/bold red] Path '{args.path}' not found.")
            return 2

        try:
            options = self.build_options(args)
        except PropSortError as e:
            console.print(f"[bold red]Config error:[/bold red] {e}")
            return 2

        workspace = input_path if input_path.is_dir() else input_path.parent
        engine = SortEngine(str(workspace), options)
        target_files = self._targets(input_path, args)

        if not target_files:
            console.print("\n[bold yellow]⚠️  No supported files found.[/bold yellow]")
            return 0

        if write and not self._confirm_action(len(target_files), args):
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            return 1

        dry_run = not write or args.dry_run
        reports = []
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console
        ) as progress:
            task_id = progress.add_task("Sorting properties...", total=len(target_files))
            for file_path in target_files:
                rel_path = str(file_path.relative_to(workspace))
                report = engine.sort_file(rel_path, dry_run=dry_run)
                reports.append(report)

                if args.diff and report.get("modified"):
                    progress.stop()
                    self.formatter.display_diff(report["original_content"], report["sorted_content"], rel_path)
                    progress.start()

                progress.update(task_id, advance=1, description=f"Checked: {file_path.name}")

        for report in reports:
            self.formatter.show_diagnostics(report)
        summary = engine.generate_summary(reports)
        self.formatter.print_final_table(reports, summary)
        return self.exit_code(reports, write)

    @staticmethod
    def exit_code(reports: List[Dict[str, Any]], write: bool) -> int:
        if any(not r.get("success") for r in reports):
            return 1
        if not write and any(r.get("modified") for r in reports):
            return 1
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        if args.command is None:
            self.print_header("Property Sorter")
            self.parser.print_help()
            return 0

        if args.verbose:
            logging.getLogger("propsort").setLevel(logging.DEBUG)

        if args.command == "check":
            self.print_header("Order Check")
            return self.run_engine(args, write=False)
        self.print_header("Sort")
        return self.run_engine(args, write=True)


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(PropSortCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
