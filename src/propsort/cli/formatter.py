# src/propsort/cli/formatter.py
import difflib
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

STATUS_COLORS = {
    "SORTED": "green",
    "UNCHANGED": "dim",
    "PREVIEW": "yellow",
}


class ReportFormatter:
    """
    Renders diffs, diagnostics and the execution report of a run.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_diff(self, original_text: str, sorted_text: str, file_name: str):
        """Colorized unified diff between the file and its sorted form."""
        if original_text is None or sorted_text is None:
            return

        diff_list = list(difflib.unified_diff(
            original_text.splitlines(),
            sorted_text.splitlines(),
            fromfile=f"Original: {file_name}",
            tofile="Sorted",
            lineterm=""
        ))

        if not diff_list:
            self.console.print(f"[dim]ℹ {file_name} is already sorted.[/dim]")
            return

        syntax = Syntax("\n".join(diff_list), "diff", theme="monokai", line_numbers=True)
        self.console.print(Panel(syntax, title=f"Proposed Order: {file_name}", border_style="green"))

    def show_diagnostics(self, report: Dict[str, Any]):
        for warning in report.get("warnings", []):
            self.console.print(f"[yellow]⚠ {report['file_path']}:[/yellow] {warning}")
        for error in report.get("errors", []):
            self.console.print(f"[bold red]✖ {report['file_path']}:[/bold red] {error}")

    def print_final_table(self, reports: List[Dict[str, Any]], summary: Dict[str, Any]):
        table = Table(title="PropSort Execution Report", show_lines=True, header_style="bold magenta")
        table.add_column("File Path", style="cyan")
        table.add_column("Type", style="white")
        table.add_column("Entities", justify="right")
        table.add_column("Status", style="bold")
        table.add_column("Result", justify="center")

        for r in reports:
            status = r.get("status", "FAILED")
            color = STATUS_COLORS.get(status, "red")
            table.add_row(
                str(r.get("file_path")), str(r.get("file_type", "")),
                str(r.get("entities", 0)),
                f"[{color}]{status}[/{color}]",
                "✅" if r.get("success") else "❌",
            )

        self.console.print(table)
        self.console.print(Panel(
            f"[bold white]Summary Report[/bold white]\n"
            f"════════════════════════════════════════\n"
            f"Total Files:     {summary['total_files']}\n"
            f"Success:         [green]{summary['successful']}[/green]\n"
            f"Unsorted:        [yellow]{summary['unsorted']}[/yellow]\n"
            f"Written:         {summary['written_to_disk']}\n"
            f"System Errors:   [red]{summary['system_errors']}[/red]\n"
            f"Backups Created: {summary['backups_created']}",
            border_style="dim"
        ))
