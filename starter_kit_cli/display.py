import logging
from rich.logging import RichHandler
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from typing import List, Optional

from .schemas import CheckReport, Severity

SEVERITY_MARKERS = {
    Severity.PASS: "[bold green]✓[/]",
    Severity.FAIL: "[bold red]✗[/]",
    Severity.WARNING: "[bold yellow]⚠[/]",
    Severity.INFO: "[bold blue]ℹ[/]",
}


class Display:
    """
    A centralized display handler for all CLI output.

    LOGGING STANDARDS:

    This module handles structured UI elements (tables, panels, reports) and
    configures the logging system. All other modules use Python's logging
    system for progress messages:

    - DEBUG: Internal state changes, command lines, raw tool output (verbose mode only)
    - INFO: User-facing progress, detected platform, successful steps
    - WARNING: Advisories that never stop the installation
    - ERROR: Failed operations

    Fatal errors are rendered once, by the command layer, through error().
    """

    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        self._console = console or Console()
        self._verbose = verbose

        # Clear any existing handlers to avoid duplicate logs
        root_logger = logging.getLogger()
        if root_logger.hasHandlers():
            root_logger.handlers.clear()

        logging.basicConfig(
            level="DEBUG" if verbose else "INFO",
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=self._console, rich_tracebacks=True, show_path=verbose, show_level=verbose)]
        )

    @property
    def verbose(self) -> bool:
        """Returns whether verbose mode is enabled."""
        return self._verbose

    def banner(self, title: str):
        self._console.rule(f"[bold cyan]{title}[/]")

    def success(self, message: str):
        """Prints a success message."""
        self._console.print(f"[bold green]Success:[/] {message}")

    def error(self, message: str, suggestion: Optional[str] = None):
        """Prints an error message and an optional suggestion."""
        error_panel = Panel(
            f"[bold red]Error:[/] {message}\n"
            + (f"\n[bold]Suggestion:[/] {suggestion}" if suggestion else ""),
            border_style="red",
            expand=False,
        )
        self._console.print(error_panel)

    def panel(self, content: str, title: str, border_style: str = "blue"):
        """Prints content within a styled panel."""
        self._console.print(
            Panel(
                content,
                title=f"[bold]{title}[/bold]",
                border_style=border_style,
                expand=False,
            )
        )

    def table(self, title: str, columns: List[str], rows: List[List[str]]):
        """Creates and prints a table."""
        table = Table(title=title)
        for column in columns:
            table.add_column(column, style="cyan")
        for row in rows:
            table.add_row(*row)
        self._console.print(table)

    def check_report(self, report: CheckReport):
        """Displays each check with its marker, then the pass/fail/warning totals."""
        for detail in report.details:
            self._console.print(f"{SEVERITY_MARKERS[detail.severity]} {detail.message}")
            if detail.suggestion and detail.severity in (Severity.FAIL, Severity.WARNING):
                self._console.print(f"  [cyan]Suggestion:[/] {detail.suggestion}")

        self._console.print(
            f"\n[bold green]{report.passed} passed[/], "
            f"[bold red]{report.failed} failed[/], "
            f"[bold yellow]{report.warnings} warnings[/]"
        )

    def log_message(self, message: str):
        """Prints a single raw line, e.g. streamed container logs."""
        self._console.print(message, markup=False, highlight=False)

    def status(self, message: str):
        """Returns a Rich status spinner context manager."""
        return self._console.status(message)

    def print(self, *args, **kwargs):
        """A wrapper around rich.print for general output."""
        self._console.print(*args, **kwargs)
