"""Terminal output handling using Rich library.

Results go to stdout as JSON so they can be piped; status messages are
colored and respect the verbosity level and the --no-color flag.
"""

import json
from contextlib import contextmanager
from typing import Any, Iterator, List

from rich.console import Console
from rich.spinner import Spinner
from rich.live import Live
from rich.table import Table


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console for status messages (stderr)
        out: Rich Console for results (stdout)

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Page synced")
        >>> handler.print_json({"id": "123"})
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        self.verbosity = verbosity
        self.console = Console(
            stderr=True,
            no_color=no_color,
            highlight=False,
        )
        self.out = Console(
            no_color=no_color,
            highlight=False,
            soft_wrap=True,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red", markup=True)

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{message}[/dim]")

    def print_json(self, data: Any) -> None:
        """Write a command result to stdout as indented JSON."""
        self.out.print(json.dumps(data, indent=2, ensure_ascii=False), markup=False)

    def print_pages(self, pages: List[Any]) -> None:
        """Display pages as a table (id, title, version)."""
        table = Table(title="Pages")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Version", justify="right")
        for page in pages:
            table.add_row(page.id, page.title, str(page.version))
        self.out.print(table)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a remote call runs.

        Example:
            >>> with handler.spinner("Syncing page..."):
            ...     engine.sync()
        """
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield
