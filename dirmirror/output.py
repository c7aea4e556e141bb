"""Output formatting for the dirmirror CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from .utils import format_size


class OutputFormatter:
    """Formats CLI output as styled text or JSON.

    Informational messages go to stdout and are suppressed in quiet mode.
    Errors and warnings go to stderr and are always shown.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        """Initialize output formatter.

        Args:
            json_output: Emit machine-readable JSON instead of styled text
            quiet: Suppress non-essential output
            console: Console for regular output (defaults to stdout)
            err_console: Console for errors and warnings (defaults to stderr)
        """
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = err_console or Console(
            stderr=True, highlight=False, soft_wrap=True
        )

    def info(self, message: str) -> None:
        """Print an informational message."""
        if self.quiet or self.json_output:
            return
        self.console.print(message, markup=False)

    def success(self, message: str) -> None:
        """Print a success message."""
        if self.quiet or self.json_output:
            return
        self.console.print(f"✓ {message}", style="green", markup=False)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        self.err_console.print(f"⚠ {message}", style="yellow", markup=False)

    def error(self, message: str) -> None:
        """Print an error message to stderr."""
        self.err_console.print(f"✗ {message}", style="bold red", markup=False)

    def print(self, message: str = "") -> None:
        """Print a plain line of text."""
        if self.quiet or self.json_output:
            return
        self.console.print(message, markup=False)

    def print_tree(self, tree: Tree) -> None:
        """Render a rich tree."""
        if self.quiet or self.json_output:
            return
        self.console.print(tree)

    def output_json(self, data: Any) -> None:
        """Print data as indented JSON."""
        self.console.print_json(json.dumps(data, default=str))

    def output_table(
        self,
        data: list[dict[str, Any]],
        columns: list[str],
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        """Print rows as a table.

        Args:
            data: Rows keyed by column name
            columns: Column keys in display order
            headers: Optional display names for columns
        """
        if self.json_output:
            self.output_json(data)
            return
        if self.quiet:
            return

        headers = headers or {}
        table = Table(show_header=True, header_style="bold")
        for column in columns:
            table.add_column(headers.get(column, column))
        for row in data:
            table.add_row(*(str(row.get(column, "")) for column in columns))
        self.console.print(table)

    def print_summary(self, title: str, items: list[tuple[str, str]]) -> None:
        """Print a titled list of key/value pairs.

        Args:
            title: Summary heading
            items: (label, value) pairs
        """
        if self.quiet or self.json_output:
            return
        table = Table(title=title, show_header=False, box=None)
        table.add_column("label", style="bold")
        table.add_column("value")
        for label, value in items:
            table.add_row(label, value)
        self.console.print(table)

    @staticmethod
    def format_size(size_bytes: int) -> str:
        """Format a byte count for display."""
        return format_size(size_bytes)
