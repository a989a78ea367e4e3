"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(
        self,
        format_type: str = "table",
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console for regular output
            error_console: Console for errors, stderr by default
        """
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
        """
        if self.format == OutputFormat.JSON:
            self.console.print_json(json.dumps(items, default=str))
            return

        if self.format == OutputFormat.YAML:
            self.console.print(
                yaml.safe_dump(items, default_flow_style=False, sort_keys=False),
                end="",
                markup=False,
            )
            return

        if not items:
            self.console.print("[dim]No packages installed[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col, "")
                row.append("[dim]-[/dim]" if value is None else str(value))
            table.add_row(*row)

        self.console.print(table)

    def print_success(self, message: str):
        """Print success message."""
        self._print_status("success", message, "[green]✓[/green] {}")

    def print_info(self, message: str):
        """Print neutral status message."""
        self._print_status("info", message, "{}")

    def print_warning(self, message: str):
        """Print warning message."""
        self._print_status("warning", message, "[yellow]⚠[/yellow] {}")

    def print_error(self, message: str):
        """Print error message to stderr."""
        if self.format == OutputFormat.JSON:
            self.error_console.print(json.dumps({"status": "error", "message": message}), markup=False)
        elif self.format == OutputFormat.YAML:
            self.error_console.print(
                yaml.safe_dump({"status": "error", "message": message}), end="", markup=False
            )
        else:
            self.error_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)

    def _print_status(self, status: str, message: str, template: str):
        if self.format == OutputFormat.JSON:
            self.console.print(json.dumps({"status": status, "message": message}), markup=False)
        elif self.format == OutputFormat.YAML:
            self.console.print(yaml.safe_dump({"status": status, "message": message}), end="", markup=False)
        else:
            self.console.print(template.format(escape(message)), highlight=False)
