"""Output formatting for dtupload.

Provides consistent console output in JSON and table modes using Rich.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

# =============================================================================
# Console Instances
# =============================================================================

console = Console()
err_console = Console(stderr=True)


# =============================================================================
# Output Format
# =============================================================================


class OutputFormat(Enum):
    """Output format options."""

    JSON = "json"
    TABLE = "table"

    @classmethod
    def from_string(cls, value: str) -> OutputFormat:
        """Create from string value."""
        return cls(value.lower())


# =============================================================================
# Key/Value and JSON Output
# =============================================================================


def print_key_value(
    data: dict[str, Any],
    *,
    title: str | None = None,
    key_labels: dict[str, str] | None = None,
) -> None:
    """Print key-value pairs in a formatted way.

    Args:
        data: Dictionary of key-value pairs.
        title: Optional title.
        key_labels: Optional mapping of keys to display labels.
    """
    if title:
        console.print(f"[bold]{title}[/bold]")

    labels = key_labels or {}
    max_key_len = (
        max(len(labels.get(k, k.replace("_", " ").title())) for k in data.keys()) if data else 0
    )

    for key, value in data.items():
        label = labels.get(key, key.replace("_", " ").title())
        if value is None:
            value = "[dim]-[/dim]"
        elif isinstance(value, bool):
            value = "[green]Yes[/green]" if value else "[red]No[/red]"
        elif isinstance(value, (list, dict)):
            value = escape(json.dumps(value, indent=2))
        else:
            value = escape(str(value))

        console.print(f"  {label:<{max_key_len}}  {value}")


def print_json(data: Any, *, indent: int = 2) -> None:
    """Print data as JSON."""
    print(json.dumps(data, indent=indent, default=str))


def print_output(
    data: dict[str, Any],
    *,
    format: OutputFormat = OutputFormat.TABLE,
    key_labels: dict[str, str] | None = None,
    title: str | None = None,
) -> None:
    """Print a result mapping in the specified format."""
    if format == OutputFormat.JSON:
        print_json(data)
    else:
        print_key_value(data, title=title, key_labels=key_labels)


# =============================================================================
# Status Messages
# =============================================================================


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


# =============================================================================
# Progress
# =============================================================================


def create_spinner() -> Progress:
    """Create a spinner for indeterminate progress."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=err_console,
        transient=True,
    )
