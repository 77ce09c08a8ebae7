"""Rich-based output utilities for the limeade CLI.

Messages go to stderr; stdout is reserved for pasted clipboard bytes.
"""

from rich.console import Console
from rich.markup import escape

# Shared console instance
console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in red.

    Args:
        message: The error message to display. Markup is escaped.
    """
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[dim]{escape(message)}[/dim]", highlight=False)
