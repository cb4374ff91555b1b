"""Rich-formatted error and warning output for the CLI.

Usage:
    from themectx.error_handler import ErrorHandler

    try:
        config = load_config(theme_root=root)
    except ThemeContextError as e:
        ErrorHandler.display_error(e, context="Configuration")
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from rich.traceback import Traceback

from themectx.discovery.schemas import ScanError
from themectx.exceptions import KnowledgeBaseError

# Errors go to stderr so --json output stays clean
_console = Console(stderr=True)

COLORS = {
    "error": "#FF4444",
    "warning": "#FFB800",
    "muted": "#666666",
}


class ErrorHandler:
    """Consistent error panels for command-line output."""

    @staticmethod
    def display_error(
        error: Exception,
        context: str = "Operation",
        show_traceback: bool = False,
        console: Console | None = None,
    ) -> None:
        """Display a formatted error panel.

        Args:
            error: The exception that occurred
            context: What was happening, e.g. "Configuration"
            show_traceback: Whether to show the full traceback
            console: Optional custom console (uses stderr if not provided)
        """
        con = console or _console

        content = Text()
        content.append(f"{type(error).__name__}\n", style=f"bold {COLORS['error']}")
        if isinstance(error, KnowledgeBaseError):
            content.append("Source: ", style=COLORS["muted"])
            content.append(f"{error.source}\n\n", style="bold")
        content.append(str(error), style=COLORS["muted"])

        con.print(Panel(
            content,
            title=f"[{COLORS['error']}]{context} Failed[/{COLORS['error']}]",
            border_style=COLORS["error"],
            padding=(1, 2),
        ))

        if show_traceback and error.__traceback__:
            con.print(
                Traceback.from_exception(
                    type(error),
                    error,
                    error.__traceback__,
                    show_locals=False,
                    max_frames=10,
                )
            )

    @staticmethod
    def display_scan_errors(
        errors: Iterable[ScanError], console: Console | None = None
    ) -> None:
        """List files that were left out of the evidence. Prints nothing when clean."""
        errors = list(errors)
        if not errors:
            return
        con = console or _console

        content = Text()
        for error in errors:
            content.append(f"{error.path}", style="bold")
            content.append(f" ({error.kind}): ", style=COLORS["warning"])
            content.append(f"{error.message}\n", style=COLORS["muted"])

        con.print(Panel(
            content,
            title=f"[{COLORS['warning']}]{len(errors)} file(s) skipped[/{COLORS['warning']}]",
            border_style=COLORS["warning"],
            padding=(0, 2),
        ))
