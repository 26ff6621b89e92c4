"""Logging for tsgql. Everything goes to stderr so that generated SDL can be piped from stdout."""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax


class TsgqlLogger(logging.Logger):
    """
    Logger that combines Python logging with a few CLI formatting helpers.

    Standard levels (debug, info, warning, error, critical) go through a
    RichHandler. `print`, `success`, `hint`, `key_value` and `source_excerpt`
    write straight to the console.
    """

    def __init__(self, name: str, level: int = logging.INFO) -> None:
        super().__init__(name, level)
        self.console = Console(stderr=True)

        handler = RichHandler(
            console=self.console,
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        self.addHandler(handler)

    def print(self, message: str) -> None:
        """Print a plain message (with Rich markup support)."""
        self.console.print(message)

    def success(self, message: str) -> None:
        self.print(f"[green]✓[/green] {message}")

    def hint(self, message: str) -> None:
        self.print(f"[dim]{message}[/dim]")

    def key_value(self, key: str, value: Any, key_style: str = "dim") -> None:
        """
        Print a formatted key-value pair.

        Args:
            key: The key/label to display
            value: The value to display
            key_style: Style for the key (default: "dim")
        """
        self.print(f"[{key_style}]{key}:[/{key_style}] {value}")

    def source_excerpt(self, source: str, line: int, column: int, context: int = 1) -> None:
        """
        Print the lines of TypeScript source around a location, with a caret under the column.

        Args:
            source: The whole source text
            line: 1-based line of the location
            column: 1-based column of the location
            context: Number of lines to show before the location
        """
        lines = source.splitlines()
        if not 1 <= line <= len(lines):
            return

        start = max(1, line - context)
        excerpt = "\n".join(lines[start - 1 : line])
        self.console.print(Syntax(excerpt, "typescript", word_wrap=False))
        self.print(f"[bold red]{' ' * (column - 1)}^[/bold red]")


def get_logger(name: str = "tsgql") -> TsgqlLogger:
    """
    Get or create a tsgql logger instance.

    Args:
        name: Logger name (default: "tsgql")

    Returns:
        TsgqlLogger instance
    """
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(TsgqlLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    return logger  # type: ignore[return-value]
