"""Logging for protoc-gen-types-only with CLI output support."""

import logging

from rich.console import Console
from rich.logging import RichHandler


class TypesLogger(logging.Logger):
    """
    Logger that combines Python logging with a few CLI formatting methods.

    The console writes to stderr. When running as a protoc plugin, stdout
    carries the serialized CodeGeneratorResponse and must not receive any
    other bytes.
    """

    def __init__(self, name: str, level: int = logging.WARNING) -> None:
        """
        Initialize the logger.

        Args:
            name: Logger name
            level: Initial log level
        """
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
        """
        Print a plain message (with Rich markup support).

        Args:
            message: Message to display
        """
        self.console.print(message)

    def colored(self, message: str, style: str = "bold cyan") -> None:
        """
        Print a message with a specific style/color.

        Args:
            message: Message to display
            style: Rich style string (e.g., "green", "red", "bold cyan", "dim")
        """
        self.print(f"[{style}]{message}[/{style}]")

    def success(self, message: str) -> None:
        """
        Print a success message in green with checkmark icon.

        Args:
            message: Message to display
        """
        self.print(f"[green]✓[/green] {message}")

    def list_item(self, text: str, prefix: str = "-", style: str = "") -> None:
        """
        Print a list item with optional styling.

        Args:
            text: Text to display
            prefix: Prefix character (default: "-")
            style: Optional style for the entire item
        """
        if style:
            self.colored(f"{prefix} {text}", style)
        else:
            self.print(f"{prefix} {text}")


def get_logger(name: str = "protoc_gen_types") -> TypesLogger:
    """
    Get or create the package logger.

    Args:
        name: Logger name (default: "protoc_gen_types")

    Returns:
        TypesLogger instance
    """
    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(TypesLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)

    return logger  # type: ignore[return-value]
