"""Notification sinks injected into the list view.

The core only ever calls ``success`` and ``error``; how a message reaches the user
is up to the sink.
"""

from typing import Protocol

from rich.console import Console

from shared.logging import get_logger

logger = get_logger(__name__)


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notices to a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def success(self, message: str) -> None:
        self.console.print(f"[bold green]✓[/bold green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")


class LoggingNotifier:
    """Routes notices to the structured log. Default when nothing is injected."""

    def success(self, message: str) -> None:
        logger.info("notify_success", message=message)

    def error(self, message: str) -> None:
        logger.warning("notify_error", message=message)
