"""Fire-and-forget notifications."""
import logging
from dataclasses import dataclass

from rich.console import Console

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    title: str
    message: str = ""
    sound: bool = False


class ConsoleNotifier:
    """Prints notifications as a one-line toast on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def __call__(self, notification: Notification) -> None:
        line = f"[bold green]{notification.title}[/bold green]"
        if notification.message:
            line += f" [dim]{notification.message}[/dim]"
        self.console.print(line)
        if notification.sound:
            self.console.bell()


def send(sink, notification: Notification) -> None:
    """Deliver a notification; a failing sink never reaches the caller."""
    if sink is None:
        return
    try:
        sink(notification)
    except Exception:
        logger.warning("Notification sink failed for %r", notification.title, exc_info=True)
