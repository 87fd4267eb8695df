from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape


class Reporter:
    """Console reporting for extraction runs.

    Debug lines are printed only when ``debug`` is set; nothing here feeds
    back into extraction results.
    """

    def __init__(self, debug: bool = False, console: Optional[Console] = None):
        self.debug_enabled = debug
        self.console = console or Console(highlight=False)

    def info(self, msg: str) -> None:
        self.console.print(escape(msg))

    def success(self, msg: str) -> None:
        self.console.print(f"[green]{escape(msg)}[/green]")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {escape(msg)}")

    def error(self, msg: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {escape(msg)}")

    def debug(self, msg: str) -> None:
        if self.debug_enabled:
            self.console.print(f"[dim]{escape(msg)}[/dim]")
