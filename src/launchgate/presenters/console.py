"""Terminal presenter using rich panels and click prompts."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import click
from rich.console import Console
from rich.panel import Panel

from launchgate.gates.models import Decision, DecisionKind, UserAction

logger = logging.getLogger(__name__)

TITLES = {
    DecisionKind.SHOW_ALERT: "Notice",
    DecisionKind.SHOW_OPTIONAL_UPDATE: "Update Available",
    DecisionKind.SHOW_REQUIRED_UPDATE: "Update Required",
}

STYLES = {
    DecisionKind.SHOW_ALERT: "blue",
    DecisionKind.SHOW_OPTIONAL_UPDATE: "yellow",
    DecisionKind.SHOW_REQUIRED_UPDATE: "red",
}


class ConsolePresenter:
    """Shows gates in the terminal.

    Prompts run in a worker thread so the event loop is not blocked.
    Accepting an update opens `update_url` with click.launch.
    """

    def __init__(
        self,
        update_url: str | None = None,
        console: Console | None = None,
        interactive: bool = True,
        open_url: Callable[[str], object] = click.launch,
    ):
        self.update_url = update_url
        self.console = console or Console()
        self.interactive = interactive
        self._open_url = open_url

    async def present(self, decision: Decision) -> UserAction | None:
        return await asyncio.to_thread(self._present, decision)

    def _present(self, decision: Decision) -> UserAction | None:
        kind = decision.kind
        style = STYLES.get(kind, "white")
        self.console.print(
            Panel(
                decision.message or "",
                title=f"[bold {style}]{TITLES.get(kind, 'LaunchGate')}[/bold {style}]",
                border_style=style,
            )
        )

        if kind is DecisionKind.SHOW_ALERT:
            if decision.blocking:
                self.console.print("[dim]This notice cannot be dismissed.[/dim]")
                return None
            if self.interactive:
                click.pause("Press any key to dismiss...")
            return UserAction.DISMISSED

        if kind is DecisionKind.SHOW_OPTIONAL_UPDATE:
            if self.interactive and click.confirm("Update now?", default=False):
                self._open_store()
                return UserAction.ACCEPTED_UPDATE
            return UserAction.DISMISSED

        # Required update: the only choice is to update
        if self.interactive:
            click.confirm("Open the store to update?", default=True, abort=False)
        self._open_store()
        return UserAction.ACCEPTED_UPDATE

    def _open_store(self) -> None:
        if not self.update_url:
            logger.warning("No update URL configured; cannot open the store")
            return
        self.console.print(f"[dim]Opening {self.update_url}[/dim]")
        self._open_url(self.update_url)
