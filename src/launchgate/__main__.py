"""CLI entry point for LaunchGate."""

from __future__ import annotations

import asyncio
import json
import logging
import sqlite3
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from launchgate import __version__
from launchgate.config import Settings
from launchgate.db.connection import open_dismissal_memory
from launchgate.gates.engine import GateDecisionEngine
from launchgate.gates.memory import InMemoryDismissalMemory
from launchgate.gates.models import RememberedEntry
from launchgate.gates.version import (
    VersionComparator,
    VersionStrategy,
    current_app_version,
)
from launchgate.pipeline.orchestrator import create_orchestrator
from launchgate.presenters.console import ConsolePresenter
from launchgate.remote.fetch import FetchError, fetcher_for_url
from launchgate.remote.parser import JsonConfigParser, ParseError

logger = logging.getLogger(__name__)

console = Console()

STRATEGY_CHOICE = click.Choice([s.value for s in VersionStrategy])


def setup_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def open_gate_memory(db_path: Path):
    """Open dismissal memory for a gate check.

    An unusable database never blocks a check: the cycle runs against
    process-local memory instead and dismissals are not kept.
    """
    try:
        return open_dismissal_memory(db_path)
    except (OSError, sqlite3.Error) as e:
        logger.warning(
            f"Dismissal store unavailable at {db_path}, dismissals will not be saved: {e}"
        )
        return InMemoryDismissalMemory()


def open_memory_or_exit(db_path: Path):
    """Open dismissal memory for the memory commands, exiting on failure."""
    try:
        return open_dismissal_memory(db_path)
    except (OSError, sqlite3.Error) as e:
        console.print(f"[red]Error opening dismissal store {db_path}: {e}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--db", "db_path", type=click.Path(path_type=Path), help="Dismissal database")
@click.option("--log-level", default="warning", help="Log level")
@click.pass_context
def cli(ctx, settings_path: Path | None, db_path: Path | None, log_level: str):
    """LaunchGate - remote launch alerts and update prompts."""
    setup_logging(log_level)
    try:
        settings = Settings.load(settings_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading settings: {e}[/red]")
        sys.exit(1)
    if db_path:
        settings.db_path = db_path
    ctx.obj = settings


@cli.command()
@click.argument("url", required=False)
@click.option("--app-version", help="Installed app version")
@click.option("--update-url", help="Store URL opened when accepting an update")
@click.option("--platform", help="Top-level platform key in the document")
@click.option("--strategy", type=STRATEGY_CHOICE, help="Version comparison")
@click.option("--no-input", is_flag=True, help="Show gates without prompting")
@click.option("--json", "as_json", is_flag=True, help="Print the outcome as JSON")
@click.pass_obj
def check(
    settings: Settings,
    url: str | None,
    app_version: str | None,
    update_url: str | None,
    platform: str | None,
    strategy: str | None,
    no_input: bool,
    as_json: bool,
):
    """Run one launch-gate check.

    Example: launchgate check https://example.com/launchgate.json --app-version 1.4
    """
    if url:
        settings.config_url = url
    if app_version:
        settings.app_version = app_version
    if update_url:
        settings.update_url = update_url
    if platform:
        settings.platform = platform
    if strategy:
        settings.version_strategy = VersionStrategy(strategy)

    if not settings.config_url:
        console.print("[red]Error: no configuration URL given[/red]")
        console.print("[dim]Pass URL or set LAUNCHGATE_CONFIG_URL[/dim]")
        sys.exit(1)

    store = open_gate_memory(settings.db_path)
    presenter = ConsolePresenter(
        update_url=settings.update_url,
        console=console,
        interactive=not no_input,
    )

    try:
        orchestrator = create_orchestrator(settings, presenter, store)
        outcome = orchestrator.check_sync()
    finally:
        store.close()

    if as_json:
        click.echo(json.dumps(outcome.to_dict(), indent=2))
    elif outcome.failure:
        console.print(f"[yellow]Check aborted ({outcome.failure.value}): {outcome.error}[/yellow]")
    elif outcome.decision and not outcome.decision.is_action:
        console.print("[green]✓ Nothing to show[/green]")


@cli.command()
@click.argument("source")
@click.option("--app-version", help="Installed app version")
@click.option("--platform", help="Top-level platform key in the document")
@click.option("--strategy", type=STRATEGY_CHOICE, help="Version comparison")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def decide(
    settings: Settings,
    source: str,
    app_version: str | None,
    platform: str | None,
    strategy: str | None,
    as_json: bool,
):
    """Show what a document would trigger, without presenting or remembering.

    SOURCE may be a local path or an http(s) URL.
    """
    try:
        data = asyncio.run(
            fetcher_for_url(source, timeout=settings.fetch_timeout).fetch(source)
        )
        config = JsonConfigParser(platform=platform or settings.platform).parse(data)
    except (FetchError, ParseError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    version = current_app_version(
        app_version or settings.app_version, settings.distribution
    )
    engine = GateDecisionEngine(VersionComparator(strategy or settings.version_strategy))

    store = open_gate_memory(settings.db_path)
    try:
        decision = engine.decide(config, version, store)
    finally:
        store.close()

    if as_json:
        click.echo(json.dumps(decision.to_dict(), indent=2))
        return

    table = Table(title="Gate Decision")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("App Version", version or "unknown")
    table.add_row("Strategy", engine.comparator.strategy.value)
    table.add_row("Decision", decision.kind.value)
    table.add_row("Blocking", "yes" if decision.blocking else "no")
    table.add_row("Message", decision.message or "")
    console.print(table)


@cli.command()
@click.argument("current")
@click.argument("minimum")
@click.option(
    "--strategy",
    type=STRATEGY_CHOICE,
    default=VersionStrategy.LEXICOGRAPHIC.value,
    help="Version comparison",
)
def compare(current: str, minimum: str, strategy: str):
    """Report whether CURRENT is older than MINIMUM."""
    older = VersionComparator(VersionStrategy(strategy)).is_older(current, minimum)
    click.echo("older" if older else "not older")


@cli.group()
def memory():
    """Inspect and edit remembered dismissals."""
    pass


@memory.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def memory_list(settings: Settings, as_json: bool):
    """List remembered dismissals."""
    store = open_memory_or_exit(settings.db_path)
    try:
        entries = store.entries()
    finally:
        store.close()

    if as_json:
        click.echo(json.dumps({e.key: e.value for e in entries}, indent=2))
        return

    if not entries:
        console.print("[dim]No dismissals remembered[/dim]")
        return

    table = Table(title="Remembered Dismissals")
    table.add_column("Key", style="cyan")
    table.add_column("Content", style="green")
    for entry in entries:
        table.add_row(entry.key, entry.value)
    console.print(table)


@memory.command("forget")
@click.argument("key")
@click.pass_obj
def memory_forget(settings: Settings, key: str):
    """Forget the dismissal stored under KEY (e.g. "alert", "update")."""
    store = open_memory_or_exit(settings.db_path)
    try:
        store.forget(RememberedEntry(key=key, value=""))
    finally:
        store.close()
    console.print(f"[green]✓ Forgot '{key}'[/green]")


@memory.command("clear")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
def memory_clear(settings: Settings, yes: bool):
    """Forget every remembered dismissal."""
    if not yes:
        click.confirm("Forget all dismissals?", abort=True)
    store = open_memory_or_exit(settings.db_path)
    try:
        store.clear()
    finally:
        store.close()
    console.print("[green]✓ Dismissal memory cleared[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
