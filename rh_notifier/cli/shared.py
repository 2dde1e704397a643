"""Shared CLI helpers: console, logger, coordinator construction, run summary printing."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from rh_notifier.config import RH_DAYS
from rh_notifier.coordinator import Coordinator, RunResult
from rh_notifier.utils.logger import get_logger
from rh_notifier.whatsapp import Dispatcher, get_provider

console = Console()
logger = get_logger("rh_notifier.cli")

RULE = "=" * 60


def build_coordinator(provider_kind: Optional[str] = None, rh_days: int = RH_DAYS) -> Coordinator:
    """Coordinator over the configured provider (or `provider_kind`: fonnte | mock)."""
    return Coordinator(Dispatcher(get_provider(provider_kind)), rh_days=rh_days)


def print_banner(title: str, rh_days: int, started_at: str) -> None:
    console.print(RULE)
    console.print(f"  {title}")
    console.print(f"  Running at: {started_at}")
    console.print(f"  RH Days: {rh_days} days before expiry date triggers warning")
    console.print(RULE)


def print_run_result(result: RunResult) -> None:
    """Outcome table, counts and enumerated errors."""
    if result.outcomes:
        table = Table(title="Users")
        table.add_column("Username", style="cyan")
        table.add_column("Status")
        table.add_column("Items", justify="right")
        table.add_column("Raised", justify="right")
        styles = {"sent": "green", "failed": "red", "skipped": "dim"}
        for outcome in result.outcomes:
            style = styles[outcome.status]
            table.add_row(
                outcome.username,
                f"[{style}]{outcome.status}[/{style}]",
                str(outcome.items),
                str(outcome.raised),
            )
        console.print(table)

    console.print(RULE)
    console.print("  SUMMARY")
    console.print(RULE)
    console.print(f"[green]Successfully sent: {result.sent}[/green]")
    console.print(f"[red]Failed: {result.failed}[/red]")
    console.print(f"Total processed: {result.total}")
    if result.errors:
        console.print("\n[yellow]Errors:[/yellow]")
        for idx, err in enumerate(result.errors, 1):
            console.print(f"  {idx}. {err}")
