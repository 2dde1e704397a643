"""Check mode: the scheduled all-users run and the single-user on-demand check."""

from datetime import datetime, timezone
from typing import Optional

import typer

from rh_notifier.config import RH_DAYS
from rh_notifier.errors import NotFoundError, StoreUnavailableError
from rh_notifier.utils.logger import bind_context, clear_context

from .shared import build_coordinator, console, logger, print_banner, print_run_result


def check_all(
    rh_days: int = typer.Option(RH_DAYS, "--rh-days", "-d", min=0, help="RH window in days"),
    record: bool = typer.Option(True, "--record/--no-record", help="Persist newly raised notifications"),
    provider: Optional[str] = typer.Option(None, "--provider", help="fonnte | mock (default: WHATSAPP_PROVIDER)"),
) -> None:
    """Notify every user with batches needing attention. Exits 1 if any user failed.

    Intended for an external scheduler, e.g. `0 8 * * * rh-notifier check-all`.
    """
    started_at = datetime.now(timezone.utc).isoformat()
    bind_context(command="check-all")
    log = logger.bind(rh_days=rh_days, record=record)
    log.info("check_all.start")
    print_banner("WhatsApp Notification Run", rh_days, started_at)

    try:
        result = build_coordinator(provider, rh_days).run(rh_days=rh_days, record=record)
    except StoreUnavailableError as e:
        if e.partial is not None:
            print_run_result(e.partial)
        console.print(f"\n[bold red]Fatal error:[/bold red] {e.message}")
        log.error("check_all.fatal", error=e.message)
        clear_context()
        raise typer.Exit(1) from e

    if result.total == 0:
        console.print("\n[green]No products need notification[/green]")
    print_run_result(result)
    log.info("check_all.complete", sent=result.sent, failed=result.failed)
    clear_context()
    if not result.success:
        raise typer.Exit(1)
    console.print("\n[green]Run completed[/green]")


def check_user(
    user_id: str = typer.Argument(..., help="User id"),
    rh_days: int = typer.Option(RH_DAYS, "--rh-days", "-d", min=0, help="RH window in days"),
    provider: Optional[str] = typer.Option(None, "--provider", help="fonnte | mock (default: WHATSAPP_PROVIDER)"),
) -> None:
    """Check one user and send their summary now (nothing is persisted)."""
    log = logger.bind(command="check-user", user_id=user_id)
    try:
        result = build_coordinator(provider, rh_days).check_user(user_id, rh_days=rh_days)
    except NotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        log.warning("check_user.not_found")
        raise typer.Exit(1) from e
    print_run_result(result)
    if not result.success:
        raise typer.Exit(1)
