"""Validate configuration: print effective settings, fail if the provider cannot send."""

from rich.table import Table

from rh_notifier import config
from rh_notifier.whatsapp import get_provider

from .shared import console, logger


def validate_config() -> None:
    """Print effective configuration; exit 1 when the WhatsApp provider is unconfigured."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    try:
        provider = get_provider()
    except ValueError as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("validate_config.fail", error=str(e))
        raise SystemExit(1) from e

    token = config.FONNTE_TOKEN
    table = Table(title="rh-notifier config")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("DATABASE_URL", config.DATABASE_URL)
    table.add_row("RH_DAYS", str(config.RH_DAYS))
    table.add_row("WHATSAPP_PROVIDER", provider.name)
    table.add_row("FONNTE_API_URL", config.FONNTE_API_URL)
    table.add_row("FONNTE_TOKEN", f"set ({len(token)} chars)" if token else "(empty)")
    table.add_row("WHATSAPP_COUNTRY_CODE", config.WHATSAPP_COUNTRY_CODE)
    table.add_row("WHATSAPP_TIMEOUT_SECONDS", f"{config.WHATSAPP_TIMEOUT_SECONDS:g}")
    table.add_row("TRACING_ENABLED", str(config.TRACING_ENABLED))
    console.print(table)

    if not provider.is_configured():
        console.print("[red]WhatsApp provider is not configured. Set FONNTE_TOKEN in .env[/red]")
        log.error("validate_config.provider_unconfigured", provider=provider.name)
        raise SystemExit(1)

    console.print("[green]Config valid.[/green]")
    log.info("validate_config.ok", provider=provider.name)
