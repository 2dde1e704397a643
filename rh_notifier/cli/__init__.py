"""CLI commands: scheduled run, on-demand check, server, admin helpers."""

from typer import Typer

from rh_notifier.cli import admin, check_mode, serve_mode, validate_config as validate_config_module
from rh_notifier.utils.tracing import init_tracing

init_tracing()

app = Typer(help="RH expiry tracking and WhatsApp notifications")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command(name="check-all")(check_mode.check_all)
    app.command(name="check-user")(check_mode.check_user)
    app.command()(serve_mode.serve)
    app.command()(admin.seed)
    app.command(name="set-whatsapp")(admin.set_whatsapp)
    app.command(name="validate-config")(validate_config_module.validate_config)


register_commands()
