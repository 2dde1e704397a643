"""Admin commands: seed demo data, set a user's WhatsApp number."""

import typer

from rh_notifier.db import init_db, reset_db
from rh_notifier.db.repositories import user_repo
from rh_notifier.db.seed_data import seed_demo_data
from rh_notifier.errors import InvalidAddressError
from rh_notifier.whatsapp.phone import format_display, to_international

from .shared import console, logger


def seed(
    reset: bool = typer.Option(False, "--reset", help="Drop and recreate all tables first"),
) -> None:
    """Create tables and insert demo users/products."""
    if reset:
        reset_db()
        logger.warning("seed.reset")
    else:
        init_db()
    users = seed_demo_data()
    for user in users:
        console.print(f"[green]{user.username}[/green] id={user.id}")


def set_whatsapp(
    username: str = typer.Argument(..., help="Username"),
    number: str = typer.Argument(..., help="WhatsApp number, e.g. 081234567890 or 6281234567890"),
) -> None:
    """Normalize and store a user's WhatsApp number."""
    user = user_repo.get_by_username(username)
    if user is None:
        console.print(f"[red]User {username!r} not found[/red]")
        raise typer.Exit(1)
    try:
        normalized = to_international(number)
    except InvalidAddressError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e
    user_repo.update_whatsapp(user.id, normalized)
    logger.info("set_whatsapp.ok", username=username)
    console.print(f"[green]{username}[/green] -> {format_display(normalized)}")
