"""Database and account maintenance commands."""

from typing import Optional

import typer

from relief_hub.db import init_db
from relief_hub.db.repositories import user_repo
from relief_hub.services import auth_service

from .shared import console, logger


def init_database() -> None:
    """Create tables and seed the ration item catalog."""
    init_db()
    logger.info("cli.init_db.ok")
    console.print("[green]Database ready.[/green]")


def create_admin(
    username: str = typer.Argument(..., help="Username of the administrator"),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Password (leave empty for a username-only account)"
    ),
) -> None:
    """Create a SYSTEM_ADMINISTRATOR account, or promote an existing user."""
    init_db()
    user, created = auth_service.ensure_admin(username, password)
    verb = "Created" if created else "Promoted"
    console.print(f"[green]{verb} {user.username} (id {user.id}) as {user.role}.[/green]")


def purge_tokens() -> None:
    """Delete refresh tokens whose expiry has passed."""
    init_db()
    removed = user_repo.purge_expired_refresh_tokens()
    logger.info("cli.purge_tokens.ok", removed=removed)
    console.print(f"[green]Removed {removed} expired refresh token(s).[/green]")
