"""Flask CLI commands for refresh-token housekeeping."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from cleo.core.auth import get_auth


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh token maintenance commands."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired_command() -> None:
    """Delete refresh tokens whose expiry has passed."""
    removed = get_auth().refresh_store.purge_expired()
    click.echo(f"Purged {removed} expired refresh token(s).")


@tokens_cli.command("count")
@with_appcontext
def count_command() -> None:
    """Print the number of stored refresh tokens."""
    with get_auth().refresh_store.ro_uow() as uow:
        total = uow.refresh_tokens.count()
    click.echo(str(total))
