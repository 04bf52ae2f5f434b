"""Flask CLI commands for bootstrap accounts."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from cleo.core.auth import get_auth
from cleo.core.extensions import db
from cleo.seeds import bootstrap

LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Raise logging verbosity for seed modules when requested."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.getLogger(bootstrap.__name__).setLevel(level)
    LOGGER.setLevel(level)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Pretty-print a tabular summary of seed results."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


def _ensure_non_production() -> None:
    """Abort bootstrap/destructive commands when running in production."""
    if str(current_app.config.get("APP_ENV", "")).lower() == "production":
        raise click.UsageError("Bootstrap accounts are restricted to non-production environments.")


@click.group("seed")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
@click.pass_context
def seed_cli(ctx: click.Context, verbose: bool) -> None:
    """Bootstrap account commands."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


@seed_cli.command("run")
@with_appcontext
def run_command() -> None:
    """Create the fixed admin/worker accounts if they are missing."""
    _ensure_non_production()
    summary = bootstrap.run_all(get_auth().credentials)
    _echo_summary(summary)


@seed_cli.command("fresh")
@click.option("--yes", is_flag=True, help="Skip the destructive confirmation prompt.")
@with_appcontext
def fresh_command(yes: bool) -> None:
    """Drop all tables, recreate the schema, and create the bootstrap accounts."""
    _ensure_non_production()
    if not yes:
        click.confirm(
            "This will DROP all application tables and recreate them. Continue?",
            abort=True,
        )
    LOGGER.info("Dropping database schema...")
    db.session.remove()
    db.drop_all()
    LOGGER.info("Recreating database schema...")
    db.create_all()
    summary = bootstrap.run_all(get_auth().credentials)
    _echo_summary(summary)
