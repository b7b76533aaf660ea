"""Flask CLI commands for refresh token housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from accounts.container import get_container

LOGGER = logging.getLogger(__name__)


@click.group("tokens")
def tokens_cli() -> None:
    """Refresh token maintenance commands."""


@tokens_cli.command("purge-expired")
@with_appcontext
def purge_expired() -> None:
    """Delete expired refresh tokens from the configured store."""
    removed = get_container().refresh_store.delete_expired()
    LOGGER.info("tokens.purged", extra={"revoked": removed})
    click.echo(f"Removed {removed} expired refresh token(s).")
