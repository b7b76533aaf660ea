"""Flask CLI commands for account administration."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from accounts.container import get_container
from accounts.services._shared.errors import ServiceError
from accounts.services.users.dto import UserCreateIn


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("create")
@click.option("--name", required=True, help="Display name.")
@click.option("--email", required=True, help="Login e-mail address.")
@click.password_option("--password", help="Initial password.")
@click.option(
    "--gender",
    type=click.Choice(["Male", "Female", "Unknown"], case_sensitive=False),
    default="Unknown",
    show_default=True,
)
@with_appcontext
def create_user(name: str, email: str, password: str, gender: str) -> None:
    """Create an already verified account."""
    try:
        user = get_container().users.create_user(
            UserCreateIn(name=name, email=email, password=password, gender=gender)
        )
    except ServiceError as exc:
        raise click.ClickException(exc.message) from exc
    click.echo(f"Created user {user.id} <{user.email}>.")
