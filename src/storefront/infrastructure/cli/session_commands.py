"""CLI commands for the locally stored session.

Signing in happens elsewhere; these only point the client at an
existing user and token.
"""

from __future__ import annotations

import click

from storefront.application.notification_bus import Signal, get_bus
from storefront.domain.model.session import Session
from storefront.infrastructure.bootstrap import session_store
from storefront.infrastructure.cli.context import CliContext


@click.command("use")
@click.option("--user-id", required=True, type=int, help="User ID.")
@click.option("--token", required=True, help="Bearer token issued at sign-in.")
@click.pass_obj
def session_use(ctx: CliContext, user_id: int, token: str) -> None:
    """Store the session to act as."""
    session_store(ctx.settings).save(Session(user_id=user_id, token=token))
    get_bus().publish(Signal.IDENTITY_CHANGED)
    click.echo(f"Acting as user #{user_id}.")


@click.command("clear")
@click.pass_obj
def session_clear(ctx: CliContext) -> None:
    """Forget the stored session."""
    session_store(ctx.settings).clear()
    get_bus().publish(Signal.IDENTITY_CHANGED)
    click.echo("Signed out.")
