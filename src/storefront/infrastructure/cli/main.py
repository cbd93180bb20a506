import click

from storefront.infrastructure.cli.cart_commands import cart_adjust, cart_remove, cart_show
from storefront.infrastructure.cli.checkout_commands import checkout
from storefront.infrastructure.cli.context import CliContext
from storefront.infrastructure.cli.session_commands import session_clear, session_use
from storefront.infrastructure.config import get_settings
from storefront.infrastructure.logging import setup_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront client: cart, discounts and checkout."""
    if ctx.obj is None:
        settings = get_settings()
        setup_logging(settings)
        ctx.obj = CliContext(settings=settings)


@cli.group()
def cart() -> None:
    """Manage the cart."""


@cli.group()
def session() -> None:
    """Manage the stored session."""


# Register subcommands
cart.add_command(cart_adjust)
cart.add_command(cart_remove)
cart.add_command(cart_show)
session.add_command(session_clear)
session.add_command(session_use)
cli.add_command(checkout)
