"""CLI command for placing an order."""

from __future__ import annotations

import click

from storefront.application.dto import CheckoutResult
from storefront.application.orchestrator import Orchestrator
from storefront.domain.model.checkout import PaymentDetails
from storefront.infrastructure.cli.context import CliContext, display_cart, echo_notices


@click.command("checkout")
@click.option("--card", "card_number", required=True, help="Card number.")
@click.option("--cvv", required=True, help="Card security code.")
@click.option("--expiry", required=True, help="Expiry as MM/YY.")
@click.option("--coupon", default=None, help="Discount code to apply first.")
@click.option("--address", "shipping_address", default="", help="Shipping address.")
@click.pass_obj
def checkout(
    ctx: CliContext,
    card_number: str,
    cvv: str,
    expiry: str,
    coupon: str | None,
    shipping_address: str,
) -> None:
    """Pay for the cart and place an order."""

    async def work(orchestrator: Orchestrator) -> CheckoutResult:
        await orchestrator.load()
        if coupon is not None:
            applied = await orchestrator.apply_discount(coupon)
            click.echo(applied.source_message)
        display_cart(orchestrator.summary())
        payment = PaymentDetails(card_number=card_number, cvv=cvv, expiry=expiry)
        result = await orchestrator.checkout(payment, shipping_address)
        echo_notices(orchestrator)
        return result

    result = ctx.run(work)

    if result.order_id is not None:
        click.echo(f"Order #{result.order_id} placed.")
    else:
        click.echo("Order placed.")
    if coupon is not None and result.order_id is not None and not result.usage_recorded:
        click.secho("Note: the discount redemption could not be recorded.", err=True)
    if not result.cart_cleared:
        click.secho("Note: the saved cart could not be emptied.", err=True)
