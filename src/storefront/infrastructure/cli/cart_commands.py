"""CLI commands for the cart."""

from __future__ import annotations

import click

from storefront.application.dto import CartSummaryDTO
from storefront.application.orchestrator import Orchestrator
from storefront.infrastructure.cli.context import CliContext, display_cart, echo_notices


@click.command("show")
@click.option("--coupon", default=None, help="Preview the total with a discount code.")
@click.pass_obj
def cart_show(ctx: CliContext, coupon: str | None) -> None:
    """Show the cart with current prices."""

    async def work(orchestrator: Orchestrator) -> CartSummaryDTO:
        await orchestrator.load()
        if coupon is not None:
            applied = await orchestrator.apply_discount(coupon)
            click.echo(applied.source_message)
        return orchestrator.summary()

    display_cart(ctx.run(work))


@click.command("adjust")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Quantity change, e.g. 2 or -1.")
@click.pass_obj
def cart_adjust(ctx: CliContext, product_id: int, delta: int) -> None:
    """Add or take away units of a product."""

    async def work(orchestrator: Orchestrator) -> CartSummaryDTO:
        await orchestrator.load()
        await orchestrator.adjust_quantity(product_id, delta)
        await orchestrator.settle()
        echo_notices(orchestrator)
        return orchestrator.summary()

    display_cart(ctx.run(work))


@click.command("remove")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def cart_remove(ctx: CliContext, product_id: int) -> None:
    """Remove a product from the cart entirely."""

    async def work(orchestrator: Orchestrator) -> CartSummaryDTO:
        await orchestrator.load()
        await orchestrator.remove_line(product_id)
        await orchestrator.settle()
        echo_notices(orchestrator)
        return orchestrator.summary()

    summary = ctx.run(work)
    click.echo(f"Product #{product_id} removed.")
    display_cart(summary)
