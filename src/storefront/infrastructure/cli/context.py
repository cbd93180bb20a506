"""What every command needs: settings and a way to open an orchestrator."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import TypeVar

import click

from storefront.application.dto import CartSummaryDTO
from storefront.application.orchestrator import Orchestrator
from storefront.domain.exceptions import DomainException
from storefront.infrastructure import bootstrap
from storefront.infrastructure.config import Settings

T = TypeVar("T")

OrchestratorFactory = Callable[[Settings], AbstractAsyncContextManager[Orchestrator]]


@dataclass
class CliContext:

    settings: Settings
    open_orchestrator: OrchestratorFactory = bootstrap.orchestrator

    def run(self, work: Callable[[Orchestrator], Awaitable[T]]) -> T:
        """Run ``work`` against a fresh orchestrator, mapping domain errors."""

        async def _session() -> T:
            async with self.open_orchestrator(self.settings) as orchestrator:
                return await work(orchestrator)

        try:
            return asyncio.run(_session())
        except DomainException as exc:
            raise click.ClickException(str(exc))


def display_cart(summary: CartSummaryDTO) -> None:
    """Shared formatting for displaying a cart."""
    if not summary.lines:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>14} {'Total':>14}")
    click.echo(f"  {'-'*60}")
    for line in summary.lines:
        click.echo(
            f"  {line.product_name:<24} {line.quantity:>5} {line.unit_price:>14} {line.line_total:>14}"
        )
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Subtotal':<30} {summary.subtotal:>29}")
    if summary.discount_code is not None:
        label = f"Discount ({summary.discount_code})"
        click.echo(f"  {label:<30} {'-' + summary.discount:>29}")
    click.echo(f"  {'Total':<30} {summary.total:>29}")


def echo_notices(orchestrator: Orchestrator) -> None:
    for notice in orchestrator.notices:
        click.secho(notice, fg="yellow", err=True)
