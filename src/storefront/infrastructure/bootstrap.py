"""Composition root: wires concrete clients to the orchestrator.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from storefront.application.notification_bus import get_bus
from storefront.application.orchestrator import Orchestrator
from storefront.infrastructure.config import Settings
from storefront.infrastructure.http.http_cart_store import HttpCartStore
from storefront.infrastructure.http.http_catalog import HttpProductCatalog
from storefront.infrastructure.http.http_discount_authority import (
    HttpDiscountAuthority,
    HttpUsageRecorder,
)
from storefront.infrastructure.http.http_order_ledger import HttpOrderLedger
from storefront.infrastructure.http.transport import GatewayTransport
from storefront.infrastructure.persistence.json_session_store import JsonSessionStore


def session_store(settings: Settings) -> JsonSessionStore:
    return JsonSessionStore(settings.session_file)


@asynccontextmanager
async def orchestrator(settings: Settings) -> AsyncIterator[Orchestrator]:
    """An orchestrator whose HTTP connections close when the block exits."""
    client = httpx.AsyncClient(base_url=settings.gateway_url, timeout=settings.request_timeout)
    transport = GatewayTransport(client)
    try:
        yield Orchestrator(
            session_lookup=session_store(settings),
            cart_store=HttpCartStore(transport),
            catalog=HttpProductCatalog(transport, limit=settings.catalog_limit),
            authority=HttpDiscountAuthority(transport),
            usage_recorder=HttpUsageRecorder(transport),
            ledger=HttpOrderLedger(transport),
            bus=get_bus(),
            revalidation_delay=settings.revalidation_delay,
        )
    finally:
        await transport.aclose()
