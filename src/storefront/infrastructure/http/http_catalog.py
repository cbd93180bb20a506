"""Product catalog client (``/api/products``)."""

from __future__ import annotations

from storefront.domain.exceptions import DomainException, RemoteUnavailable
from storefront.domain.gateway.catalog import ProductCatalog
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.http.transport import GatewayTransport, json_body


class HttpProductCatalog(ProductCatalog):

    def __init__(self, transport: GatewayTransport, limit: int = 1000) -> None:
        self._transport = transport
        self._limit = limit

    async def list_products(self) -> list[Product]:
        # No auth header: the catalog is public.
        response = await self._transport.send_ok(
            "GET", "/api/products", params={"limit": self._limit}
        )
        body = json_body(response)
        try:
            return [
                Product(id=int(raw["ID"]), name=raw["name"], price=Money.of(raw["price"]))
                for raw in body.get("products") or []
            ]
        except (AttributeError, KeyError, TypeError, ValueError, DomainException) as exc:
            raise RemoteUnavailable(f"Malformed catalog payload: {exc}") from exc
