"""Cart Store client over the API gateway (``/api/cart``)."""

from __future__ import annotations

from storefront.domain.exceptions import DomainException, RemoteUnavailable
from storefront.domain.gateway.cart_store import CartStore
from storefront.domain.model.cart import CartLine
from storefront.domain.model.session import Session
from storefront.domain.model.value_objects import Quantity
from storefront.infrastructure.http.transport import GatewayTransport, json_body


class HttpCartStore(CartStore):

    def __init__(self, transport: GatewayTransport) -> None:
        self._transport = transport

    async def lines(self, session: Session) -> list[CartLine]:
        response = await self._transport.send_ok(
            "GET", f"/api/cart/{session.user_id}", headers=session.auth_header
        )
        raw = json_body(response) or []
        try:
            return [
                CartLine(int(item["product_id"]), Quantity(int(item["quantity"])))
                for item in raw
            ]
        except (KeyError, TypeError, ValueError, DomainException) as exc:
            raise RemoteUnavailable(f"Malformed cart payload: {exc}") from exc

    async def adjust(self, session: Session, product_id: int, delta: int) -> None:
        await self._transport.send_ok(
            "POST",
            f"/api/cart/{session.user_id}",
            json={"product_id": product_id, "quantity": delta},
            headers=session.auth_header,
        )

    async def remove(self, session: Session, product_id: int) -> None:
        await self._transport.send_ok(
            "DELETE", f"/api/cart/{session.user_id}/{product_id}", headers=session.auth_header
        )

    async def clear(self, session: Session) -> None:
        await self._transport.send_ok(
            "DELETE", f"/api/cart/{session.user_id}", headers=session.auth_header
        )

    async def count(self, session: Session) -> int:
        response = await self._transport.send_ok(
            "GET", f"/api/cart/{session.user_id}/count", headers=session.auth_header
        )
        body = json_body(response)
        try:
            return int(body["count"])
        except (KeyError, TypeError, ValueError) as exc:
            raise RemoteUnavailable(f"Malformed cart count: {exc}") from exc
