"""Discount Authority and usage recorder clients (``/api/coupons``).

``/apply`` only checks a code; nothing is redeemed until ``/use`` is
called after an order exists.
"""

from __future__ import annotations

from storefront.domain.exceptions import DomainException, RemoteUnavailable
from storefront.domain.gateway.discount_authority import DiscountAuthority, UsageRecorder
from storefront.domain.model.discount import DiscountType
from storefront.domain.model.results import DiscountDenied, DiscountGranted, DiscountVerdict
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.http.transport import GatewayTransport, error_message, json_body

DEFAULT_DENIAL = "The discount could not be applied"


class HttpDiscountAuthority(DiscountAuthority):

    def __init__(self, transport: GatewayTransport) -> None:
        self._transport = transport

    async def validate(self, code: str, user_id: int, order_total: Money) -> DiscountVerdict:
        response = await self._transport.send(
            "POST",
            "/api/coupons/apply",
            json={"code": code, "user_id": user_id, "order_total": order_total.to_wire()},
        )
        if response.status_code >= 500:
            raise RemoteUnavailable(f"Discount authority answered {response.status_code}")
        if response.is_error:
            return DiscountDenied(error_message(response) or DEFAULT_DENIAL)

        body = json_body(response)
        try:
            if not body["valid"]:
                return DiscountDenied(body.get("message") or DEFAULT_DENIAL)
            return DiscountGranted(
                coupon_id=int(body["coupon_id"]),
                discount_type=DiscountType(body["discount_type"]),
                discount=Money.of(body["discount"]),
                message=body.get("message", ""),
            )
        except (KeyError, TypeError, ValueError, DomainException) as exc:
            raise RemoteUnavailable(f"Malformed discount verdict: {exc}") from exc


class HttpUsageRecorder(UsageRecorder):

    def __init__(self, transport: GatewayTransport) -> None:
        self._transport = transport

    async def record(
        self, coupon_id: int, user_id: int, order_id: int, discount: Money
    ) -> None:
        await self._transport.send_ok(
            "POST",
            "/api/coupons/use",
            json={
                "coupon_id": coupon_id,
                "user_id": user_id,
                "order_id": order_id,
                "discount": discount.to_wire(),
            },
        )
