"""Order Ledger client (``/api/orders``).

The ledger checks stock and charges the card before it stores anything,
so a 4xx here means "no order was created" and carries a reason.
"""

from __future__ import annotations

import structlog

from storefront.domain.gateway.order_ledger import OrderLedger
from storefront.domain.model.checkout import CheckoutDraft
from storefront.domain.model.results import OrderOutcome, OrderPlaced, OrderRejected
from storefront.infrastructure.http.transport import GatewayTransport, error_message

logger = structlog.get_logger(__name__)


class HttpOrderLedger(OrderLedger):

    def __init__(self, transport: GatewayTransport) -> None:
        self._transport = transport

    async def create(self, user_id: int, draft: CheckoutDraft) -> OrderOutcome:
        response = await self._transport.send(
            "POST", "/api/orders", json=self._to_raw(user_id, draft)
        )
        if response.is_error:
            return OrderRejected(error_message(response))

        # From here on the order exists; a body we cannot read must not undo that.
        try:
            return OrderPlaced(order_id=int(response.json()["order"]["ID"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("order_id_missing", status=response.status_code, error=str(exc))
            return OrderPlaced(order_id=None)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(user_id: int, draft: CheckoutDraft) -> dict:
        return {
            "user_id": user_id,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "unit_price": item.unit_price.to_wire(),
                    "quantity": item.quantity.value,
                }
                for item in draft.items
            ],
            "sub_total": draft.subtotal.to_wire(),
            "total_price": draft.total.to_wire(),
            "coupon_code": draft.discount.code if draft.discount is not None else "",
            "coupon_discount": draft.discount_amount.to_wire(),
            "card_number": draft.payment.card_number,
            "cvv": draft.payment.cvv,
            "expiry": draft.payment.expiry,
            "shipping_address": draft.shipping_address,
        }
