from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable

from rbo.application.mappers.event_envelope import EventContext
from rbo.application.use_cases.cart_sessions import CartSessions
from rbo.application.use_cases.order_board import OrderBoard
from rbo.domain.common.ids import CartId, StoreId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import Customer, Order, OrderType, PaymentMethod


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CheckoutResult:
    order: Order
    saved: bool


class Checkout:
    def __init__(
        self,
        carts: CartSessions,
        board: OrderBoard,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._carts = carts
        self._board = board
        self._clock = clock

    def execute(
        self,
        store_id: StoreId,
        cart_id: CartId,
        order_type: OrderType,
        payment_method: PaymentMethod,
        customer: Customer | None = None,
        received_amount: Decimal | None = None,
        notes: str | None = None,
        context: EventContext | None = None,
    ) -> CheckoutResult:
        cart = self._carts.get(store_id, cart_id)
        received = (
            Money.from_decimal(received_amount, cart.currency)
            if received_amount is not None
            else None
        )
        # Identity allocation and submission must not interleave with another checkout.
        with self._board.lock:
            order_id, order_number = self._board.next_identity(store_id)
            order = cart.finalize(
                order_id=order_id,
                order_number=order_number,
                now=self._clock(),
                order_type=order_type,
                payment_method=payment_method,
                customer=customer,
                received_amount=received,
                notes=notes,
            )
            saved = self._board.submit(order, context)
        self._carts.discard(store_id, cart_id)
        return CheckoutResult(order=order, saved=saved)
