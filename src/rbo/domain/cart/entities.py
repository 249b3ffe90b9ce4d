from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Sequence
from uuid import uuid4

from rbo.domain.catalog.entities import Product
from rbo.domain.common.errors import NotFoundError, ValidationError
from rbo.domain.common.ids import (
    AdditionalGroupId,
    CartId,
    CartLineId,
    OrderId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    Customer,
    Order,
    OrderLine,
    OrderType,
    PaymentMethod,
    SelectedAdditional,
    create_waiting_order,
)


def _new_line_id() -> CartLineId:
    return CartLineId(f"crl_{uuid4().hex[:12]}")


@dataclass
class CartLine:
    """A product copied into the cart by value; later catalog edits do not reach it."""

    line_id: CartLineId
    product_id: ProductId
    name: str
    base_price: Money
    quantity: int = 1
    additionals: list[SelectedAdditional] = field(default_factory=list)
    notes: str | None = None

    @property
    def unit_price(self) -> Money:
        price = self.base_price
        for additional in self.additionals:
            price = price + additional.price
        return price

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)

    @property
    def merge_key(self) -> tuple[ProductId, tuple[tuple[int, int], ...]]:
        return (
            self.product_id,
            tuple(sorted((a.group_id, a.item_id) for a in self.additionals)),
        )


class Cart:
    def __init__(
        self,
        cart_id: CartId,
        store_id: StoreId,
        currency: str,
        line_id_factory: Callable[[], CartLineId] = _new_line_id,
    ) -> None:
        self.cart_id = cart_id
        self.store_id = store_id
        self.currency = currency
        self._line_id_factory = line_id_factory
        self._lines: list[CartLine] = []

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def find_line(self, line_id: CartLineId) -> CartLine:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        raise NotFoundError(f"cart line {line_id} not found")

    def add_line(
        self,
        product: Product,
        additional_keys: Sequence[tuple[int, int]] = (),
        notes: str | None = None,
    ) -> CartLine:
        if product.price.currency != self.currency:
            raise ValidationError("product currency does not match cart currency", field="currency")

        additionals: list[SelectedAdditional] = []
        for key in dict.fromkeys(tuple(key) for key in additional_keys):
            item = product.find_additional(key)
            additionals.append(
                SelectedAdditional(
                    group_id=AdditionalGroupId(key[0]),
                    item_id=item.item_id,
                    name=item.name,
                    price=item.price,
                )
            )

        candidate = CartLine(
            line_id=self._line_id_factory(),
            product_id=product.product_id,
            name=product.name,
            base_price=product.price,
            additionals=additionals,
            notes=notes,
        )
        for line in self._lines:
            if line.merge_key == candidate.merge_key:
                line.quantity += 1
                if notes is not None:
                    line.notes = notes
                return line
        self._lines.append(candidate)
        return candidate

    def set_quantity(self, line_id: CartLineId, quantity: int) -> CartLine | None:
        line = self.find_line(line_id)
        if quantity <= 0:
            self.remove_line(line_id)
            return None
        line.quantity = quantity
        return line

    def set_notes(self, line_id: CartLineId, notes: str | None) -> CartLine:
        line = self.find_line(line_id)
        line.notes = notes
        return line

    def remove_line(self, line_id: CartLineId) -> None:
        line = self.find_line(line_id)
        self._lines.remove(line)

    def clear(self) -> None:
        self._lines.clear()

    def compute_total(self) -> Money:
        total = Money.zero(self.currency)
        for line in self._lines:
            total = total + line.line_total
        return total

    def compute_change(self, received_amount: Money) -> int:
        """Signed change in cents; negative means the amount received is short."""
        return received_amount.amount_cents - self.compute_total().amount_cents

    def finalize(
        self,
        order_id: OrderId,
        order_number: str,
        now: datetime,
        order_type: OrderType,
        payment_method: PaymentMethod,
        customer: Customer | None = None,
        received_amount: Money | None = None,
        notes: str | None = None,
    ) -> Order:
        if self.is_empty:
            raise ValidationError("cannot finalize an empty cart", field="lines")
        if order_type == OrderType.DELIVERY and (customer is None or not customer.has_address):
            raise ValidationError(
                "delivery orders require a customer with a delivery address",
                field="customer.address",
            )
        if payment_method == PaymentMethod.CASH:
            if received_amount is None:
                raise ValidationError(
                    "cash payments require the amount received", field="receivedAmount"
                )
            if self.compute_change(received_amount) < 0:
                raise ValidationError(
                    "amount received is less than the order total",
                    field="receivedAmount",
                )

        order_lines = [
            OrderLine(
                product_id=line.product_id,
                name=line.name,
                quantity=line.quantity,
                base_price=line.base_price,
                unit_price=line.unit_price,
                line_total=line.line_total,
                additionals=list(line.additionals),
                notes=line.notes,
            )
            for line in self._lines
        ]
        order = create_waiting_order(
            order_id=order_id,
            store_id=self.store_id,
            order_number=order_number,
            order_type=order_type,
            payment_method=payment_method,
            lines=order_lines,
            now=now,
            customer=customer,
            received_amount=received_amount if payment_method == PaymentMethod.CASH else None,
            notes=notes,
        )
        self._lines.clear()
        return order
