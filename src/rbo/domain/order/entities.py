from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from rbo.domain.common.errors import InvalidTransitionError, ValidationError
from rbo.domain.common.ids import AdditionalGroupId, AdditionalItemId, OrderId, ProductId, StoreId
from rbo.domain.common.money import Money


class OrderStatus(str, Enum):
    WAITING = "waiting"
    KITCHEN = "kitchen"
    READY = "ready"
    DELIVERING = "delivering"
    DELIVERED = "delivered"


class OrderType(str, Enum):
    COUNTER = "balcao"
    DELIVERY = "delivery"


class PaymentMethod(str, Enum):
    CASH = "dinheiro"
    CARD = "cartao"
    PIX = "pix"


BOARD_COLUMNS: tuple[OrderStatus, ...] = tuple(OrderStatus)

_LIFECYCLE: dict[OrderType, tuple[OrderStatus, ...]] = {
    OrderType.COUNTER: (
        OrderStatus.WAITING,
        OrderStatus.KITCHEN,
        OrderStatus.READY,
        OrderStatus.DELIVERED,
    ),
    OrderType.DELIVERY: (
        OrderStatus.WAITING,
        OrderStatus.KITCHEN,
        OrderStatus.READY,
        OrderStatus.DELIVERING,
        OrderStatus.DELIVERED,
    ),
}


def _build_transitions() -> dict[OrderType, dict[OrderStatus, frozenset[OrderStatus]]]:
    # One step forward along the order type's lifecycle, or one step back for corrections.
    table: dict[OrderType, dict[OrderStatus, frozenset[OrderStatus]]] = {}
    for order_type, path in _LIFECYCLE.items():
        table[order_type] = {}
        for index, status in enumerate(path):
            neighbours = set()
            if index + 1 < len(path):
                neighbours.add(path[index + 1])
            if index > 0:
                neighbours.add(path[index - 1])
            table[order_type][status] = frozenset(neighbours)
    return table


TRANSITIONS = _build_transitions()


def allowed_transitions(order_type: OrderType, status: OrderStatus) -> frozenset[OrderStatus]:
    return TRANSITIONS[order_type].get(status, frozenset())


def format_order_number(sequence: int) -> str:
    return f"#{sequence:03d}"


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str | None = None
    address: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("customer name must be non-empty", field="customer.name")

    @property
    def has_address(self) -> bool:
        return bool(self.address and self.address.strip())


@dataclass(frozen=True)
class SelectedAdditional:
    group_id: AdditionalGroupId
    item_id: AdditionalItemId
    name: str
    price: Money


@dataclass(frozen=True)
class OrderLine:
    product_id: ProductId
    name: str
    quantity: int
    base_price: Money
    unit_price: Money
    line_total: Money
    additionals: list[SelectedAdditional] = field(default_factory=list)
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValidationError("quantity must be >= 1", field="quantity")
        expected_unit = self.base_price.amount_cents + sum(
            additional.price.amount_cents for additional in self.additionals
        )
        if self.unit_price.amount_cents != expected_unit:
            raise ValidationError("unit_price must equal base price plus additionals")
        if self.line_total.amount_cents != self.unit_price.amount_cents * self.quantity:
            raise ValidationError("line_total must equal unit_price * quantity")


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    store_id: StoreId
    order_number: str
    order_type: OrderType
    payment_method: PaymentMethod
    status: OrderStatus
    lines: list[OrderLine]
    total: Money
    created_at: datetime
    updated_at: datetime
    customer: Customer | None = None
    received_amount: Money | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValidationError("order must contain at least one line", field="lines")
        expected_total = sum(line.line_total.amount_cents for line in self.lines)
        if self.total.amount_cents != expected_total:
            raise ValidationError("order total must equal sum of line totals", field="total")

    @property
    def change_due_cents(self) -> int | None:
        if self.received_amount is None:
            return None
        return self.received_amount.amount_cents - self.total.amount_cents

    def move_to(self, new_status: OrderStatus, now: datetime) -> Order:
        if new_status == self.status:
            return self
        if new_status not in allowed_transitions(self.order_type, self.status):
            raise InvalidTransitionError(
                f"cannot move {self.order_type.value} order {self.order_number} "
                f"from status={self.status.value} to status={new_status.value}",
                from_status=self.status.value,
                to_status=new_status.value,
            )
        return replace(self, status=new_status, updated_at=now)


def create_waiting_order(
    order_id: OrderId,
    store_id: StoreId,
    order_number: str,
    order_type: OrderType,
    payment_method: PaymentMethod,
    lines: list[OrderLine],
    now: datetime,
    customer: Customer | None = None,
    received_amount: Money | None = None,
    notes: str | None = None,
) -> Order:
    if not lines:
        raise ValidationError("order must contain at least one line", field="lines")

    total = Money.zero(lines[0].line_total.currency)
    for line in lines:
        total = total + line.line_total
    return Order(
        order_id=order_id,
        store_id=store_id,
        order_number=order_number,
        order_type=order_type,
        payment_method=payment_method,
        status=OrderStatus.WAITING,
        lines=lines,
        total=total,
        created_at=now,
        updated_at=now,
        customer=customer,
        received_amount=received_amount,
        notes=notes,
    )
