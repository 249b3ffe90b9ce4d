from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from rbo.domain.common.ids import OrderId, StoreId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    store_id: StoreId
    order_number: str
    total: Money
    occurred_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    store_id: StoreId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime
