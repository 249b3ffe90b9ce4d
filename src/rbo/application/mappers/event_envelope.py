from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import uuid4

from rbo.domain.order.entities import Order
from rbo.domain.order.events import OrderPlaced, OrderStatusChanged


@dataclass(frozen=True)
class EventContext:
    trace_id: str | None = None
    request_id: str | None = None


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    store_id: str,
    payload: dict[str, Any],
    context: EventContext,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": context.request_id,
        "trace_id": context.trace_id,
        "store_id": store_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def _order_summary(order: Order) -> dict[str, Any]:
    return {
        "orderId": order.order_id,
        "orderNumber": order.order_number,
        "orderType": order.order_type.value,
        "paymentMethod": order.payment_method.value,
        "status": order.status.value,
        "totalMoney": {
            "amountCents": order.total.amount_cents,
            "currency": order.total.currency,
        },
        "createdAt": order.created_at.isoformat(),
        "lines": [
            {
                "productId": line.product_id,
                "name": line.name,
                "quantity": line.quantity,
                "lineTotal": {
                    "amountCents": line.line_total.amount_cents,
                    "currency": line.line_total.currency,
                },
                "additionals": [additional.name for additional in line.additionals],
                "notes": line.notes,
            }
            for line in order.lines
        ],
    }


def serialize_order_placed(event: OrderPlaced, order: Order, context: EventContext) -> str:
    return _serialize_event(
        event_type="order.placed",
        occurred_at=event.occurred_at,
        store_id=str(event.store_id),
        context=context,
        payload=_order_summary(order),
    )


def serialize_order_status_changed(
    event: OrderStatusChanged,
    order: Order,
    context: EventContext,
) -> str:
    payload = _order_summary(order)
    payload["fromStatus"] = event.from_status.value
    payload["toStatus"] = event.to_status.value
    return _serialize_event(
        event_type="order.status_changed",
        occurred_at=event.occurred_at,
        store_id=str(event.store_id),
        context=context,
        payload=payload,
    )
