from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from rbo.application.mappers.event_envelope import (
    EventContext,
    serialize_order_placed,
    serialize_order_status_changed,
)
from rbo.application.mappers.snapshot_codec import orders_from_document, orders_to_document
from rbo.application.metrics.back_office import (
    record_board_sizes,
    record_order_created,
    record_rejected_transition,
    record_time_to_delivered,
    record_transition,
)
from rbo.application.ports.events import EventPublisher, store_channel
from rbo.application.ports.snapshot_store import SnapshotStore
from rbo.application.use_cases.tenant_snapshots import TenantSnapshots
from rbo.domain.common.errors import InvalidTransitionError, NotFoundError, ValidationError
from rbo.domain.common.ids import OrderId, StoreId
from rbo.domain.order.entities import BOARD_COLUMNS, Order, OrderStatus, format_order_number
from rbo.domain.order.events import OrderPlaced, OrderStatusChanged

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_status(value: str | OrderStatus) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as exc:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise ValidationError(
            f"unknown order status {value!r}; expected one of: {allowed}",
            field="status",
        ) from exc


@dataclass(frozen=True)
class MoveResult:
    order: Order | None
    changed: bool
    saved: bool


class OrderBoard:
    """Finalized orders per store, grouped into status columns and persisted as one snapshot."""

    def __init__(
        self,
        store: SnapshotStore,
        publisher: EventPublisher | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._publisher = publisher
        self._clock = clock
        self._snapshots: TenantSnapshots[list[Order]] = TenantSnapshots(
            store=store,
            decode=orders_from_document,
            encode=lambda orders: orders_to_document(orders, self._clock()),
            fallback=lambda store_id: [],
        )

    @property
    def lock(self):
        return self._snapshots.lock

    def orders(self, store_id: StoreId) -> list[Order]:
        return list(self._snapshots.get(store_id))

    def next_identity(self, store_id: StoreId) -> tuple[OrderId, str]:
        orders = self._snapshots.get(store_id)
        sequence = max((order.order_id for order in orders), default=0) + 1
        return OrderId(sequence), format_order_number(sequence)

    def submit(self, order: Order, context: EventContext | None = None) -> bool:
        with self._snapshots.lock:
            orders = self._snapshots.get(order.store_id)
            if any(existing.order_id == order.order_id for existing in orders):
                raise ValidationError(f"order {order.order_id} already exists", field="orderId")
            updated = [*orders, order]
            saved = self._snapshots.commit(order.store_id, updated)

        record_order_created(order)
        record_board_sizes(str(order.store_id), updated)
        event = OrderPlaced(
            order_id=order.order_id,
            store_id=order.store_id,
            order_number=order.order_number,
            total=order.total,
            occurred_at=order.created_at,
        )
        self._publish(order.store_id, serialize_order_placed(event, order, context or EventContext()))
        return saved

    def get_order(self, store_id: StoreId, order_id: OrderId) -> Order:
        for order in self._snapshots.get(store_id):
            if order.order_id == order_id:
                return order
        raise NotFoundError(f"order {order_id} not found")

    def move_order(
        self,
        store_id: StoreId,
        order_id: OrderId,
        new_status: str | OrderStatus,
        context: EventContext | None = None,
    ) -> MoveResult:
        target = parse_status(new_status)
        with self._snapshots.lock:
            orders = self._snapshots.get(store_id)
            current = next((order for order in orders if order.order_id == order_id), None)
            if current is None:
                logger.warning(
                    "order_move_unknown_id",
                    extra={"store_id": str(store_id), "order_id": order_id, "status": target.value},
                )
                return MoveResult(order=None, changed=False, saved=True)

            now = self._clock()
            try:
                moved = current.move_to(target, now)
            except InvalidTransitionError:
                record_rejected_transition(current.status, target)
                raise
            if moved is current:
                return MoveResult(order=current, changed=False, saved=True)

            updated = [moved if order.order_id == order_id else order for order in orders]
            saved = self._snapshots.commit(store_id, updated)

        record_transition(current.status, moved.status)
        record_board_sizes(str(store_id), updated)
        if moved.status == OrderStatus.DELIVERED:
            record_time_to_delivered(moved, now=now)
        event = OrderStatusChanged(
            order_id=moved.order_id,
            store_id=store_id,
            from_status=current.status,
            to_status=moved.status,
            occurred_at=now,
        )
        self._publish(
            store_id,
            serialize_order_status_changed(event, moved, context or EventContext()),
        )
        return MoveResult(order=moved, changed=True, saved=saved)

    def list_by_status(self, store_id: StoreId, status: str | OrderStatus) -> list[Order]:
        wanted = parse_status(status)
        return sorted(
            (order for order in self._snapshots.get(store_id) if order.status == wanted),
            key=lambda order: (order.created_at, order.order_id),
        )

    def board(self, store_id: StoreId) -> dict[OrderStatus, list[Order]]:
        return {status: self.list_by_status(store_id, status) for status in BOARD_COLUMNS}

    def _publish(self, store_id: StoreId, message: str) -> None:
        if self._publisher is None:
            return
        try:
            self._publisher.publish(channel=store_channel(str(store_id)), message=message)
        except Exception as exc:
            logger.warning(
                "event_publish_failed",
                extra={"store_id": str(store_id), "reason": str(exc)},
            )
