from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Gauge, Histogram

from rbo.domain.order.entities import Order, OrderStatus

ORDERS_CREATED_TOTAL = Counter(
    "rbo_orders_created_total",
    "Total number of orders finalized at the point of sale.",
    ["store_id", "order_type", "payment_method"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "rbo_order_transition_total",
    "Total number of accepted order board moves.",
    ["from", "to"],
)

ORDER_TRANSITION_REJECTED_TOTAL = Counter(
    "rbo_order_transition_rejected_total",
    "Total number of order board moves rejected by the transition table.",
    ["from", "to"],
)

ORDER_TIME_TO_DELIVERED_SECONDS = Histogram(
    "rbo_order_time_to_delivered_seconds",
    "Time between order creation and delivery.",
)

BOARD_COLUMN_SIZE = Gauge(
    "rbo_board_column_size",
    "Number of orders currently in each board column.",
    ["store_id", "status"],
)

CATALOG_MUTATIONS_TOTAL = Counter(
    "rbo_catalog_mutations_total",
    "Total number of applied catalog mutations.",
    ["store_id", "operation"],
)

SNAPSHOT_FAILURES_TOTAL = Counter(
    "rbo_snapshot_failures_total",
    "Total number of snapshot read/write failures.",
    ["namespace", "operation"],
)


def record_order_created(order: Order) -> None:
    ORDERS_CREATED_TOTAL.labels(
        store_id=str(order.store_id),
        order_type=order.order_type.value,
        payment_method=order.payment_method.value,
    ).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_rejected_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_REJECTED_TOTAL.labels(
        **{"from": from_status.value, "to": to_status.value}
    ).inc()


def record_time_to_delivered(order: Order, now: datetime | None = None) -> None:
    observed_at = now or datetime.now(timezone.utc)
    ORDER_TIME_TO_DELIVERED_SECONDS.observe(
        max((observed_at - order.created_at).total_seconds(), 0.0)
    )


def record_board_sizes(store_id: str, orders: list[Order]) -> None:
    for status in OrderStatus:
        BOARD_COLUMN_SIZE.labels(store_id=store_id, status=status.value).set(
            sum(1 for order in orders if order.status == status)
        )


def record_catalog_mutation(store_id: str, operation: str) -> None:
    CATALOG_MUTATIONS_TOTAL.labels(store_id=store_id, operation=operation).inc()


def record_snapshot_failure(namespace: str, operation: str) -> None:
    SNAPSHOT_FAILURES_TOTAL.labels(namespace=namespace, operation=operation).inc()
