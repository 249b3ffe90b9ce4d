from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from rbo.api.middleware.request_id import get_request_id
from rbo.application.mappers.event_envelope import EventContext
from rbo.application.ports.events import EventPublisher
from rbo.application.ports.snapshot_store import SnapshotStore
from rbo.application.use_cases.browse_products import BrowseProducts
from rbo.application.use_cases.cart_sessions import CartSessions
from rbo.application.use_cases.catalog_model import CatalogModel
from rbo.application.use_cases.checkout import Checkout
from rbo.application.use_cases.order_board import OrderBoard
from rbo.infrastructure.observability.otel import current_trace_ids


@dataclass
class BackOfficeServices:
    catalog_store: SnapshotStore
    order_store: SnapshotStore
    catalog: CatalogModel
    board: OrderBoard
    carts: CartSessions
    browse: BrowseProducts
    checkout: Checkout


def build_services(
    catalog_store: SnapshotStore,
    order_store: SnapshotStore,
    publisher: EventPublisher | None = None,
    currency: str | None = None,
) -> BackOfficeServices:
    catalog = CatalogModel(store=catalog_store, currency=currency)
    board = OrderBoard(store=order_store, publisher=publisher)
    carts = CartSessions(catalog_model=catalog)
    return BackOfficeServices(
        catalog_store=catalog_store,
        order_store=order_store,
        catalog=catalog,
        board=board,
        carts=carts,
        browse=BrowseProducts(catalog_model=catalog),
        checkout=Checkout(carts=carts, board=board),
    )


def get_services(request: Request) -> BackOfficeServices:
    return request.app.state.services


def event_context() -> EventContext:
    trace_id, _ = current_trace_ids()
    return EventContext(trace_id=trace_id, request_id=get_request_id())
