from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.application.mappers.snapshot_codec import (
    SCHEMA_VERSION,
    catalog_from_document,
    catalog_to_document,
    orders_from_document,
    orders_to_document,
)
from rbo.application.ports.snapshot_store import PersistenceError
from rbo.domain.cart.entities import Cart
from rbo.domain.catalog.seed import default_catalog
from rbo.domain.common.ids import CartId, OrderId, ProductId, StoreId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import Customer, OrderType, PaymentMethod

STORE = StoreId("str_001")
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _through_json(document):
    return json.loads(json.dumps(document))


def test_catalog_round_trip_reproduces_the_tree() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)

    restored = catalog_from_document(STORE, _through_json(catalog_to_document(catalog)))

    assert restored == catalog


def test_catalog_document_shape() -> None:
    document = catalog_to_document(default_catalog(STORE, "BRL", NOW))

    assert document["schemaVersion"] == SCHEMA_VERSION
    assert document["updatedAt"] == NOW.isoformat()
    pizzas = document["categories"][0]
    assert "expanded" not in pizzas
    assert pizzas["products"][0]["priceCents"] == 3590
    assert pizzas["products"][0]["additionalGroups"][0]["items"][1] == {
        "id": 2,
        "name": "Extra Queijo",
        "description": None,
        "priceCents": 500,
        "order": 2,
    }


@pytest.mark.parametrize(
    "document",
    [
        None,
        [],
        {"categories": []},
        {"currency": "BRL", "updatedAt": "yesterday", "categories": []},
        {
            "currency": "BRL",
            "updatedAt": "2026-10-19T12:00:00+00:00",
            "categories": [{"id": 1, "name": "A", "order": 1, "products": [{"id": 1}]}],
        },
    ],
)
def test_corrupt_catalog_documents_raise_persistence_error(document) -> None:
    with pytest.raises(PersistenceError) as exc_info:
        catalog_from_document(STORE, document)

    assert exc_info.value.namespace == "catalog"


def test_negative_price_in_snapshot_is_corrupt() -> None:
    document = catalog_to_document(default_catalog(STORE, "BRL", NOW))
    document["categories"][1]["products"][0]["priceCents"] = -100

    with pytest.raises(PersistenceError):
        catalog_from_document(STORE, document)


def _orders():
    catalog = default_catalog(STORE, "BRL", NOW)
    cart = Cart(cart_id=CartId("crt_1"), store_id=STORE, currency="BRL")
    cart.add_line(catalog.find_product(ProductId(1)), additional_keys=[(1, 1)], notes="bem assada")
    cart.add_line(catalog.find_product(ProductId(3)))
    delivery = cart.finalize(
        order_id=OrderId(1),
        order_number="#001",
        now=NOW,
        order_type=OrderType.DELIVERY,
        payment_method=PaymentMethod.CASH,
        customer=Customer(name="Ana", phone="11999990000", address="Rua A, 10"),
        received_amount=Money(amount_cents=10000, currency="BRL"),
        notes="interfone 12",
    )
    cart.add_line(catalog.find_product(ProductId(2)))
    counter = cart.finalize(
        order_id=OrderId(2),
        order_number="#002",
        now=NOW,
        order_type=OrderType.COUNTER,
        payment_method=PaymentMethod.PIX,
    )
    return [delivery, counter]


def test_orders_round_trip() -> None:
    orders = _orders()

    document = _through_json(orders_to_document(orders, NOW))
    restored = orders_from_document(STORE, document)

    assert restored == orders
    assert document["orders"][0]["receivedAmountCents"] == 10000
    assert document["orders"][0]["lines"][0]["additionals"][0]["name"] == "Borda Recheada"


def test_bare_order_array_is_accepted() -> None:
    orders = _orders()

    restored = orders_from_document(STORE, _through_json(orders_to_document(orders, NOW)["orders"]))

    assert restored == orders


def test_unknown_status_in_snapshot_is_corrupt() -> None:
    document = _through_json(orders_to_document(_orders(), NOW))
    document["orders"][0]["status"] = "cancelled"

    with pytest.raises(PersistenceError) as exc_info:
        orders_from_document(STORE, document)

    assert exc_info.value.namespace == "orders"


def test_null_category_name_in_snapshot_is_corrupt() -> None:
    document = _through_json(catalog_to_document(default_catalog(STORE, "BRL", NOW)))
    document["categories"][0]["name"] = None

    with pytest.raises(PersistenceError) as exc_info:
        catalog_from_document(STORE, document)

    assert exc_info.value.namespace == "catalog"


def test_null_customer_name_in_snapshot_is_corrupt() -> None:
    document = _through_json(orders_to_document(_orders(), NOW))
    document["orders"][0]["customer"]["name"] = None

    with pytest.raises(PersistenceError) as exc_info:
        orders_from_document(STORE, document)

    assert exc_info.value.namespace == "orders"
