from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.api.main import create_app

BASE = "/v1/stores/str_001"


class InMemorySnapshotStore:
    def __init__(self, namespace: str) -> None:
        self.namespace = namespace
        self.documents: dict = {}

    def load(self, store_id):
        return self.documents.get(store_id)

    def save(self, store_id, document) -> None:
        self.documents[store_id] = json.loads(json.dumps(document))

    def ping(self) -> bool:
        return True


class RecordingPublisher:
    def __init__(self) -> None:
        self.messages: list[tuple[str, dict]] = []

    def publish(self, channel: str, message: str) -> None:
        self.messages.append((channel, json.loads(message)))


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def client(publisher) -> TestClient:
    app = create_app(
        catalog_store=InMemorySnapshotStore("catalog"),
        order_store=InMemorySnapshotStore("orders"),
        publisher=publisher,
    )
    return TestClient(app)


def _new_cart(client: TestClient) -> str:
    response = client.post(f"{BASE}/carts")
    assert response.status_code == 201
    return response.json()["cartId"]


def test_browse_products(client) -> None:
    response = client.get(f"{BASE}/pos/products", params={"search": "calab"})

    assert response.status_code == 200
    body = response.json()
    assert body["categories"] == ["Pizzas Tradicionais", "Bebidas"]
    assert [p["name"] for p in body["products"]] == ["Pizza Calabresa"]
    assert body["products"][0]["categoryName"] == "Pizzas Tradicionais"


def test_cart_totals_change_and_cash_checkout(client, publisher) -> None:
    cart_id = _new_cart(client)
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 1})
    response = client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 1})

    assert response.status_code == 201
    cart = response.json()
    assert len(cart["lines"]) == 1
    assert cart["lines"][0]["quantity"] == 2
    assert cart["total"] == {"amountCents": 7180, "currency": "BRL"}

    change = client.get(f"{BASE}/carts/{cart_id}/change", params={"receivedAmount": "80.00"})
    assert change.json()["changeCents"] == 820
    assert change.json()["sufficient"] is True
    short = client.get(f"{BASE}/carts/{cart_id}/change", params={"receivedAmount": "50"})
    assert short.json()["changeCents"] == -2180
    assert short.json()["sufficient"] is False

    checkout = client.post(
        f"{BASE}/carts/{cart_id}/checkout",
        json={"orderType": "balcao", "paymentMethod": "dinheiro", "receivedAmount": "80.00"},
    )

    assert checkout.status_code == 201
    order = checkout.json()["order"]
    assert order["orderNumber"] == "#001"
    assert order["status"] == "waiting"
    assert order["total"]["amountCents"] == 7180
    assert order["changeDueCents"] == 820
    assert checkout.json()["saved"] is True
    assert publisher.messages[0][0] == "events:str_001"
    assert client.get(f"{BASE}/carts/{cart_id}").status_code == 404


def test_additionals_are_priced_into_the_line(client) -> None:
    cart_id = _new_cart(client)

    response = client.post(
        f"{BASE}/carts/{cart_id}/lines",
        json={"productId": 1, "additionals": [{"groupId": 1, "itemId": 1}], "notes": "sem cebola"},
    )

    line = response.json()["lines"][0]
    assert line["unitPrice"]["amountCents"] == 4390
    assert line["additionals"][0]["name"] == "Borda Recheada"
    assert line["notes"] == "sem cebola"


def test_delivery_without_address_is_rejected(client) -> None:
    cart_id = _new_cart(client)
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 3})

    response = client.post(
        f"{BASE}/carts/{cart_id}/checkout",
        json={
            "orderType": "delivery",
            "paymentMethod": "pix",
            "customer": {"name": "Ana", "phone": "11999990000"},
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_FAILED"
    assert len(client.get(f"{BASE}/carts/{cart_id}").json()["lines"]) == 1


def test_insufficient_cash_is_rejected(client) -> None:
    cart_id = _new_cart(client)
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 1})

    response = client.post(
        f"{BASE}/carts/{cart_id}/checkout",
        json={"orderType": "balcao", "paymentMethod": "dinheiro", "receivedAmount": "35.89"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"field": "receivedAmount"}


def test_empty_cart_checkout_is_rejected(client) -> None:
    cart_id = _new_cart(client)

    response = client.post(
        f"{BASE}/carts/{cart_id}/checkout",
        json={"orderType": "balcao", "paymentMethod": "cartao"},
    )

    assert response.status_code == 400


def test_update_and_remove_lines(client) -> None:
    cart_id = _new_cart(client)
    first = client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 1}).json()
    line_id = first["lines"][0]["lineId"]
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 3})

    updated = client.patch(f"{BASE}/carts/{cart_id}/lines/{line_id}", json={"quantity": 3})
    assert updated.json()["total"]["amountCents"] == 3 * 3590 + 1200

    zeroed = client.patch(f"{BASE}/carts/{cart_id}/lines/{line_id}", json={"quantity": 0})
    assert [line["name"] for line in zeroed.json()["lines"]] == ["Coca-Cola 2L"]

    other_line = zeroed.json()["lines"][0]["lineId"]
    removed = client.delete(f"{BASE}/carts/{cart_id}/lines/{other_line}")
    assert removed.json()["lines"] == []
    assert removed.json()["total"]["amountCents"] == 0


def test_unknown_product_and_cart(client) -> None:
    cart_id = _new_cart(client)

    assert client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 99}).status_code == 404
    assert client.get(f"{BASE}/carts/crt_missing").status_code == 404
    assert client.delete(f"{BASE}/carts/{cart_id}").status_code == 204
    assert client.delete(f"{BASE}/carts/{cart_id}").status_code == 404


def test_unknown_order_type_is_a_schema_error(client) -> None:
    cart_id = _new_cart(client)

    response = client.post(
        f"{BASE}/carts/{cart_id}/checkout",
        json={"orderType": "drive-thru", "paymentMethod": "pix"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_clear_cart_keeps_the_cart_open(client) -> None:
    cart_id = _new_cart(client)
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 1})
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 3})

    response = client.delete(f"{BASE}/carts/{cart_id}/lines")

    assert response.status_code == 200
    assert response.json()["lines"] == []
    assert client.get(f"{BASE}/carts/{cart_id}").status_code == 200


def test_notes_survive_merging_into_an_existing_line(client) -> None:
    cart_id = _new_cart(client)
    client.post(f"{BASE}/carts/{cart_id}/lines", json={"productId": 2})

    response = client.post(
        f"{BASE}/carts/{cart_id}/lines",
        json={"productId": 2, "notes": "sem cebola"},
    )

    lines = response.json()["lines"]
    assert len(lines) == 1
    assert lines[0]["quantity"] == 2
    assert lines[0]["notes"] == "sem cebola"


def test_browse_lists_active_categories_without_products(client) -> None:
    client.post(f"{BASE}/categories", json={"name": "Sobremesas"})

    body = client.get(f"{BASE}/pos/products").json()

    assert body["categories"] == ["Pizzas Tradicionais", "Bebidas", "Sobremesas"]
    assert all(p["categoryName"] != "Sobremesas" for p in body["products"])
