"""Conversion between domain aggregates and the JSON snapshot documents.

Documents use camelCase keys and integer cents. Readers are strict: any missing
key, wrong type or broken domain invariant surfaces as ``PersistenceError`` so the
caller can fall back instead of loading a half-valid tree.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from rbo.application.ports.snapshot_store import PersistenceError, SnapshotDocument
from rbo.domain.catalog.entities import (
    AdditionalGroup,
    AdditionalItem,
    Catalog,
    Category,
    Product,
)
from rbo.domain.catalog.ordering import sort_by_order
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    OrderId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money
from rbo.domain.order.entities import (
    Customer,
    Order,
    OrderLine,
    OrderStatus,
    OrderType,
    PaymentMethod,
    SelectedAdditional,
)

SCHEMA_VERSION = 1


def _parse_datetime(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def catalog_to_document(catalog: Catalog) -> SnapshotDocument:
    return {
        "schemaVersion": SCHEMA_VERSION,
        "storeId": str(catalog.store_id),
        "currency": catalog.currency,
        "updatedAt": catalog.updated_at.isoformat(),
        "categories": [
            {
                "id": category.category_id,
                "name": category.name,
                "description": category.description,
                "icon": category.icon,
                "order": category.order,
                "active": category.active,
                "products": [
                    _product_to_dict(product) for product in sort_by_order(category.products)
                ],
            }
            for category in sort_by_order(catalog.categories)
        ],
    }


def _product_to_dict(product: Product) -> dict[str, Any]:
    return {
        "id": product.product_id,
        "categoryId": product.category_id,
        "name": product.name,
        "description": product.description,
        "priceCents": product.price.amount_cents,
        "image": product.image,
        "order": product.order,
        "active": product.active,
        "additionalGroups": [
            {
                "id": group.group_id,
                "name": group.name,
                "order": group.order,
                "items": [
                    {
                        "id": item.item_id,
                        "name": item.name,
                        "description": item.description,
                        "priceCents": item.price.amount_cents,
                        "order": item.order,
                    }
                    for item in sort_by_order(group.items)
                ],
            }
            for group in sort_by_order(product.additional_groups)
        ],
    }


def catalog_from_document(store_id: StoreId, document: Any) -> Catalog:
    try:
        currency = document["currency"]
        categories = [
            _category_from_dict(raw, currency)
            for raw in sorted(document["categories"], key=lambda raw: raw["order"])
        ]
        return Catalog(
            store_id=store_id,
            currency=currency,
            categories=categories,
            updated_at=_parse_datetime(document["updatedAt"]),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(
            f"catalog snapshot is corrupt: {exc}",
            namespace="catalog",
            store_id=str(store_id),
        ) from exc


def _category_from_dict(raw: dict[str, Any], currency: str) -> Category:
    category_id = CategoryId(int(raw["id"]))
    return Category(
        category_id=category_id,
        name=raw["name"],
        description=raw.get("description"),
        icon=raw.get("icon"),
        order=int(raw["order"]),
        active=bool(raw.get("active", True)),
        products=[
            _product_from_dict(item, currency)
            for item in sorted(raw.get("products", []), key=lambda item: item["order"])
        ],
    )


def _product_from_dict(raw: dict[str, Any], currency: str) -> Product:
    return Product(
        product_id=ProductId(int(raw["id"])),
        category_id=CategoryId(int(raw["categoryId"])),
        name=raw["name"],
        description=raw.get("description") or "",
        price=Money(amount_cents=int(raw["priceCents"]), currency=currency),
        image=raw.get("image"),
        order=int(raw["order"]),
        active=bool(raw.get("active", True)),
        additional_groups=[
            AdditionalGroup(
                group_id=AdditionalGroupId(int(group["id"])),
                name=group["name"],
                order=int(group["order"]),
                items=[
                    AdditionalItem(
                        item_id=AdditionalItemId(int(item["id"])),
                        name=item["name"],
                        description=item.get("description"),
                        price=Money(amount_cents=int(item["priceCents"]), currency=currency),
                        order=int(item["order"]),
                    )
                    for item in sorted(group.get("items", []), key=lambda item: item["order"])
                ],
            )
            for group in sorted(raw.get("additionalGroups", []), key=lambda group: group["order"])
        ],
    )


def orders_to_document(orders: list[Order], updated_at: datetime) -> SnapshotDocument:
    return {
        "schemaVersion": SCHEMA_VERSION,
        "updatedAt": updated_at.isoformat(),
        "orders": [_order_to_dict(order) for order in orders],
    }


def _order_to_dict(order: Order) -> dict[str, Any]:
    customer = order.customer
    return {
        "id": order.order_id,
        "storeId": str(order.store_id),
        "orderNumber": order.order_number,
        "orderType": order.order_type.value,
        "paymentMethod": order.payment_method.value,
        "status": order.status.value,
        "customer": (
            None
            if customer is None
            else {"name": customer.name, "phone": customer.phone, "address": customer.address}
        ),
        "currency": order.total.currency,
        "totalCents": order.total.amount_cents,
        "receivedAmountCents": (
            order.received_amount.amount_cents if order.received_amount is not None else None
        ),
        "createdAt": order.created_at.isoformat(),
        "updatedAt": order.updated_at.isoformat(),
        "notes": order.notes,
        "lines": [
            {
                "productId": line.product_id,
                "name": line.name,
                "quantity": line.quantity,
                "basePriceCents": line.base_price.amount_cents,
                "unitPriceCents": line.unit_price.amount_cents,
                "lineTotalCents": line.line_total.amount_cents,
                "notes": line.notes,
                "additionals": [
                    {
                        "groupId": additional.group_id,
                        "itemId": additional.item_id,
                        "name": additional.name,
                        "priceCents": additional.price.amount_cents,
                    }
                    for additional in line.additionals
                ],
            }
            for line in order.lines
        ],
    }


def orders_from_document(store_id: StoreId, document: Any) -> list[Order]:
    try:
        # Older snapshots were written as a bare array without the wrapper.
        raw_orders = document if isinstance(document, list) else document["orders"]
        return [_order_from_dict(store_id, raw) for raw in raw_orders]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(
            f"order snapshot is corrupt: {exc}",
            namespace="orders",
            store_id=str(store_id),
        ) from exc


def _order_from_dict(store_id: StoreId, raw: dict[str, Any]) -> Order:
    currency = raw["currency"]

    def money(cents: Any) -> Money:
        return Money(amount_cents=int(cents), currency=currency)

    raw_customer = raw.get("customer")
    received = raw.get("receivedAmountCents")
    return Order(
        order_id=OrderId(int(raw["id"])),
        store_id=store_id,
        order_number=raw["orderNumber"],
        order_type=OrderType(raw["orderType"]),
        payment_method=PaymentMethod(raw["paymentMethod"]),
        status=OrderStatus(raw["status"]),
        customer=(
            None
            if raw_customer is None
            else Customer(
                name=raw_customer["name"],
                phone=raw_customer.get("phone"),
                address=raw_customer.get("address"),
            )
        ),
        total=money(raw["totalCents"]),
        received_amount=money(received) if received is not None else None,
        created_at=_parse_datetime(raw["createdAt"]),
        updated_at=_parse_datetime(raw["updatedAt"]),
        notes=raw.get("notes"),
        lines=[
            OrderLine(
                product_id=ProductId(int(line["productId"])),
                name=line["name"],
                quantity=int(line["quantity"]),
                base_price=money(line["basePriceCents"]),
                unit_price=money(line["unitPriceCents"]),
                line_total=money(line["lineTotalCents"]),
                notes=line.get("notes"),
                additionals=[
                    SelectedAdditional(
                        group_id=AdditionalGroupId(int(additional["groupId"])),
                        item_id=AdditionalItemId(int(additional["itemId"])),
                        name=additional["name"],
                        price=money(additional["priceCents"]),
                    )
                    for additional in line.get("additionals", [])
                ],
            )
            for line in raw["lines"]
        ],
    )
