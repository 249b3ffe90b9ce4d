from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from rbo.domain.catalog.entities import AdditionalItemDraft, Catalog
from rbo.domain.catalog.seed import default_catalog
from rbo.domain.common.errors import NotFoundError, ValidationError
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money

STORE = StoreId("str_001")
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
LATER = datetime(2026, 10, 19, 12, 5, tzinfo=timezone.utc)


def brl(value: str) -> Money:
    return Money.from_decimal(value, "BRL")


def _catalog_with(*names: str) -> Catalog:
    catalog = Catalog.empty(STORE, "BRL", NOW)
    for name in names:
        catalog, _ = catalog.create_category(name, NOW)
    return catalog


def test_create_category_appends_with_next_order() -> None:
    catalog = _catalog_with("Pizzas", "Bebidas")

    updated, category = catalog.create_category("Sobremesas", LATER, icon="🍰")

    assert category.order == 3
    assert category.category_id == 3
    assert category.icon == "🍰"
    assert [c.name for c in updated.categories] == ["Pizzas", "Bebidas", "Sobremesas"]
    assert updated.updated_at == LATER


@pytest.mark.parametrize("name", ["", "   "])
def test_create_category_rejects_blank_name_without_touching_catalog(name: str) -> None:
    catalog = _catalog_with("Pizzas")

    with pytest.raises(ValidationError) as exc_info:
        catalog.create_category(name, LATER)

    assert exc_info.value.field == "name"
    assert len(catalog.categories) == 1
    assert catalog.updated_at == NOW


def test_reorder_categories_drag_last_before_first() -> None:
    catalog = _catalog_with("A", "B", "C")

    reordered = catalog.reorder_categories(CategoryId(3), CategoryId(1), LATER)

    by_order = sorted(reordered.categories, key=lambda c: c.order)
    assert [(c.name, c.order) for c in by_order] == [("C", 1), ("A", 2), ("B", 3)]


def test_delete_category_cascades_products_and_keeps_order_dense() -> None:
    catalog = _catalog_with("A", "B", "C")
    catalog, product = catalog.create_product(CategoryId(2), "Suco", brl("7.50"), NOW)

    updated = catalog.delete_category(CategoryId(2), LATER)

    assert [(c.name, c.order) for c in updated.categories] == [("A", 1), ("C", 2)]
    with pytest.raises(NotFoundError):
        updated.find_product(product.product_id)


def test_update_category_changes_only_given_fields() -> None:
    catalog = _catalog_with("Pizzas")

    updated, category = catalog.update_category(CategoryId(1), LATER, icon="🍕", active=False)

    assert category.name == "Pizzas"
    assert category.icon == "🍕"
    assert category.active is False
    assert updated.find_category(CategoryId(1)) == category


def test_create_product_appends_within_category() -> None:
    catalog = _catalog_with("Pizzas", "Bebidas")
    catalog, first = catalog.create_product(CategoryId(1), "Margherita", brl("35.90"), NOW)
    catalog, drink = catalog.create_product(CategoryId(2), "Coca-Cola 2L", brl("12.00"), NOW)
    catalog, second = catalog.create_product(CategoryId(1), "Calabresa", brl("38.90"), NOW)

    assert (first.order, second.order, drink.order) == (1, 2, 1)
    assert len({first.product_id, second.product_id, drink.product_id}) == 3
    assert first.price.amount_cents == 3590


def test_create_product_rejects_foreign_currency_and_unknown_category() -> None:
    catalog = _catalog_with("Pizzas")

    with pytest.raises(ValidationError):
        catalog.create_product(CategoryId(1), "Margherita", Money.from_decimal("9", "USD"), NOW)
    with pytest.raises(NotFoundError):
        catalog.create_product(CategoryId(9), "Margherita", brl("35.90"), NOW)


def test_reorder_products_within_category() -> None:
    catalog = _catalog_with("Pizzas")
    for name in ("Margherita", "Calabresa", "Portuguesa"):
        catalog, _ = catalog.create_product(CategoryId(1), name, brl("30"), NOW)

    reordered = catalog.reorder_products(CategoryId(1), ProductId(3), ProductId(1), LATER)

    products = sorted(reordered.find_category(CategoryId(1)).products, key=lambda p: p.order)
    assert [p.name for p in products] == ["Portuguesa", "Margherita", "Calabresa"]


def test_reorder_products_across_categories_is_rejected() -> None:
    catalog = _catalog_with("Pizzas", "Bebidas")
    catalog, _ = catalog.create_product(CategoryId(1), "Margherita", brl("35.90"), NOW)
    catalog, _ = catalog.create_product(CategoryId(2), "Suco", brl("7"), NOW)

    with pytest.raises(ValidationError):
        catalog.reorder_products(CategoryId(1), ProductId(2), ProductId(1), LATER)


def test_update_and_delete_product() -> None:
    catalog = _catalog_with("Pizzas")
    for name in ("Margherita", "Calabresa", "Portuguesa"):
        catalog, _ = catalog.create_product(CategoryId(1), name, brl("30"), NOW)

    catalog, product = catalog.update_product(ProductId(2), LATER, price=brl("32.50"), active=False)
    assert product.price.amount_cents == 3250
    assert product.active is False

    catalog = catalog.delete_product(ProductId(1), LATER)
    products = sorted(catalog.find_category(CategoryId(1)).products, key=lambda p: p.order)
    assert [(p.name, p.order) for p in products] == [("Calabresa", 1), ("Portuguesa", 2)]


def test_create_additional_group_drops_blank_items() -> None:
    catalog = _catalog_with("Pizzas")
    catalog, product = catalog.create_product(CategoryId(1), "Margherita", brl("35.90"), NOW)

    catalog, group = catalog.create_additional_group(
        product.product_id,
        "Adicionais",
        [
            AdditionalItemDraft(name="Bacon", price=brl("4")),
            AdditionalItemDraft(name="   ", price=brl("1")),
            AdditionalItemDraft(name="Cheddar", price=brl("3"), description="cremoso"),
        ],
        LATER,
    )

    assert [(i.item_id, i.name, i.order) for i in group.items] == [
        (1, "Bacon", 1),
        (2, "Cheddar", 2),
    ]
    assert catalog.find_product(product.product_id).additional_groups == [group]


def test_create_additional_group_requires_a_name() -> None:
    catalog = _catalog_with("Pizzas")
    catalog, product = catalog.create_product(CategoryId(1), "Margherita", brl("35.90"), NOW)

    with pytest.raises(ValidationError):
        catalog.create_additional_group(product.product_id, " ", [], LATER)


def test_copy_additional_group_deep_copies_into_each_target() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)
    source_before = catalog.find_product(ProductId(1))

    updated, copies = catalog.copy_additional_group(
        AdditionalGroupId(1),
        ProductId(1),
        [ProductId(2), ProductId(3)],
        LATER,
    )

    assert len(copies) == 2
    for product_id in (ProductId(2), ProductId(3)):
        groups = updated.find_product(product_id).additional_groups
        assert [(g.group_id, g.name, g.order) for g in groups] == [(1, "Adicionais", 1)]
        assert [(i.item_id, i.name, i.order) for i in groups[0].items] == [
            (1, "Borda Recheada", 1),
            (2, "Extra Queijo", 2),
        ]
    assert updated.find_product(ProductId(1)) == source_before


def test_copy_additional_group_appends_after_existing_groups() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)
    catalog, _ = catalog.copy_additional_group(
        AdditionalGroupId(1), ProductId(1), [ProductId(2)], NOW
    )

    updated, copies = catalog.copy_additional_group(
        AdditionalGroupId(1), ProductId(1), [ProductId(2)], LATER
    )

    groups = updated.find_product(ProductId(2)).additional_groups
    assert [(g.group_id, g.order) for g in groups] == [(1, 1), (2, 2)]
    assert copies[0].group_id == 2


def test_copy_additional_group_onto_its_source_is_rejected() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)

    with pytest.raises(ValidationError):
        catalog.copy_additional_group(AdditionalGroupId(1), ProductId(1), [ProductId(1)], LATER)
    with pytest.raises(ValidationError):
        catalog.copy_additional_group(AdditionalGroupId(1), ProductId(1), [], LATER)


def test_reorder_and_delete_additional_groups() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)
    catalog, _ = catalog.create_additional_group(
        ProductId(1), "Bordas", [AdditionalItemDraft(name="Catupiry", price=brl("9"))], NOW
    )

    catalog = catalog.reorder_additional_groups(
        ProductId(1), AdditionalGroupId(2), AdditionalGroupId(1), LATER
    )
    groups = sorted(catalog.find_product(ProductId(1)).additional_groups, key=lambda g: g.order)
    assert [g.name for g in groups] == ["Bordas", "Adicionais"]

    catalog = catalog.delete_additional_group(ProductId(1), AdditionalGroupId(2), LATER)
    groups = catalog.find_product(ProductId(1)).additional_groups
    assert [(g.name, g.order) for g in groups] == [("Adicionais", 1)]


def test_delete_additional_item_keeps_items_dense() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)

    updated = catalog.delete_additional_item(
        ProductId(1), AdditionalGroupId(1), AdditionalItemId(1), LATER
    )

    items = updated.find_product(ProductId(1)).find_group(AdditionalGroupId(1)).items
    assert [(i.name, i.order) for i in items] == [("Extra Queijo", 1)]


def test_toggle_expanded_is_display_state_only() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)

    toggled = catalog.toggle_expanded(CategoryId(2))

    assert toggled.find_category(CategoryId(2)).expanded is True
    assert catalog.find_category(CategoryId(2)).expanded is False
    assert toggled == catalog
    assert toggled.updated_at == catalog.updated_at


def test_sellable_products_skip_inactive_entries() -> None:
    catalog = default_catalog(STORE, "BRL", NOW)
    catalog, _ = catalog.update_product(ProductId(2), LATER, active=False)
    catalog, _ = catalog.update_category(CategoryId(2), LATER, active=False)

    assert [p.name for _, p in catalog.sellable_products()] == ["Pizza Margherita"]
