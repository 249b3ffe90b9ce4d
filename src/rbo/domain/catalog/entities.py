from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Iterable, Sequence

from rbo.domain.catalog.ordering import is_dense, move_before, next_id, renumber, sort_by_order
from rbo.domain.common.errors import NotFoundError, ValidationError
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money


def _require_name(value: str | None, field_name: str = "name") -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} must be non-empty", field=field_name)
    return value.strip()


def _ensure_dense(orders: Iterable[int], scope: str) -> None:
    if not is_dense(orders):
        raise ValidationError(f"{scope} order must be dense 1..N", field="order")


def _ensure_unique(ids: Sequence[int], scope: str) -> None:
    if len(set(ids)) != len(ids):
        raise ValidationError(f"{scope} ids must be unique", field="id")


@dataclass(frozen=True)
class AdditionalItem:
    item_id: AdditionalItemId
    name: str
    price: Money
    order: int
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("name must be non-empty", field="name")


@dataclass(frozen=True)
class AdditionalItemDraft:
    """Raw row typed into the additionals form; blank names are discarded."""

    name: str
    price: Money
    description: str | None = None

    @property
    def is_blank(self) -> bool:
        return not self.name.strip()


@dataclass(frozen=True)
class AdditionalGroup:
    group_id: AdditionalGroupId
    name: str
    order: int
    items: list[AdditionalItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("name must be non-empty", field="name")
        _ensure_dense((item.order for item in self.items), "additional item")
        _ensure_unique([item.item_id for item in self.items], "additional item")

    def find_item(self, item_id: AdditionalItemId) -> AdditionalItem:
        for item in self.items:
            if item.item_id == item_id:
                return item
        raise NotFoundError(f"additional item {item_id} not found in group {self.group_id}")

    def copy_as(self, group_id: AdditionalGroupId, order: int) -> AdditionalGroup:
        items = [
            AdditionalItem(
                item_id=AdditionalItemId(index + 1),
                name=item.name,
                price=item.price,
                order=index + 1,
                description=item.description,
            )
            for index, item in enumerate(sort_by_order(self.items))
        ]
        return AdditionalGroup(group_id=group_id, name=self.name, order=order, items=items)


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    category_id: CategoryId
    name: str
    description: str
    price: Money
    order: int
    active: bool = True
    image: str | None = None
    additional_groups: list[AdditionalGroup] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("name must be non-empty", field="name")
        _ensure_dense((group.order for group in self.additional_groups), "additional group")
        _ensure_unique([group.group_id for group in self.additional_groups], "additional group")

    def find_group(self, group_id: AdditionalGroupId) -> AdditionalGroup:
        for group in self.additional_groups:
            if group.group_id == group_id:
                return group
        raise NotFoundError(f"additional group {group_id} not found on product {self.product_id}")

    def find_additional(self, item_key: tuple[int, int]) -> AdditionalItem:
        group_id, item_id = item_key
        return self.find_group(AdditionalGroupId(group_id)).find_item(AdditionalItemId(item_id))

    def with_group_appended(self, group: AdditionalGroup) -> Product:
        return replace(self, additional_groups=[*self.additional_groups, group])

    def next_group_id(self) -> AdditionalGroupId:
        return AdditionalGroupId(next_id(group.group_id for group in self.additional_groups))


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    name: str
    order: int
    active: bool = True
    description: str | None = None
    icon: str | None = None
    products: list[Product] = field(default_factory=list)
    # UI-only flag: never written to snapshots and ignored by equality.
    expanded: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValidationError("name must be non-empty", field="name")
        _ensure_dense((product.order for product in self.products), "product")
        for product in self.products:
            if product.category_id != self.category_id:
                raise ValidationError(
                    f"product {product.product_id} does not belong to category {self.category_id}",
                    field="categoryId",
                )


@dataclass(frozen=True)
class Catalog:
    """Whole category → product → additional-group tree for one store.

    Every mutation returns a new ``Catalog``; the receiver is never modified, so a
    failed validation cannot leave a half-applied change behind.
    """

    store_id: StoreId
    currency: str
    categories: list[Category]
    updated_at: datetime

    def __post_init__(self) -> None:
        _ensure_dense((category.order for category in self.categories), "category")
        _ensure_unique([category.category_id for category in self.categories], "category")
        _ensure_unique([product.product_id for product in self.all_products()], "product")

    @classmethod
    def empty(cls, store_id: StoreId, currency: str, now: datetime) -> Catalog:
        return cls(store_id=store_id, currency=currency, categories=[], updated_at=now)

    def all_products(self) -> list[Product]:
        return [product for category in self.categories for product in category.products]

    def find_category(self, category_id: CategoryId) -> Category:
        for category in self.categories:
            if category.category_id == category_id:
                return category
        raise NotFoundError(f"category {category_id} not found")

    def find_product(self, product_id: ProductId) -> Product:
        for product in self.all_products():
            if product.product_id == product_id:
                return product
        raise NotFoundError(f"product {product_id} not found")

    def sellable_products(self) -> list[tuple[Category, Product]]:
        return [
            (category, product)
            for category in sort_by_order(self.categories)
            if category.active
            for product in sort_by_order(category.products)
            if product.active
        ]

    def create_category(
        self,
        name: str,
        now: datetime,
        description: str | None = None,
        icon: str | None = None,
    ) -> tuple[Catalog, Category]:
        category = Category(
            category_id=CategoryId(next_id(c.category_id for c in self.categories)),
            name=_require_name(name),
            order=max((c.order for c in self.categories), default=0) + 1,
            description=description,
            icon=icon,
        )
        return self._with_categories([*self.categories, category], now), category

    def update_category(
        self,
        category_id: CategoryId,
        now: datetime,
        *,
        name: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        active: bool | None = None,
    ) -> tuple[Catalog, Category]:
        category = self.find_category(category_id)
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = _require_name(name)
        if description is not None:
            changes["description"] = description
        if icon is not None:
            changes["icon"] = icon
        if active is not None:
            changes["active"] = active
        updated = replace(category, **changes)
        return self._replace_category(updated, now), updated

    def delete_category(self, category_id: CategoryId, now: datetime) -> Catalog:
        self.find_category(category_id)
        remaining = [c for c in sort_by_order(self.categories) if c.category_id != category_id]
        return self._with_categories(renumber(remaining), now)

    def reorder_categories(
        self,
        dragged_id: CategoryId,
        target_id: CategoryId,
        now: datetime,
    ) -> Catalog:
        reordered = move_before(
            sort_by_order(self.categories),
            lambda c: c.category_id,
            dragged_id,
            target_id,
        )
        return self._with_categories(reordered, now)

    def toggle_expanded(self, category_id: CategoryId) -> Catalog:
        category = self.find_category(category_id)
        toggled = replace(category, expanded=not category.expanded)
        return replace(
            self,
            categories=[
                toggled if c.category_id == category_id else c for c in self.categories
            ],
        )

    def create_product(
        self,
        category_id: CategoryId,
        name: str,
        price: Money,
        now: datetime,
        description: str = "",
        image: str | None = None,
    ) -> tuple[Catalog, Product]:
        category = self.find_category(category_id)
        self._ensure_currency(price)
        product = Product(
            product_id=ProductId(next_id(p.product_id for p in self.all_products())),
            category_id=category.category_id,
            name=_require_name(name),
            description=description or "",
            price=price,
            order=max((p.order for p in category.products), default=0) + 1,
            image=image,
        )
        updated = replace(category, products=[*category.products, product])
        return self._replace_category(updated, now), product

    def update_product(
        self,
        product_id: ProductId,
        now: datetime,
        *,
        name: str | None = None,
        description: str | None = None,
        price: Money | None = None,
        image: str | None = None,
        active: bool | None = None,
    ) -> tuple[Catalog, Product]:
        product = self.find_product(product_id)
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = _require_name(name)
        if description is not None:
            changes["description"] = description
        if price is not None:
            self._ensure_currency(price)
            changes["price"] = price
        if image is not None:
            changes["image"] = image or None
        if active is not None:
            changes["active"] = active
        updated = replace(product, **changes)
        return self._replace_product(updated, now), updated

    def delete_product(self, product_id: ProductId, now: datetime) -> Catalog:
        product = self.find_product(product_id)
        category = self.find_category(product.category_id)
        remaining = [p for p in sort_by_order(category.products) if p.product_id != product_id]
        return self._replace_category(replace(category, products=renumber(remaining)), now)

    def reorder_products(
        self,
        category_id: CategoryId,
        dragged_id: ProductId,
        target_id: ProductId,
        now: datetime,
    ) -> Catalog:
        category = self.find_category(category_id)
        for product_id in (dragged_id, target_id):
            product = self.find_product(product_id)
            if product.category_id != category_id:
                raise ValidationError(
                    f"product {product_id} is not in category {category_id}; "
                    "moving products across categories is not supported",
                    field="categoryId",
                )
        reordered = move_before(
            sort_by_order(category.products),
            lambda p: p.product_id,
            dragged_id,
            target_id,
        )
        return self._replace_category(replace(category, products=reordered), now)

    def create_additional_group(
        self,
        product_id: ProductId,
        name: str,
        items: Sequence[AdditionalItemDraft],
        now: datetime,
    ) -> tuple[Catalog, AdditionalGroup]:
        product = self.find_product(product_id)
        group_name = _require_name(name)
        kept = [draft for draft in items if not draft.is_blank]
        for draft in kept:
            self._ensure_currency(draft.price)
        group = AdditionalGroup(
            group_id=product.next_group_id(),
            name=group_name,
            order=len(product.additional_groups) + 1,
            items=[
                AdditionalItem(
                    item_id=AdditionalItemId(index + 1),
                    name=draft.name.strip(),
                    price=draft.price,
                    order=index + 1,
                    description=draft.description,
                )
                for index, draft in enumerate(kept)
            ],
        )
        return self._replace_product(product.with_group_appended(group), now), group

    def copy_additional_group(
        self,
        group_id: AdditionalGroupId,
        source_product_id: ProductId,
        target_product_ids: Sequence[ProductId],
        now: datetime,
    ) -> tuple[Catalog, list[AdditionalGroup]]:
        source_group = self.find_product(source_product_id).find_group(group_id)
        targets = list(dict.fromkeys(target_product_ids))
        if not targets:
            raise ValidationError("at least one target product is required", field="targetProductIds")
        if source_product_id in targets:
            raise ValidationError(
                "source product cannot be a copy target",
                field="targetProductIds",
            )
        target_products = [self.find_product(product_id) for product_id in targets]

        catalog = self
        copies: list[AdditionalGroup] = []
        for target in target_products:
            copy = source_group.copy_as(
                group_id=target.next_group_id(),
                order=len(target.additional_groups) + 1,
            )
            catalog = catalog._replace_product(target.with_group_appended(copy), now)
            copies.append(copy)
        return catalog, copies

    def reorder_additional_groups(
        self,
        product_id: ProductId,
        dragged_id: AdditionalGroupId,
        target_id: AdditionalGroupId,
        now: datetime,
    ) -> Catalog:
        product = self.find_product(product_id)
        reordered = move_before(
            sort_by_order(product.additional_groups),
            lambda g: g.group_id,
            dragged_id,
            target_id,
        )
        return self._replace_product(replace(product, additional_groups=reordered), now)

    def delete_additional_group(
        self,
        product_id: ProductId,
        group_id: AdditionalGroupId,
        now: datetime,
    ) -> Catalog:
        product = self.find_product(product_id)
        product.find_group(group_id)
        remaining = [
            g for g in sort_by_order(product.additional_groups) if g.group_id != group_id
        ]
        return self._replace_product(replace(product, additional_groups=renumber(remaining)), now)

    def delete_additional_item(
        self,
        product_id: ProductId,
        group_id: AdditionalGroupId,
        item_id: AdditionalItemId,
        now: datetime,
    ) -> Catalog:
        product = self.find_product(product_id)
        group = product.find_group(group_id)
        group.find_item(item_id)
        remaining = [i for i in sort_by_order(group.items) if i.item_id != item_id]
        updated_group = replace(group, items=renumber(remaining))
        groups = [
            updated_group if g.group_id == group_id else g for g in product.additional_groups
        ]
        return self._replace_product(replace(product, additional_groups=groups), now)

    def _ensure_currency(self, price: Money) -> None:
        if price.currency != self.currency:
            raise ValidationError(
                f"price currency {price.currency} does not match catalog currency {self.currency}",
                field="currency",
            )

    def _with_categories(self, categories: list[Category], now: datetime) -> Catalog:
        return replace(self, categories=categories, updated_at=now)

    def _replace_category(self, category: Category, now: datetime) -> Catalog:
        return self._with_categories(
            [category if c.category_id == category.category_id else c for c in self.categories],
            now,
        )

    def _replace_product(self, product: Product, now: datetime) -> Catalog:
        category = self.find_category(product.category_id)
        products = [
            product if p.product_id == product.product_id else p for p in category.products
        ]
        return self._replace_category(replace(category, products=products), now)
