from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Sequence

from rbo.application.mappers.snapshot_codec import catalog_from_document, catalog_to_document
from rbo.application.metrics.back_office import record_catalog_mutation
from rbo.application.ports.snapshot_store import SnapshotStore
from rbo.application.use_cases.tenant_snapshots import TenantSnapshots
from rbo.domain.catalog.entities import AdditionalItemDraft, Catalog
from rbo.domain.catalog.seed import default_catalog
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money


def default_currency() -> str:
    return os.getenv("DEFAULT_CURRENCY", "BRL").upper()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CatalogChange:
    catalog: Catalog
    saved: bool
    created_ids: list[int] = field(default_factory=list)


class CatalogModel:
    """Category/product/additional-group tree per store, persisted as one snapshot."""

    def __init__(
        self,
        store: SnapshotStore,
        currency: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.currency = currency or default_currency()
        self._clock = clock
        self._snapshots: TenantSnapshots[Catalog] = TenantSnapshots(
            store=store,
            decode=catalog_from_document,
            encode=catalog_to_document,
            fallback=lambda store_id: default_catalog(store_id, self.currency, self._clock()),
        )

    def current(self, store_id: StoreId) -> Catalog:
        return self._snapshots.get(store_id)

    def currency_for(self, store_id: StoreId) -> str:
        return self.current(store_id).currency

    def _apply(
        self,
        store_id: StoreId,
        operation: str,
        mutate: Callable[[Catalog, datetime], tuple[Catalog, list[int]]],
    ) -> CatalogChange:
        with self._snapshots.lock:
            catalog, created_ids = mutate(self._snapshots.get(store_id), self._clock())
            saved = self._snapshots.commit(store_id, catalog)
        record_catalog_mutation(store_id=str(store_id), operation=operation)
        return CatalogChange(catalog=catalog, saved=saved, created_ids=created_ids)

    def create_category(
        self,
        store_id: StoreId,
        name: str,
        description: str | None = None,
        icon: str | None = None,
    ) -> CatalogChange:
        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            updated, category = catalog.create_category(name, now, description, icon)
            return updated, [category.category_id]

        return self._apply(store_id, "create_category", mutate)

    def update_category(
        self,
        store_id: StoreId,
        category_id: CategoryId,
        *,
        name: str | None = None,
        description: str | None = None,
        icon: str | None = None,
        active: bool | None = None,
    ) -> CatalogChange:
        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            updated, _ = catalog.update_category(
                category_id,
                now,
                name=name,
                description=description,
                icon=icon,
                active=active,
            )
            return updated, []

        return self._apply(store_id, "update_category", mutate)

    def delete_category(self, store_id: StoreId, category_id: CategoryId) -> CatalogChange:
        return self._apply(
            store_id,
            "delete_category",
            lambda catalog, now: (catalog.delete_category(category_id, now), []),
        )

    def reorder_categories(
        self,
        store_id: StoreId,
        dragged_id: CategoryId,
        target_id: CategoryId,
    ) -> CatalogChange:
        return self._apply(
            store_id,
            "reorder_categories",
            lambda catalog, now: (catalog.reorder_categories(dragged_id, target_id, now), []),
        )

    def toggle_expanded(self, store_id: StoreId, category_id: CategoryId) -> Catalog:
        # Display state only; the snapshot is left untouched.
        with self._snapshots.lock:
            catalog = self._snapshots.get(store_id).toggle_expanded(category_id)
            self._snapshots.replace(store_id, catalog)
        return catalog

    def create_product(
        self,
        store_id: StoreId,
        category_id: CategoryId,
        name: str,
        price: Decimal | int | str,
        description: str = "",
        image: str | None = None,
    ) -> CatalogChange:
        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            amount = Money.from_decimal(price, catalog.currency)
            updated, product = catalog.create_product(
                category_id, name, amount, now, description=description, image=image
            )
            return updated, [product.product_id]

        return self._apply(store_id, "create_product", mutate)

    def update_product(
        self,
        store_id: StoreId,
        product_id: ProductId,
        *,
        name: str | None = None,
        description: str | None = None,
        price: Decimal | int | str | None = None,
        image: str | None = None,
        active: bool | None = None,
    ) -> CatalogChange:
        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            amount = Money.from_decimal(price, catalog.currency) if price is not None else None
            updated, _ = catalog.update_product(
                product_id,
                now,
                name=name,
                description=description,
                price=amount,
                image=image,
                active=active,
            )
            return updated, []

        return self._apply(store_id, "update_product", mutate)

    def delete_product(self, store_id: StoreId, product_id: ProductId) -> CatalogChange:
        return self._apply(
            store_id,
            "delete_product",
            lambda catalog, now: (catalog.delete_product(product_id, now), []),
        )

    def reorder_products(
        self,
        store_id: StoreId,
        category_id: CategoryId,
        dragged_id: ProductId,
        target_id: ProductId,
    ) -> CatalogChange:
        return self._apply(
            store_id,
            "reorder_products",
            lambda catalog, now: (
                catalog.reorder_products(category_id, dragged_id, target_id, now),
                [],
            ),
        )

    def create_additional_group(
        self,
        store_id: StoreId,
        product_id: ProductId,
        name: str,
        items: Sequence[tuple[str, Decimal | int | str, str | None]] = (),
    ) -> CatalogChange:
        """Items are ``(name, price, description)`` rows; rows with a blank name are dropped."""

        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            drafts = [
                AdditionalItemDraft(
                    name=item_name,
                    price=Money.from_decimal(price, catalog.currency),
                    description=description,
                )
                for item_name, price, description in items
            ]
            updated, group = catalog.create_additional_group(product_id, name, drafts, now)
            return updated, [group.group_id]

        return self._apply(store_id, "create_additional_group", mutate)

    def copy_additional_group(
        self,
        store_id: StoreId,
        group_id: AdditionalGroupId,
        source_product_id: ProductId,
        target_product_ids: Sequence[ProductId],
    ) -> CatalogChange:
        def mutate(catalog: Catalog, now: datetime) -> tuple[Catalog, list[int]]:
            updated, copies = catalog.copy_additional_group(
                group_id, source_product_id, target_product_ids, now
            )
            return updated, [copy.group_id for copy in copies]

        return self._apply(store_id, "copy_additional_group", mutate)

    def reorder_additional_groups(
        self,
        store_id: StoreId,
        product_id: ProductId,
        dragged_id: AdditionalGroupId,
        target_id: AdditionalGroupId,
    ) -> CatalogChange:
        return self._apply(
            store_id,
            "reorder_additional_groups",
            lambda catalog, now: (
                catalog.reorder_additional_groups(product_id, dragged_id, target_id, now),
                [],
            ),
        )

    def delete_additional_group(
        self,
        store_id: StoreId,
        product_id: ProductId,
        group_id: AdditionalGroupId,
    ) -> CatalogChange:
        return self._apply(
            store_id,
            "delete_additional_group",
            lambda catalog, now: (catalog.delete_additional_group(product_id, group_id, now), []),
        )

    def delete_additional_item(
        self,
        store_id: StoreId,
        product_id: ProductId,
        group_id: AdditionalGroupId,
        item_id: AdditionalItemId,
    ) -> CatalogChange:
        return self._apply(
            store_id,
            "delete_additional_item",
            lambda catalog, now: (
                catalog.delete_additional_item(product_id, group_id, item_id, now),
                [],
            ),
        )
