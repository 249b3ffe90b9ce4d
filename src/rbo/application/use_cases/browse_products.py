from __future__ import annotations

from rbo.application.use_cases.catalog_model import CatalogModel
from rbo.domain.catalog.entities import Category, Product
from rbo.domain.catalog.ordering import sort_by_order
from rbo.domain.common.ids import StoreId


class BrowseProducts:
    def __init__(self, catalog_model: CatalogModel) -> None:
        self._catalog_model = catalog_model

    def execute(
        self,
        store_id: StoreId,
        search: str | None = None,
        category: str | None = None,
    ) -> tuple[list[str], list[tuple[Category, Product]]]:
        catalog = self._catalog_model.current(store_id)
        sellable = catalog.sellable_products()
        category_names = [c.name for c in sort_by_order(catalog.categories) if c.active]

        needle = (search or "").strip().casefold()
        wanted_category = (category or "").strip().casefold()
        matches = [
            (c, p)
            for c, p in sellable
            if (not needle or needle in p.name.casefold())
            and (not wanted_category or c.name.casefold() == wanted_category)
        ]
        return category_names, matches
