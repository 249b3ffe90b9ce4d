from __future__ import annotations

from datetime import datetime

from rbo.domain.catalog.entities import (
    AdditionalGroup,
    AdditionalItem,
    Catalog,
    Category,
    Product,
)
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    ProductId,
    StoreId,
)
from rbo.domain.common.money import Money


def default_catalog(store_id: StoreId, currency: str, now: datetime) -> Catalog:
    """Starter menu used for new stores and when a stored catalog cannot be read."""

    def price(value: str) -> Money:
        return Money.from_decimal(value, currency)

    pizzas = CategoryId(1)
    drinks = CategoryId(2)
    return Catalog(
        store_id=store_id,
        currency=currency,
        updated_at=now,
        categories=[
            Category(
                category_id=pizzas,
                name="Pizzas Tradicionais",
                description="Nossas pizzas clássicas",
                icon="🍕",
                order=1,
                expanded=True,
                products=[
                    Product(
                        product_id=ProductId(1),
                        category_id=pizzas,
                        name="Pizza Margherita",
                        description="Molho de tomate, mussarela, manjericão e azeite",
                        price=price("35.90"),
                        order=1,
                        additional_groups=[
                            AdditionalGroup(
                                group_id=AdditionalGroupId(1),
                                name="Adicionais",
                                order=1,
                                items=[
                                    AdditionalItem(
                                        item_id=AdditionalItemId(1),
                                        name="Borda Recheada",
                                        price=price("8.00"),
                                        order=1,
                                    ),
                                    AdditionalItem(
                                        item_id=AdditionalItemId(2),
                                        name="Extra Queijo",
                                        price=price("5.00"),
                                        order=2,
                                    ),
                                ],
                            )
                        ],
                    ),
                    Product(
                        product_id=ProductId(2),
                        category_id=pizzas,
                        name="Pizza Calabresa",
                        description="Molho de tomate, mussarela, calabresa e cebola",
                        price=price("38.90"),
                        order=2,
                    ),
                ],
            ),
            Category(
                category_id=drinks,
                name="Bebidas",
                description="Refrigerantes e sucos",
                icon="🥤",
                order=2,
                products=[
                    Product(
                        product_id=ProductId(3),
                        category_id=drinks,
                        name="Coca-Cola 2L",
                        description="Refrigerante Coca-Cola 2 litros",
                        price=price("12.00"),
                        order=1,
                    )
                ],
            ),
        ],
    )
