from __future__ import annotations

from rbo.application.dto.responses import (
    AdditionalGroupResponse,
    AdditionalItemResponse,
    CatalogResponse,
    CategoryResponse,
    ProductBrowseResponse,
    ProductResponse,
    SellableProductResponse,
)
from rbo.application.mappers.money import to_money_response
from rbo.domain.catalog.entities import AdditionalGroup, Catalog, Category, Product
from rbo.domain.catalog.ordering import sort_by_order


def to_additional_group_response(group: AdditionalGroup) -> AdditionalGroupResponse:
    return AdditionalGroupResponse(
        groupId=group.group_id,
        name=group.name,
        order=group.order,
        items=[
            AdditionalItemResponse(
                itemId=item.item_id,
                name=item.name,
                description=item.description,
                price=to_money_response(item.price),
                order=item.order,
            )
            for item in sort_by_order(group.items)
        ],
    )


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        productId=product.product_id,
        categoryId=product.category_id,
        name=product.name,
        description=product.description,
        price=to_money_response(product.price),
        image=product.image,
        order=product.order,
        active=product.active,
        additionalGroups=[
            to_additional_group_response(group)
            for group in sort_by_order(product.additional_groups)
        ],
    )


def to_category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        categoryId=category.category_id,
        name=category.name,
        description=category.description,
        icon=category.icon,
        order=category.order,
        active=category.active,
        expanded=category.expanded,
        products=[to_product_response(product) for product in sort_by_order(category.products)],
    )


def to_catalog_response(catalog: Catalog) -> CatalogResponse:
    return CatalogResponse(
        storeId=str(catalog.store_id),
        currency=catalog.currency,
        updatedAt=catalog.updated_at,
        categories=[
            to_category_response(category) for category in sort_by_order(catalog.categories)
        ],
    )


def to_browse_response(
    category_names: list[str],
    matches: list[tuple[Category, Product]],
) -> ProductBrowseResponse:
    return ProductBrowseResponse(
        categories=category_names,
        products=[
            SellableProductResponse(
                productId=product.product_id,
                categoryId=category.category_id,
                categoryName=category.name,
                name=product.name,
                description=product.description,
                price=to_money_response(product.price),
                image=product.image,
                additionalGroups=[
                    to_additional_group_response(group)
                    for group in sort_by_order(product.additional_groups)
                ],
            )
            for category, product in matches
        ],
    )
