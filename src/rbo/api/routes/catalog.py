from __future__ import annotations

from fastapi import APIRouter, Depends, status

from rbo.api.dependencies import BackOfficeServices, get_services
from rbo.application.dto.requests import (
    CopyAdditionalGroupRequest,
    CreateAdditionalGroupRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    ReorderRequest,
    UpdateCategoryRequest,
    UpdateProductRequest,
)
from rbo.application.dto.responses import CatalogMutationResponse, CatalogResponse
from rbo.application.mappers.catalog_mapper import to_catalog_response
from rbo.application.use_cases.catalog_model import CatalogChange
from rbo.domain.common.ids import (
    AdditionalGroupId,
    AdditionalItemId,
    CategoryId,
    ProductId,
    StoreId,
)

router = APIRouter(prefix="/v1/stores/{store_id}")


def _mutation_response(change: CatalogChange) -> CatalogMutationResponse:
    return CatalogMutationResponse(
        catalog=to_catalog_response(change.catalog),
        saved=change.saved,
        createdIds=change.created_ids,
    )


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog(
    store_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogResponse:
    return to_catalog_response(services.catalog.current(StoreId(store_id)))


@router.post(
    "/categories",
    response_model=CatalogMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    store_id: str,
    request_dto: CreateCategoryRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.create_category(
        StoreId(store_id),
        name=request_dto.name,
        description=request_dto.description,
        icon=request_dto.icon,
    )
    return _mutation_response(change)


@router.post("/categories/reorder", response_model=CatalogMutationResponse)
def reorder_categories(
    store_id: str,
    request_dto: ReorderRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.reorder_categories(
        StoreId(store_id),
        dragged_id=CategoryId(request_dto.dragged_id),
        target_id=CategoryId(request_dto.target_id),
    )
    return _mutation_response(change)


@router.patch("/categories/{category_id}", response_model=CatalogMutationResponse)
def update_category(
    store_id: str,
    category_id: int,
    request_dto: UpdateCategoryRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.update_category(
        StoreId(store_id),
        CategoryId(category_id),
        name=request_dto.name,
        description=request_dto.description,
        icon=request_dto.icon,
        active=request_dto.active,
    )
    return _mutation_response(change)


@router.delete("/categories/{category_id}", response_model=CatalogMutationResponse)
def delete_category(
    store_id: str,
    category_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.delete_category(StoreId(store_id), CategoryId(category_id))
    return _mutation_response(change)


@router.post("/categories/{category_id}/toggle-expanded", response_model=CatalogResponse)
def toggle_expanded(
    store_id: str,
    category_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogResponse:
    catalog = services.catalog.toggle_expanded(StoreId(store_id), CategoryId(category_id))
    return to_catalog_response(catalog)


@router.post(
    "/categories/{category_id}/products",
    response_model=CatalogMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    store_id: str,
    category_id: int,
    request_dto: CreateProductRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.create_product(
        StoreId(store_id),
        CategoryId(category_id),
        name=request_dto.name,
        price=request_dto.price,
        description=request_dto.description,
        image=request_dto.image,
    )
    return _mutation_response(change)


@router.post("/categories/{category_id}/products/reorder", response_model=CatalogMutationResponse)
def reorder_products(
    store_id: str,
    category_id: int,
    request_dto: ReorderRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.reorder_products(
        StoreId(store_id),
        CategoryId(category_id),
        dragged_id=ProductId(request_dto.dragged_id),
        target_id=ProductId(request_dto.target_id),
    )
    return _mutation_response(change)


@router.patch("/products/{product_id}", response_model=CatalogMutationResponse)
def update_product(
    store_id: str,
    product_id: int,
    request_dto: UpdateProductRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.update_product(
        StoreId(store_id),
        ProductId(product_id),
        name=request_dto.name,
        description=request_dto.description,
        price=request_dto.price,
        image=request_dto.image,
        active=request_dto.active,
    )
    return _mutation_response(change)


@router.delete("/products/{product_id}", response_model=CatalogMutationResponse)
def delete_product(
    store_id: str,
    product_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.delete_product(StoreId(store_id), ProductId(product_id))
    return _mutation_response(change)


@router.post(
    "/products/{product_id}/additional-groups",
    response_model=CatalogMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_additional_group(
    store_id: str,
    product_id: int,
    request_dto: CreateAdditionalGroupRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.create_additional_group(
        StoreId(store_id),
        ProductId(product_id),
        name=request_dto.name,
        items=[(item.name, item.price, item.description) for item in request_dto.items],
    )
    return _mutation_response(change)


@router.post(
    "/products/{product_id}/additional-groups/reorder",
    response_model=CatalogMutationResponse,
)
def reorder_additional_groups(
    store_id: str,
    product_id: int,
    request_dto: ReorderRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.reorder_additional_groups(
        StoreId(store_id),
        ProductId(product_id),
        dragged_id=AdditionalGroupId(request_dto.dragged_id),
        target_id=AdditionalGroupId(request_dto.target_id),
    )
    return _mutation_response(change)


@router.post(
    "/additional-groups/{group_id}/copy",
    response_model=CatalogMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def copy_additional_group(
    store_id: str,
    group_id: int,
    request_dto: CopyAdditionalGroupRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.copy_additional_group(
        StoreId(store_id),
        AdditionalGroupId(group_id),
        source_product_id=ProductId(request_dto.source_product_id),
        target_product_ids=[ProductId(value) for value in request_dto.target_product_ids],
    )
    return _mutation_response(change)


@router.delete(
    "/products/{product_id}/additional-groups/{group_id}",
    response_model=CatalogMutationResponse,
)
def delete_additional_group(
    store_id: str,
    product_id: int,
    group_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.delete_additional_group(
        StoreId(store_id),
        ProductId(product_id),
        AdditionalGroupId(group_id),
    )
    return _mutation_response(change)


@router.delete(
    "/products/{product_id}/additional-groups/{group_id}/items/{item_id}",
    response_model=CatalogMutationResponse,
)
def delete_additional_item(
    store_id: str,
    product_id: int,
    group_id: int,
    item_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> CatalogMutationResponse:
    change = services.catalog.delete_additional_item(
        StoreId(store_id),
        ProductId(product_id),
        AdditionalGroupId(group_id),
        AdditionalItemId(item_id),
    )
    return _mutation_response(change)
