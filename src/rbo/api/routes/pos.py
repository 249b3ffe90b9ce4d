from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, Response, status

from rbo.api.dependencies import BackOfficeServices, event_context, get_services
from rbo.application.dto.requests import (
    AddCartLineRequest,
    CheckoutRequest,
    UpdateCartLineRequest,
)
from rbo.application.dto.responses import (
    CartResponse,
    ChangeResponse,
    CheckoutResponse,
    ProductBrowseResponse,
)
from rbo.application.mappers.cart_mapper import to_cart_response, to_change_response
from rbo.application.mappers.catalog_mapper import to_browse_response
from rbo.application.mappers.order_mapper import to_order_response
from rbo.domain.common.ids import CartId, CartLineId, ProductId, StoreId
from rbo.domain.common.money import Money
from rbo.domain.order.entities import Customer

router = APIRouter(prefix="/v1/stores/{store_id}")


@router.get("/pos/products", response_model=ProductBrowseResponse)
def browse_products(
    store_id: str,
    search: str | None = None,
    category: str | None = None,
    services: BackOfficeServices = Depends(get_services),
) -> ProductBrowseResponse:
    category_names, matches = services.browse.execute(
        StoreId(store_id),
        search=search,
        category=category,
    )
    return to_browse_response(category_names, matches)


@router.post("/carts", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
def create_cart(
    store_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    return to_cart_response(services.carts.create(StoreId(store_id)))


@router.get("/carts/{cart_id}", response_model=CartResponse)
def get_cart(
    store_id: str,
    cart_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    return to_cart_response(services.carts.get(StoreId(store_id), CartId(cart_id)))


@router.delete("/carts/{cart_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_cart(
    store_id: str,
    cart_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> Response:
    services.carts.discard(StoreId(store_id), CartId(cart_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/carts/{cart_id}/lines",
    response_model=CartResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_cart_line(
    store_id: str,
    cart_id: str,
    request_dto: AddCartLineRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    services.carts.add_line(
        StoreId(store_id),
        CartId(cart_id),
        ProductId(request_dto.product_id),
        additional_keys=[(item.group_id, item.item_id) for item in request_dto.additionals],
        notes=request_dto.notes,
    )
    return to_cart_response(services.carts.get(StoreId(store_id), CartId(cart_id)))


@router.patch("/carts/{cart_id}/lines/{line_id}", response_model=CartResponse)
def update_cart_line(
    store_id: str,
    cart_id: str,
    line_id: str,
    request_dto: UpdateCartLineRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    services.carts.update_line(
        StoreId(store_id),
        CartId(cart_id),
        CartLineId(line_id),
        quantity=request_dto.quantity,
        notes=request_dto.notes,
    )
    return to_cart_response(services.carts.get(StoreId(store_id), CartId(cart_id)))


@router.delete("/carts/{cart_id}/lines/{line_id}", response_model=CartResponse)
def remove_cart_line(
    store_id: str,
    cart_id: str,
    line_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    cart = services.carts.remove_line(StoreId(store_id), CartId(cart_id), CartLineId(line_id))
    return to_cart_response(cart)


@router.get("/carts/{cart_id}/change", response_model=ChangeResponse)
def compute_change(
    store_id: str,
    cart_id: str,
    received_amount: Decimal = Query(alias="receivedAmount", ge=0),
    services: BackOfficeServices = Depends(get_services),
) -> ChangeResponse:
    cart = services.carts.get(StoreId(store_id), CartId(cart_id))
    return to_change_response(cart, Money.from_decimal(received_amount, cart.currency))


@router.post(
    "/carts/{cart_id}/checkout",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    store_id: str,
    cart_id: str,
    request_dto: CheckoutRequest,
    services: BackOfficeServices = Depends(get_services),
) -> CheckoutResponse:
    customer = (
        Customer(
            name=request_dto.customer.name,
            phone=request_dto.customer.phone,
            address=request_dto.customer.address,
        )
        if request_dto.customer is not None
        else None
    )
    result = services.checkout.execute(
        StoreId(store_id),
        CartId(cart_id),
        order_type=request_dto.order_type,
        payment_method=request_dto.payment_method,
        customer=customer,
        received_amount=request_dto.received_amount,
        notes=request_dto.notes,
        context=event_context(),
    )
    return CheckoutResponse(order=to_order_response(result.order), saved=result.saved)


@router.delete("/carts/{cart_id}/lines", response_model=CartResponse)
def clear_cart(
    store_id: str,
    cart_id: str,
    services: BackOfficeServices = Depends(get_services),
) -> CartResponse:
    return to_cart_response(services.carts.clear(StoreId(store_id), CartId(cart_id)))
