from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rbo.domain.order.entities import OrderType, PaymentMethod


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class CreateCategoryRequest(CamelBaseModel):
    name: str
    description: str | None = None
    icon: str | None = None


class UpdateCategoryRequest(CamelBaseModel):
    name: str | None = None
    description: str | None = None
    icon: str | None = None
    active: bool | None = None


class ReorderRequest(CamelBaseModel):
    dragged_id: int
    target_id: int


class CreateProductRequest(CamelBaseModel):
    name: str
    price: Decimal = Field(ge=0, decimal_places=2)
    description: str = ""
    image: str | None = None


class UpdateProductRequest(CamelBaseModel):
    name: str | None = None
    price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    description: str | None = None
    image: str | None = None
    active: bool | None = None


class AdditionalItemRequest(CamelBaseModel):
    name: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    description: str | None = None


class CreateAdditionalGroupRequest(CamelBaseModel):
    name: str
    items: list[AdditionalItemRequest] = Field(default_factory=list)


class CopyAdditionalGroupRequest(CamelBaseModel):
    source_product_id: int
    target_product_ids: list[int] = Field(min_length=1)


class SelectedAdditionalRequest(CamelBaseModel):
    group_id: int
    item_id: int


class AddCartLineRequest(CamelBaseModel):
    product_id: int
    additionals: list[SelectedAdditionalRequest] = Field(default_factory=list)
    notes: str | None = None


class UpdateCartLineRequest(CamelBaseModel):
    quantity: int | None = None
    notes: str | None = None


class CustomerRequest(CamelBaseModel):
    name: str
    phone: str | None = None
    address: str | None = None


class CheckoutRequest(CamelBaseModel):
    order_type: OrderType = OrderType.COUNTER
    payment_method: PaymentMethod = PaymentMethod.CASH
    customer: CustomerRequest | None = None
    received_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    notes: str | None = None


class MoveOrderRequest(CamelBaseModel):
    status: str
