from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class AdditionalItemResponse(BaseModel):
    itemId: int
    name: str
    description: str | None = None
    price: MoneyResponse
    order: int


class AdditionalGroupResponse(BaseModel):
    groupId: int
    name: str
    order: int
    items: list[AdditionalItemResponse] = Field(default_factory=list)


class ProductResponse(BaseModel):
    productId: int
    categoryId: int
    name: str
    description: str
    price: MoneyResponse
    image: str | None = None
    order: int
    active: bool
    additionalGroups: list[AdditionalGroupResponse] = Field(default_factory=list)


class CategoryResponse(BaseModel):
    categoryId: int
    name: str
    description: str | None = None
    icon: str | None = None
    order: int
    active: bool
    expanded: bool
    products: list[ProductResponse] = Field(default_factory=list)


class CatalogResponse(BaseModel):
    storeId: str
    currency: str
    updatedAt: datetime
    categories: list[CategoryResponse] = Field(default_factory=list)


class CatalogMutationResponse(BaseModel):
    catalog: CatalogResponse
    saved: bool
    createdIds: list[int] = Field(default_factory=list)


class SellableProductResponse(BaseModel):
    productId: int
    categoryId: int
    categoryName: str
    name: str
    description: str
    price: MoneyResponse
    image: str | None = None
    additionalGroups: list[AdditionalGroupResponse] = Field(default_factory=list)


class ProductBrowseResponse(BaseModel):
    categories: list[str] = Field(default_factory=list)
    products: list[SellableProductResponse] = Field(default_factory=list)


class SelectedAdditionalResponse(BaseModel):
    groupId: int
    itemId: int
    name: str
    price: MoneyResponse


class CartLineResponse(BaseModel):
    lineId: str
    productId: int
    name: str
    quantity: int
    basePrice: MoneyResponse
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    additionals: list[SelectedAdditionalResponse] = Field(default_factory=list)
    notes: str | None = None


class CartResponse(BaseModel):
    cartId: str
    storeId: str
    lines: list[CartLineResponse] = Field(default_factory=list)
    total: MoneyResponse


class ChangeResponse(BaseModel):
    total: MoneyResponse
    received: MoneyResponse
    changeCents: int
    sufficient: bool


class OrderLineResponse(BaseModel):
    productId: int
    name: str
    quantity: int
    basePrice: MoneyResponse
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    additionals: list[SelectedAdditionalResponse] = Field(default_factory=list)
    notes: str | None = None


class CustomerResponse(BaseModel):
    name: str
    phone: str | None = None
    address: str | None = None


class OrderResponse(BaseModel):
    orderId: int
    storeId: str
    orderNumber: str
    orderType: str
    paymentMethod: str
    status: str
    customer: CustomerResponse | None = None
    lines: list[OrderLineResponse] = Field(default_factory=list)
    total: MoneyResponse
    receivedAmount: MoneyResponse | None = None
    changeDueCents: int | None = None
    createdAt: datetime
    updatedAt: datetime
    notes: str | None = None


class CheckoutResponse(BaseModel):
    order: OrderResponse
    saved: bool


class MoveOrderResponse(BaseModel):
    order: OrderResponse | None = None
    changed: bool
    saved: bool


class BoardColumnResponse(BaseModel):
    status: str
    orders: list[OrderResponse] = Field(default_factory=list)


class BoardResponse(BaseModel):
    storeId: str
    columns: list[BoardColumnResponse] = Field(default_factory=list)
