from __future__ import annotations

import threading
from typing import Sequence
from uuid import uuid4

from rbo.application.use_cases.catalog_model import CatalogModel
from rbo.domain.cart.entities import Cart, CartLine
from rbo.domain.common.errors import NotFoundError, ValidationError
from rbo.domain.common.ids import CartId, CartLineId, ProductId, StoreId


def new_cart_id() -> CartId:
    return CartId(f"crt_{uuid4().hex[:12]}")


class CartSessions:
    """In-process registry of draft carts keyed by ``(store_id, cart_id)``.

    Carts are never persisted; a restart drops every open draft.
    """

    def __init__(self, catalog_model: CatalogModel) -> None:
        self._catalog_model = catalog_model
        self._carts: dict[tuple[StoreId, CartId], Cart] = {}
        self._lock = threading.Lock()

    def create(self, store_id: StoreId) -> Cart:
        cart = Cart(
            cart_id=new_cart_id(),
            store_id=store_id,
            currency=self._catalog_model.currency_for(store_id),
        )
        with self._lock:
            self._carts[(store_id, cart.cart_id)] = cart
        return cart

    def get(self, store_id: StoreId, cart_id: CartId) -> Cart:
        with self._lock:
            cart = self._carts.get((store_id, cart_id))
        if cart is None:
            raise NotFoundError(f"cart {cart_id} not found")
        return cart

    def discard(self, store_id: StoreId, cart_id: CartId) -> None:
        with self._lock:
            if self._carts.pop((store_id, cart_id), None) is None:
                raise NotFoundError(f"cart {cart_id} not found")

    def add_line(
        self,
        store_id: StoreId,
        cart_id: CartId,
        product_id: ProductId,
        additional_keys: Sequence[tuple[int, int]] = (),
        notes: str | None = None,
    ) -> CartLine:
        cart = self.get(store_id, cart_id)
        catalog = self._catalog_model.current(store_id)
        product = catalog.find_product(product_id)
        if all(p.product_id != product_id for _, p in catalog.sellable_products()):
            raise ValidationError(f"product {product_id} is not available for sale", field="productId")
        return cart.add_line(product, additional_keys=additional_keys, notes=notes)

    def update_line(
        self,
        store_id: StoreId,
        cart_id: CartId,
        line_id: CartLineId,
        quantity: int | None = None,
        notes: str | None = None,
    ) -> CartLine | None:
        cart = self.get(store_id, cart_id)
        line: CartLine | None = cart.find_line(line_id)
        if notes is not None:
            line = cart.set_notes(line_id, notes or None)
        if quantity is not None:
            line = cart.set_quantity(line_id, quantity)
        return line

    def remove_line(self, store_id: StoreId, cart_id: CartId, line_id: CartLineId) -> Cart:
        cart = self.get(store_id, cart_id)
        cart.remove_line(line_id)
        return cart

    def clear(self, store_id: StoreId, cart_id: CartId) -> Cart:
        cart = self.get(store_id, cart_id)
        cart.clear()
        return cart
