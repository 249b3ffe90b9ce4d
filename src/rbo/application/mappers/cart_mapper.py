from __future__ import annotations

from rbo.application.dto.responses import CartLineResponse, CartResponse, ChangeResponse
from rbo.application.mappers.money import to_money_response
from rbo.application.mappers.order_mapper import to_selected_additional_response
from rbo.domain.cart.entities import Cart
from rbo.domain.common.money import Money


def to_cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        cartId=str(cart.cart_id),
        storeId=str(cart.store_id),
        lines=[
            CartLineResponse(
                lineId=str(line.line_id),
                productId=line.product_id,
                name=line.name,
                quantity=line.quantity,
                basePrice=to_money_response(line.base_price),
                unitPrice=to_money_response(line.unit_price),
                lineTotal=to_money_response(line.line_total),
                additionals=[
                    to_selected_additional_response(additional)
                    for additional in line.additionals
                ],
                notes=line.notes,
            )
            for line in cart.lines
        ],
        total=to_money_response(cart.compute_total()),
    )


def to_change_response(cart: Cart, received_amount: Money) -> ChangeResponse:
    change = cart.compute_change(received_amount)
    return ChangeResponse(
        total=to_money_response(cart.compute_total()),
        received=to_money_response(received_amount),
        changeCents=change,
        sufficient=change >= 0,
    )
