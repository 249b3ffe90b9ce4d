from __future__ import annotations

from rbo.application.dto.responses import (
    BoardColumnResponse,
    BoardResponse,
    CustomerResponse,
    OrderLineResponse,
    OrderResponse,
    SelectedAdditionalResponse,
)
from rbo.application.mappers.money import to_money_response
from rbo.domain.order.entities import Order, OrderStatus, SelectedAdditional


def to_selected_additional_response(additional: SelectedAdditional) -> SelectedAdditionalResponse:
    return SelectedAdditionalResponse(
        groupId=additional.group_id,
        itemId=additional.item_id,
        name=additional.name,
        price=to_money_response(additional.price),
    )


def to_order_response(order: Order) -> OrderResponse:
    customer = order.customer
    return OrderResponse(
        orderId=order.order_id,
        storeId=str(order.store_id),
        orderNumber=order.order_number,
        orderType=order.order_type.value,
        paymentMethod=order.payment_method.value,
        status=order.status.value,
        customer=(
            None
            if customer is None
            else CustomerResponse(
                name=customer.name,
                phone=customer.phone,
                address=customer.address,
            )
        ),
        lines=[
            OrderLineResponse(
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
            for line in order.lines
        ],
        total=to_money_response(order.total),
        receivedAmount=(
            to_money_response(order.received_amount)
            if order.received_amount is not None
            else None
        ),
        changeDueCents=order.change_due_cents,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
        notes=order.notes,
    )


def to_board_response(store_id: str, columns: dict[OrderStatus, list[Order]]) -> BoardResponse:
    return BoardResponse(
        storeId=store_id,
        columns=[
            BoardColumnResponse(
                status=status.value,
                orders=[to_order_response(order) for order in orders],
            )
            for status, orders in columns.items()
        ],
    )
