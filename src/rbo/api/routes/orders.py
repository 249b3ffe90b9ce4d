from __future__ import annotations

from fastapi import APIRouter, Depends

from rbo.api.dependencies import BackOfficeServices, event_context, get_services
from rbo.application.dto.requests import MoveOrderRequest
from rbo.application.dto.responses import BoardResponse, MoveOrderResponse, OrderResponse
from rbo.application.mappers.order_mapper import to_board_response, to_order_response
from rbo.application.use_cases.order_board import parse_status
from rbo.domain.common.ids import OrderId, StoreId

router = APIRouter(prefix="/v1/stores/{store_id}")


@router.get("/orders", response_model=BoardResponse)
def get_board(
    store_id: str,
    status: str | None = None,
    services: BackOfficeServices = Depends(get_services),
) -> BoardResponse:
    board = services.board
    if status is None:
        columns = board.board(StoreId(store_id))
    else:
        wanted = parse_status(status)
        columns = {wanted: board.list_by_status(StoreId(store_id), wanted)}
    return to_board_response(store_id, columns)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(
    store_id: str,
    order_id: int,
    services: BackOfficeServices = Depends(get_services),
) -> OrderResponse:
    return to_order_response(services.board.get_order(StoreId(store_id), OrderId(order_id)))


@router.post("/orders/{order_id}/move", response_model=MoveOrderResponse)
def move_order(
    store_id: str,
    order_id: int,
    request_dto: MoveOrderRequest,
    services: BackOfficeServices = Depends(get_services),
) -> MoveOrderResponse:
    result = services.board.move_order(
        StoreId(store_id),
        OrderId(order_id),
        request_dto.status,
        context=event_context(),
    )
    return MoveOrderResponse(
        order=to_order_response(result.order) if result.order is not None else None,
        changed=result.changed,
        saved=result.saved,
    )
