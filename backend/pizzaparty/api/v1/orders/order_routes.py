"""Order API endpoints.

Routes only translate HTTP to coordinator calls; service errors are turned
into responses by the handlers registered in pizzaparty.api.errors.
"""

from fastapi import APIRouter

from pizzaparty.api.v1.orders.dependencies import OrderCoordinatorDep
from pizzaparty.api.v1.orders.schemas import CreateOrderRequest, ErrorResponse, OrderResponse

router = APIRouter(tags=["orders"])

NOT_FOUND = {404: {"model": ErrorResponse}}
CONFLICT = {409: {"model": ErrorResponse}}


@router.post(
    "/orders",
    response_model=OrderResponse,
    status_code=201,
    operation_id="createOrder",
    responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def create_order(body: CreateOrderRequest, coordinator: OrderCoordinatorDep) -> OrderResponse:
    """Place a new order. It starts out waiting."""
    order = await coordinator.create(body.description)
    return OrderResponse.from_model(order)


@router.get("/orders/waiting", response_model=list[OrderResponse], operation_id="listWaitingOrders")
async def list_waiting_orders(coordinator: OrderCoordinatorDep) -> list[OrderResponse]:
    """List orders waiting to be taken in charge, oldest first."""
    orders = await coordinator.get_pending()
    return [OrderResponse.from_model(order) for order in orders]


@router.get("/orders/in-preparation", response_model=OrderResponse | None, operation_id="getOrderInPreparation")
async def get_order_in_preparation(coordinator: OrderCoordinatorDep) -> OrderResponse | None:
    """Get the order currently being prepared (null when the kitchen is free)."""
    order = await coordinator.get_in_preparation()
    return OrderResponse.from_model(order) if order else None


@router.get("/orders/by-id/{order_id}", response_model=OrderResponse, operation_id="getOrderById", responses=NOT_FOUND)
async def get_order_by_id(order_id: str, coordinator: OrderCoordinatorDep) -> OrderResponse:
    """Get a single order by its ID."""
    order = await coordinator.get(order_id)
    return OrderResponse.from_model(order)


@router.put(
    "/orders/{order_id}/take-charge",
    response_model=OrderResponse,
    operation_id="takeChargeOfOrder",
    responses={**NOT_FOUND, **CONFLICT},
)
async def take_charge(order_id: str, coordinator: OrderCoordinatorDep) -> OrderResponse:
    """Start preparing a waiting order. Only one order can be in preparation."""
    order = await coordinator.take_charge(order_id)
    return OrderResponse.from_model(order)


@router.put(
    "/orders/{order_id}/complete",
    response_model=OrderResponse,
    operation_id="completeOrder",
    responses={**NOT_FOUND, **CONFLICT},
)
async def complete_order(order_id: str, coordinator: OrderCoordinatorDep) -> OrderResponse:
    """Mark the order in preparation as ready."""
    order = await coordinator.complete(order_id)
    return OrderResponse.from_model(order)


@router.get("/orders/{order_code}", response_model=OrderResponse, operation_id="getOrderByCode", responses=NOT_FOUND)
async def get_order_by_code(order_code: str, coordinator: OrderCoordinatorDep) -> OrderResponse:
    """Get a single order by its code, e.g. COD-21032025-0007."""
    order = await coordinator.get_by_code(order_code)
    return OrderResponse.from_model(order)
