"""Order lifecycle rules.

Pure decision logic with no I/O. Callers are responsible for evaluating the
result and persisting it as one atomic step.

    WAITING --take_charge--> PREPARING --complete--> READY

take_charge is only allowed while no other order is PREPARING.
"""

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.services.orders.exceptions import InvalidOrderState, OrderAlreadyInPreparation

TRANSITIONS: dict[tuple[OrderStatus, OrderEvent], OrderStatus] = {
    (OrderStatus.WAITING, OrderEvent.TAKE_CHARGE): OrderStatus.PREPARING,
    (OrderStatus.PREPARING, OrderEvent.COMPLETE): OrderStatus.READY,
}


def transition(status: OrderStatus, event: OrderEvent, *, preparing_count: int | None = None) -> OrderStatus:
    """Return the status an order moves to when `event` is applied.

    Args:
        status: Current status of the order
        event: Requested kitchen action
        preparing_count: Number of orders currently PREPARING (required for take_charge)

    Raises:
        InvalidOrderState: If the event is not allowed from `status`
        OrderAlreadyInPreparation: If the preparation slot is occupied
    """
    target = TRANSITIONS.get((status, event))
    if target is None:
        raise InvalidOrderState(status, event)

    if target is OrderStatus.PREPARING:
        if preparing_count is None:
            raise ValueError("preparing_count is required to enter PREPARING")
        if preparing_count >= 1:
            raise OrderAlreadyInPreparation()

    return target


def allowed_events(status: OrderStatus) -> list[OrderEvent]:
    """Events that may be applied to an order in `status` (ignoring the slot guard)."""
    return [event for (source, event) in TRANSITIONS if source == status]
