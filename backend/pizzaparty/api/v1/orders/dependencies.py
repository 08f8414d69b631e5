"""FastAPI dependencies for service injection."""

from typing import Annotated

from fastapi import Depends, Request

from pizzaparty.services.orders.coordinator import OrderCoordinator


def get_order_coordinator(request: Request) -> OrderCoordinator:
    """Get the process-wide OrderCoordinator created at startup."""
    coordinator: OrderCoordinator = request.app.state.order_coordinator
    return coordinator


# Type aliases for cleaner endpoint signatures
OrderCoordinatorDep = Annotated[OrderCoordinator, Depends(get_order_coordinator)]
