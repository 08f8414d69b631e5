"""API schemas for orders endpoints."""

from datetime import datetime

from pydantic import BaseModel, field_serializer

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.models.order import Order
from pizzaparty.services.orders.lifecycle import allowed_events
from pizzaparty.utils.datetime_utils import to_api_timezone

# =============================================================================
# Response Schemas
# =============================================================================


class OrderResponse(BaseModel):
    """Order response schema."""

    id: str
    code: str
    description: str
    status: OrderStatus
    next_actions: list[OrderEvent]
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_model(cls, order: Order) -> "OrderResponse":
        """Create response from Order model."""
        return cls(
            id=order.id,
            code=order.code,
            description=order.description,
            status=order.status,
            next_actions=allowed_events(order.status),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class ErrorResponse(BaseModel):
    """Error body returned for every rejected operation."""

    detail: str
    error: str


# =============================================================================
# Request Schemas
# =============================================================================


class CreateOrderRequest(BaseModel):
    """Request body for order creation."""

    description: str
