"""Database models."""

from sqlmodel import SQLModel

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.models.order import Order

__all__ = [
    "SQLModel",
    "Order",
    "OrderEvent",
    "OrderStatus",
]
