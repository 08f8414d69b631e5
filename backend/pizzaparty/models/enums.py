"""Enum definitions for database models."""

from enum import StrEnum


class OrderStatus(StrEnum):
    """Status of an order in the kitchen.

    Status flow: WAITING -> PREPARING -> READY. Only one order may be
    PREPARING at a time.
    """

    WAITING = "waiting"
    PREPARING = "preparing"
    READY = "ready"


class OrderEvent(StrEnum):
    """Kitchen actions that move an order through its lifecycle."""

    TAKE_CHARGE = "take_charge"
    COMPLETE = "complete"
