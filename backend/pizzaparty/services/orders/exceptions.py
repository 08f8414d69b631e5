"""Order domain exceptions."""

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.services.exceptions import ConflictError, NotFoundError, UnavailableError, ValidationError


class OrderNotFound(NotFoundError):
    """Order not found."""

    pass


class InvalidOrderDescription(ValidationError):
    """Description is empty or too long."""

    pass


class InvalidOrderState(ConflictError):
    """Transition is not allowed from the order's current status."""

    kind = "invalid_state"

    def __init__(self, status: OrderStatus, event: OrderEvent):
        self.status = status
        self.event = event
        super().__init__(f"Cannot {event.value.replace('_', ' ')} an order in status {status.value}")


class OrderAlreadyInPreparation(ConflictError):
    """Another order already occupies the preparation slot."""

    kind = "already_in_preparation"

    def __init__(self, message: str = "There is already an order in preparation. Complete that one first."):
        super().__init__(message)


class ExhaustedSequence(UnavailableError):
    """Daily order code sequence has run out of numbers."""

    kind = "exhausted_sequence"


class CodeGenerationFailed(UnavailableError):
    """No unique order code could be allocated within the retry budget."""

    kind = "code_generation_failed"
