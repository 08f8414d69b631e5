"""Order coordination service.

Creates orders and moves them through the kitchen lifecycle. This is the only
component allowed to change an order's status.

Concurrency:
- Order codes come from a shared OrderCodeGenerator; the store's unique
  constraint plus a bounded retry catches collisions with codes written by
  other processes (or before a restart).
- take_charge calls are serialized by a process-wide lock, and the status
  change itself is a conditional update that only applies while the
  preparation slot is free.
"""

import asyncio

import structlog

from pizzaparty.models.enums import OrderEvent, OrderStatus
from pizzaparty.models.order import DESCRIPTION_MAX_LENGTH, Order
from pizzaparty.services.orders import lifecycle
from pizzaparty.services.orders.code_generator import OrderCodeGenerator
from pizzaparty.services.orders.exceptions import (
    CodeGenerationFailed,
    InvalidOrderDescription,
    InvalidOrderState,
    OrderAlreadyInPreparation,
    OrderNotFound,
)
from pizzaparty.services.orders.store import OrderCodeConflict, OrderStore, StoreFactory

logger = structlog.get_logger(__name__)


def validate_description(description: str) -> str:
    """Reject empty or too long descriptions."""
    if not description or not description.strip():
        raise InvalidOrderDescription("The description cannot be empty")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise InvalidOrderDescription(f"The description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")
    return description


class OrderCoordinator:
    """Process-wide service for order creation and status transitions.

    Each operation opens its own unit of work from `store_factory`.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        code_generator: OrderCodeGenerator,
        *,
        max_code_attempts: int = 5,
    ):
        self._store_factory = store_factory
        self.code_generator = code_generator
        self.max_code_attempts = max_code_attempts
        self._preparation_lock = asyncio.Lock()

    async def create(self, description: str) -> Order:
        """Create a WAITING order with a freshly minted code.

        Raises:
            InvalidOrderDescription: If the description is empty or too long
            ExhaustedSequence: If today's code sequence is used up
            CodeGenerationFailed: If every attempt collided with an existing code
        """
        validate_description(description)

        async with self._store_factory() as store:
            for attempt in range(1, self.max_code_attempts + 1):
                code = self.code_generator.next()

                if await store.exists(code):
                    await self._on_collision(store, code, attempt)
                    continue

                try:
                    order = await store.save(Order(code=code, description=description, status=OrderStatus.WAITING))
                except OrderCodeConflict:
                    await self._on_collision(store, code, attempt)
                    continue

                logger.info("Order created", order_id=order.id, code=order.code)
                return order

        logger.error("Failed to allocate a unique order code", attempts=self.max_code_attempts)
        raise CodeGenerationFailed(f"Could not allocate a unique order code after {self.max_code_attempts} attempts")

    async def _on_collision(self, store: OrderStore, code: str, attempt: int) -> None:
        logger.warning(
            "Order code collision, retrying",
            code=code,
            attempt=attempt,
            max_attempts=self.max_code_attempts,
        )
        # Skip everything already stored for that day, e.g. after a restart
        code_prefix = code.rsplit("-", 1)[0] + "-"
        latest = await store.latest_code(code_prefix)
        self.code_generator.fast_forward(latest or code)

    async def take_charge(self, order_id: str) -> Order:
        """Move a WAITING order into the preparation slot.

        Raises:
            OrderNotFound: If the order does not exist
            InvalidOrderState: If the order is not WAITING
            OrderAlreadyInPreparation: If another order is being prepared
        """
        async with self._store_factory() as store:
            await self._load(store, order_id)

            async with self._preparation_lock:
                order = await self._load(store, order_id)
                preparing = await store.count_by_status(OrderStatus.PREPARING)
                target = lifecycle.transition(order.status, OrderEvent.TAKE_CHARGE, preparing_count=preparing)

                applied = await store.compare_and_set_status(order.id, order.status, target, require_free_slot=True)
                if not applied:
                    # Changed by another process between our read and the update
                    current = await self._load(store, order_id)
                    preparing = await store.count_by_status(OrderStatus.PREPARING)
                    lifecycle.transition(current.status, OrderEvent.TAKE_CHARGE, preparing_count=preparing)
                    raise OrderAlreadyInPreparation()

            updated = await self._load(store, order_id)

        logger.info("Order taken in charge", order_id=updated.id, code=updated.code)
        return updated

    async def complete(self, order_id: str) -> Order:
        """Mark the order in preparation as READY.

        Raises:
            OrderNotFound: If the order does not exist
            InvalidOrderState: If the order is not PREPARING
        """
        async with self._store_factory() as store:
            order = await self._load(store, order_id)
            target = lifecycle.transition(order.status, OrderEvent.COMPLETE)

            if not await store.compare_and_set_status(order.id, order.status, target):
                current = await self._load(store, order_id)
                raise InvalidOrderState(current.status, OrderEvent.COMPLETE)

            updated = await self._load(store, order_id)

        logger.info("Order completed", order_id=updated.id, code=updated.code)
        return updated

    async def get_pending(self) -> list[Order]:
        """All WAITING orders, oldest first."""
        async with self._store_factory() as store:
            return await store.find_by_status(OrderStatus.WAITING)

    async def get_in_preparation(self) -> Order | None:
        """The order occupying the preparation slot, if any."""
        async with self._store_factory() as store:
            orders = await store.find_by_status(OrderStatus.PREPARING)
        return orders[0] if orders else None

    async def get_by_code(self, code: str) -> Order:
        async with self._store_factory() as store:
            order = await store.find_by_code(code)
        if order is None:
            raise OrderNotFound(f"Order with code {code} not found")
        return order

    async def get(self, order_id: str) -> Order:
        async with self._store_factory() as store:
            return await self._load(store, order_id)

    async def _load(self, store: OrderStore, order_id: str) -> Order:
        order = await store.find_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order with ID {order_id} not found")
        return order
