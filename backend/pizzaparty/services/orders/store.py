"""Order persistence.

OrderStore is the contract the coordinator needs from storage.
SqlOrderStore implements it on top of an async SQLAlchemy session.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from datetime import UTC, datetime
from typing import Protocol

import structlog
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased
from sqlmodel import select

from pizzaparty.models.enums import OrderStatus
from pizzaparty.models.order import ORDER_CODE_CONSTRAINT, SINGLE_PREPARING_INDEX, Order
from pizzaparty.models.types import is_valid_ulid

logger = structlog.get_logger(__name__)


class OrderCodeConflict(Exception):
    """Another order already uses this code."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Order code {code} is already taken")


class OrderStore(Protocol):
    """Storage operations required by OrderCoordinator."""

    async def exists(self, code: str) -> bool: ...

    async def find_by_id(self, order_id: str) -> Order | None: ...

    async def find_by_code(self, code: str) -> Order | None: ...

    async def find_by_status(self, status: OrderStatus) -> list[Order]: ...

    async def count_by_status(self, status: OrderStatus) -> int: ...

    async def latest_code(self, code_prefix: str) -> str | None:
        """Greatest stored code starting with `code_prefix`, e.g. "COD-21032025-"."""
        ...

    async def save(self, order: Order) -> Order:
        """Insert or update an order.

        Raises:
            OrderCodeConflict: If the order's code is already used by another order
        """
        ...

    async def compare_and_set_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new_status: OrderStatus,
        *,
        require_free_slot: bool = False,
    ) -> bool:
        """Set status only if it still equals `expected`.

        With `require_free_slot`, the update also requires that no order is
        PREPARING. Returns whether the update was applied.
        """
        ...


StoreFactory = Callable[[], AbstractAsyncContextManager[OrderStore]]


def _violates(exc: IntegrityError, constraint_name: str, column: str) -> bool:
    """Check whether an IntegrityError was raised by a specific unique constraint.

    PostgreSQL reports the constraint name, SQLite reports "table.column".
    """
    error_str = str(exc.orig if exc.orig is not None else exc).lower()
    return constraint_name in error_str or f"{Order.__tablename__}.{column}" in error_str


class SqlOrderStore:
    """OrderStore backed by an async SQLAlchemy session.

    Every write commits immediately; one store instance is one unit of work.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def exists(self, code: str) -> bool:
        statement = select(Order.id).where(Order.code == code).limit(1)
        result = await self.session.execute(statement)
        return result.first() is not None

    async def find_by_id(self, order_id: str) -> Order | None:
        if not is_valid_ulid(order_id):
            return None
        # populate_existing refreshes objects already in the identity map after conditional updates
        statement = select(Order).where(Order.id == order_id).execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def find_by_code(self, code: str) -> Order | None:
        statement = select(Order).where(Order.code == code).execution_options(populate_existing=True)
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def find_by_status(self, status: OrderStatus) -> list[Order]:
        statement = (
            select(Order)
            .where(Order.status == status)
            .order_by(Order.created_at, Order.code)  # type: ignore[arg-type]
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_status(self, status: OrderStatus) -> int:
        statement = select(func.count()).select_from(Order).where(Order.status == status)
        result = await self.session.execute(statement)
        count: int = result.scalar_one()
        return count

    async def latest_code(self, code_prefix: str) -> str | None:
        # Numbers are zero-padded, so the lexicographic max is the highest number
        statement = select(func.max(Order.code)).where(
            Order.code.startswith(code_prefix, autoescape=True)  # type: ignore[attr-defined]
        )
        result = await self.session.execute(statement)
        latest: str | None = result.scalar_one()
        return latest

    async def save(self, order: Order) -> Order:
        order.updated_at = datetime.now(UTC)
        self.session.add(order)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if _violates(e, str(ORDER_CODE_CONSTRAINT.name), "code"):
                raise OrderCodeConflict(order.code) from e
            raise
        return order

    async def compare_and_set_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new_status: OrderStatus,
        *,
        require_free_slot: bool = False,
    ) -> bool:
        if not is_valid_ulid(order_id):
            return False

        statement = (
            update(Order)
            .where(Order.id == order_id, Order.status == expected)  # type: ignore[arg-type]
            .values(status=new_status, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        if require_free_slot:
            other = aliased(Order)
            slot_taken = select(other.id).where(other.status == OrderStatus.PREPARING).exists()
            statement = statement.where(~slot_taken)

        try:
            result = await self.session.execute(statement)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            # A concurrent writer in another process won the slot between our check and commit
            if _violates(e, str(SINGLE_PREPARING_INDEX.name), "status"):
                logger.warning("Preparation slot taken concurrently", order_id=order_id)
                return False
            raise

        applied: bool = result.rowcount == 1  # type: ignore[attr-defined]
        return applied


def sql_store_factory(session_maker: async_sessionmaker[AsyncSession]) -> StoreFactory:
    """Build a StoreFactory that opens a fresh session per unit of work."""

    @asynccontextmanager
    async def store_scope() -> AsyncIterator[OrderStore]:
        async with session_maker() as session:
            yield SqlOrderStore(session)

    return store_scope
