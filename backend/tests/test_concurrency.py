"""Concurrency properties of order creation and the preparation slot."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pizzaparty.models.enums import OrderStatus
from pizzaparty.models.order import Order
from pizzaparty.services.orders.code_generator import OrderCodeGenerator, parse_order_code
from pizzaparty.services.orders.coordinator import OrderCoordinator
from pizzaparty.services.orders.exceptions import OrderAlreadyInPreparation
from pizzaparty.services.orders.store import SqlOrderStore, sql_store_factory
from tests.fakes import FakeClock, InMemoryOrderStore

SessionMaker = async_sessionmaker[AsyncSession]


@pytest.mark.parametrize("run", range(3))
async def test_concurrent_creates_get_unique_codes(coordinator: OrderCoordinator, run: int) -> None:
    orders = await asyncio.gather(*(coordinator.create(f"Pizza {i}") for i in range(300)))

    codes = [order.code for order in orders]
    assert len(set(codes)) == 300
    assert sorted(parse_order_code(code).number for code in codes) == list(range(1, 301))


async def test_concurrent_take_charge_fills_single_slot(
    coordinator: OrderCoordinator,
    memory_store: InMemoryOrderStore,
) -> None:
    orders = [memory_store.add(f"COD-21032025-{i:04d}") for i in range(1, 51)]

    results = await asyncio.gather(
        *(coordinator.take_charge(order.id) for order in orders),
        return_exceptions=True,
    )

    taken = [result for result in results if not isinstance(result, BaseException)]
    rejected = [result for result in results if isinstance(result, OrderAlreadyInPreparation)]
    assert len(taken) == 1
    assert len(rejected) == 49
    assert await memory_store.count_by_status(OrderStatus.PREPARING) == 1


async def test_slot_lock_serializes_take_charge_without_store_guard(clock: FakeClock) -> None:
    # Store without conditional update support: exclusivity comes from the coordinator lock alone
    store = InMemoryOrderStore(enforce_slot_guard=False)
    coordinator = OrderCoordinator(store.scope, OrderCodeGenerator("COD", clock=clock))
    orders = [store.add(f"COD-21032025-{i:04d}") for i in range(1, 31)]

    results = await asyncio.gather(
        *(coordinator.take_charge(order.id) for order in orders),
        return_exceptions=True,
    )

    assert sum(1 for result in results if not isinstance(result, BaseException)) == 1
    assert await store.count_by_status(OrderStatus.PREPARING) == 1


async def test_same_order_taken_in_charge_twice_concurrently(
    coordinator: OrderCoordinator,
    memory_store: InMemoryOrderStore,
) -> None:
    order = memory_store.add("COD-21032025-0001")

    results = await asyncio.gather(
        *(coordinator.take_charge(order.id) for _ in range(10)),
        return_exceptions=True,
    )

    assert sum(1 for result in results if not isinstance(result, BaseException)) == 1
    assert memory_store.orders[order.id].status is OrderStatus.PREPARING


async def test_creates_and_kitchen_work_interleave(
    coordinator: OrderCoordinator,
    memory_store: InMemoryOrderStore,
) -> None:
    first = await coordinator.create("Margherita")
    await coordinator.take_charge(first.id)

    created, completed = await asyncio.gather(
        asyncio.gather(*(coordinator.create(f"Pizza {i}") for i in range(20))),
        coordinator.complete(first.id),
    )

    assert completed.status is OrderStatus.READY
    assert len({order.code for order in created} | {first.code}) == 21
    assert await memory_store.count_by_status(OrderStatus.PREPARING) == 0


class TestSharedDatabase:
    """Two coordinators on one SQLite file behave like two server processes."""

    async def _insert_waiting(self, session_maker: SessionMaker, count: int) -> list[Order]:
        async with session_maker() as session:
            store = SqlOrderStore(session)
            return [
                await store.save(Order(code=f"COD-21032025-{i:04d}", description="Margherita"))
                for i in range(1, count + 1)
            ]

    async def test_take_charge_across_coordinators_fills_single_slot(
        self,
        file_session_maker: SessionMaker,
        clock: FakeClock,
    ) -> None:
        orders = await self._insert_waiting(file_session_maker, 12)
        kitchens = [
            OrderCoordinator(sql_store_factory(file_session_maker), OrderCodeGenerator("COD", clock=clock))
            for _ in range(2)
        ]

        results = await asyncio.gather(
            *(kitchens[i % 2].take_charge(order.id) for i, order in enumerate(orders)),
            return_exceptions=True,
        )

        taken = [result for result in results if not isinstance(result, BaseException)]
        rejected = [result for result in results if isinstance(result, OrderAlreadyInPreparation)]
        assert len(taken) == 1
        assert len(rejected) == 11
        assert len(await kitchens[0].get_pending()) == 11
        in_preparation = await kitchens[1].get_in_preparation()
        assert in_preparation is not None
        assert in_preparation.id == taken[0].id

    async def test_unique_index_rejects_concurrent_unguarded_updates(self, file_session_maker: SessionMaker) -> None:
        orders = await self._insert_waiting(file_session_maker, 8)

        async def start_preparing(order_id: str) -> bool:
            async with file_session_maker() as session:
                return await SqlOrderStore(session).compare_and_set_status(
                    order_id, OrderStatus.WAITING, OrderStatus.PREPARING
                )

        applied = await asyncio.gather(*(start_preparing(order.id) for order in orders))

        assert applied.count(True) == 1
        async with file_session_maker() as session:
            assert await SqlOrderStore(session).count_by_status(OrderStatus.PREPARING) == 1
