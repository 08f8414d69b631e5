"""Shared fixtures."""

from collections.abc import AsyncIterator
from datetime import date
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import pizzaparty.models  # noqa: F401
from pizzaparty.services.orders.code_generator import OrderCodeGenerator
from pizzaparty.services.orders.coordinator import OrderCoordinator
from pizzaparty.services.orders.store import sql_store_factory
from tests.fakes import FakeClock, InMemoryOrderStore

KITCHEN_DAY = date(2025, 3, 21)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(KITCHEN_DAY)


@pytest.fixture
def generator(clock: FakeClock) -> OrderCodeGenerator:
    return OrderCodeGenerator("COD", clock=clock)


@pytest.fixture
def memory_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def coordinator(memory_store: InMemoryOrderStore, generator: OrderCodeGenerator) -> OrderCoordinator:
    return OrderCoordinator(memory_store.scope, generator)


@pytest.fixture
async def session_maker() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """In-memory SQLite database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def file_session_maker(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """SQLite database file with a real connection pool, so sessions run on separate connections."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'kitchen.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def sql_coordinator(
    session_maker: async_sessionmaker[AsyncSession],
    generator: OrderCodeGenerator,
) -> OrderCoordinator:
    return OrderCoordinator(sql_store_factory(session_maker), generator)
