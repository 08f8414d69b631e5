"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pizzaparty import __version__
from pizzaparty.api.errors import register_exception_handlers
from pizzaparty.api.v1 import health, orders
from pizzaparty.config import settings
from pizzaparty.db import async_session_maker, create_db_and_tables, dispose_engine
from pizzaparty.logging import setup_logging
from pizzaparty.services.orders.code_generator import OrderCodeGenerator
from pizzaparty.services.orders.coordinator import OrderCoordinator
from pizzaparty.services.orders.store import sql_store_factory

# Configure logging before anything else
setup_logging()

logger = structlog.get_logger(__name__)


def build_order_coordinator() -> OrderCoordinator:
    """Create the process-wide coordinator backed by the configured database."""
    return OrderCoordinator(
        sql_store_factory(async_session_maker),
        OrderCodeGenerator(settings.order_code_prefix),
        max_code_attempts=settings.order_code_max_attempts,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    logger.info("Starting Pizza Party Kitchen API", debug=settings.debug)

    await create_db_and_tables()
    app.state.order_coordinator = build_order_coordinator()
    logger.info("Order coordinator ready", code_prefix=settings.order_code_prefix)

    yield

    # Shutdown
    logger.info("Shutting down Pizza Party Kitchen API")
    await dispose_engine()
    logger.info("Database connections disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pizza Party Kitchen API",
        description="Order tracking API for a single-kitchen pizzeria",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api/v1", tags=["health"])
    app.include_router(orders.router, prefix="/api/v1", tags=["orders"])
    return app


app = create_app()
