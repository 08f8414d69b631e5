"""Command line interface for running and maintaining the service."""

import asyncio

import click
import structlog

from pizzaparty.logging import setup_logging

logger = structlog.get_logger(__name__)


@click.group()
def cli() -> None:
    """Pizza Party kitchen service."""
    setup_logging()


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.option("--reload", is_flag=True, help="Restart on code changes (development only).")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API with uvicorn.

    Runs a single worker: order codes and the preparation slot lock live in
    process memory.
    """
    import uvicorn

    uvicorn.run("pizzaparty.main:app", host=host, port=port, reload=reload, log_config=None)


@cli.command("init-db")
def init_db() -> None:
    """Create database tables that do not exist yet."""
    from pizzaparty.db import create_db_and_tables, dispose_engine

    async def _run() -> None:
        try:
            await create_db_and_tables()
        finally:
            await dispose_engine()

    asyncio.run(_run())
    logger.info("Database tables created")
