"""Health check endpoints."""

from fastapi import APIRouter

from pizzaparty import __version__

router = APIRouter()


@router.get("/health", operation_id="healthCheck")
async def health_check() -> dict[str, str]:
    """Liveness probe; does not touch the database."""
    return {"status": "healthy", "version": __version__}
