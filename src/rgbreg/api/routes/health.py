"""Health check endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from rgbreg import __version__

router = APIRouter()


@router.get("/ping", response_class=PlainTextResponse)
async def ping():
    """Liveness probe, also the keepalive target."""
    return "Pong!"


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "rgbreg"}


@router.get("/health/detailed")
async def detailed_health(request: Request):
    """Detailed health check with configuration info."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": "rgbreg",
        "version": __version__,
        "store_open": not request.app.state.store.is_closed,
        "config": settings.get_safe_dict(),
    }
