"""
Health check endpoints for deployment readiness.

Provides:
- /health/live: Liveness probe (process is running)
- /health/ready: Readiness probe (WhatsApp session can send)
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.deps import get_lifecycle
from transport.whatsapp import SessionLifecycle

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@router.get("/ready")
async def health_ready(lifecycle: SessionLifecycle = Depends(get_lifecycle)):
    """Readiness health check (Kubernetes readiness probe)."""
    session = lifecycle.snapshot()
    if lifecycle.is_ready():
        return {"status": "ready", "session": session}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "session": session},
    )
