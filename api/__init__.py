"""
API module - FastAPI routers for the relay's own HTTP surface.

Includes:
- notifications.py: ticket notification endpoint
- health.py: liveness / readiness probes
"""

from api.health import router as health_router
from api.notifications import router as notifications_router

__all__ = ["health_router", "notifications_router"]
