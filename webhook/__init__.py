"""
Webhook module - FastAPI route handlers for inbound gateway events.

Includes:
- waha.py: WAHA session status events
"""

from webhook.waha import router as waha_router

__all__ = ["waha_router"]
