"""
FastAPI Application Entry Point

Integrates:
  - Ticket notification endpoint
  - WAHA session webhook
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --host 0.0.0.0 --port 3001
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import health_router, notifications_router
from config import Config, ConfigurationError
from infra import bootstrap_relay
from webhook import waha_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.

    A missing sender number aborts startup before the session is touched.
    """
    # Startup
    Config.require_valid()

    relay = bootstrap_relay()
    logger.info("=" * 60)
    logger.info("Ticket WhatsApp relay starting up...")
    logger.info(f"Sender number: {Config.SENDER_WHATSAPP_NUMBER}")
    logger.info(f"Admin recipients: {len(relay.recipients)}")
    logger.info(f"Backend: {relay!r}")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info("=" * 60)

    if not relay.config.waha_webhook_hmac_key:
        logger.warning(
            "WAHA_WEBHOOK_HMAC_KEY not set: /webhook/waha rejects all events, "
            "session state comes from status polling only"
        )

    await relay.lifecycle.start()

    yield

    # Shutdown
    logger.info("Ticket WhatsApp relay shutting down...")
    await relay.lifecycle.stop()


# Create FastAPI app
app = FastAPI(
    title="Ticket WhatsApp Relay",
    description="Relays support ticket notifications to admin WhatsApp numbers",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict this in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(notifications_router)
app.include_router(waha_router)
app.include_router(health_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Ticket WhatsApp Relay",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "send_notification": "POST /send-whatsapp-notification",
            "waha_webhook": "POST /webhook/waha",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


def run() -> None:
    """Validate configuration, then serve with uvicorn."""
    import uvicorn

    try:
        Config.require_valid()
    except ConfigurationError as e:
        logger.error(f"ERROR: {e}")
        sys.exit(1)

    logger.info(f"Server running on http://localhost:{Config.PORT}")
    logger.info(
        f"Endpoint for WhatsApp notifications: "
        f"http://localhost:{Config.PORT}/send-whatsapp-notification"
    )
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )


if __name__ == "__main__":
    run()
