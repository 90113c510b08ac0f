"""
WAHA Gateway Webhook Receiver

FastAPI router that receives session events pushed by the WAHA gateway and
feeds them to the session handle. The lifecycle adapter reacts to the
resulting signals (reconnect, pairing token, ready).

No dispatch logic. Pure transport.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError

from api.deps import get_bootstrap
from infra import RelayBootstrap
from transport.whatsapp import WahaEvent, verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WAHA Transport"])


@router.post("/waha")
async def waha_webhook_receiver(
    request: Request,
    bootstrap: RelayBootstrap = Depends(get_bootstrap),
) -> dict[str, str]:
    """
    Receive WAHA session events.

    Flow:
    1. Get raw payload
    2. Verify HMAC signature (403 when no key is configured, 401 missing, 403 invalid)
    3. Parse WahaEvent (422 if invalid)
    4. Apply `session.status` events to the session handle

    Returns:
        {"status": "ok"} for every well-formed event, handled or not
    """

    # Step 1: Get raw body for signature verification
    body = await request.body()

    # Step 2: Verify signature (security boundary)
    try:
        verify_signature(request, body, bootstrap.config.waha_webhook_hmac_key)
    except HTTPException as e:
        logger.warning(f"WAHA webhook signature verification failed: {e.detail}")
        raise

    # Step 3: Parse event
    try:
        event = WahaEvent.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid JSON payload"
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid WAHA event: {e.errors()}"
        )

    session = bootstrap.get_session()
    expected_session = bootstrap.config.waha_session

    if event.event != "session.status" or not event.status:
        logger.debug(f"Ignoring WAHA event {event.event}")
        return {"status": "ok"}

    if event.session != expected_session:
        logger.warning(
            f"Ignoring status for unknown WAHA session '{event.session}'",
            extra={"expected_session": expected_session},
        )
        return {"status": "ok"}

    # Step 4: Apply status
    logger.info(
        f"WAHA session '{event.session}' status: {event.status}",
        extra={"session": event.session, "status": event.status},
    )
    me = event.me.model_dump(by_alias=True) if event.me else None
    await session.apply_status(event.status, me)

    return {"status": "ok"}
