"""
WAHA Webhook Signature Verification

SECURITY BOUNDARY - Verify the gateway's HMAC signature.
No retries. No logic.
"""

import hashlib
import hmac
from typing import Optional

from fastapi import HTTPException, Request, status

SUPPORTED_ALGORITHMS = {
    "sha512": hashlib.sha512,
    "sha256": hashlib.sha256,
}


def verify_signature(
    request: Request,
    body: bytes,
    hmac_key: Optional[str],
) -> None:
    """
    Verify the HMAC signature WAHA attaches to webhook calls.

    WAHA sends:
    - X-Webhook-Hmac header with the hex digest
    - X-Webhook-Hmac-Algorithm header (sha512 by default)

    Without a configured key every call is rejected; the status poller still
    tracks the session.

    Raises:
        HTTPException(401): Missing signature
        HTTPException(403): No key configured, invalid signature or unsupported algorithm
    """
    if not hmac_key:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="WAHA_WEBHOOK_HMAC_KEY not configured; webhook disabled"
        )

    signature = request.headers.get("X-Webhook-Hmac")
    if not signature:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Webhook-Hmac header"
        )

    algorithm = request.headers.get("X-Webhook-Hmac-Algorithm", "sha512").lower()
    digestmod = SUPPORTED_ALGORITHMS.get(algorithm)
    if digestmod is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Unsupported HMAC algorithm: {algorithm}"
        )

    expected_signature = hmac.new(
        key=hmac_key.encode("utf-8"),
        msg=body,
        digestmod=digestmod
    ).hexdigest()

    # Compare (constant-time to prevent timing attacks)
    if not hmac.compare_digest(signature, expected_signature):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid signature"
        )
