"""
WAHA Session Handle

Drives a WhatsApp Web session hosted by a WAHA gateway (WhatsApp HTTP API).
The gateway owns the headless browser, QR pairing and the credential store;
this module only speaks its REST API.

No formatting intelligence. No retries. No dispatch logic.
"""

import logging
from typing import Any, Optional

import httpx

from .base import (
    SendReceipt,
    SessionHandle,
    SessionStatus,
    WhatsAppTransportError,
)

logger = logging.getLogger(__name__)


class GatewayUnavailableError(WhatsAppTransportError):
    """The WAHA gateway could not be reached at all."""
    pass


class WahaSessionHandle(SessionHandle):
    """
    Session handle backed by a WAHA gateway.

    Endpoints used:
    - POST /api/sessions/start            start the session
    - POST /api/sessions/{session}/restart restart an existing session
    - GET  /api/sessions/{session}        status and "me" identity
    - GET  /api/{session}/auth/qr         pairing token (raw)
    - GET  /api/contacts/check-exists     number registration check
    - POST /api/sendText                  text message
    """

    def __init__(
        self,
        base_url: str,
        session: str = "default",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.session = session

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["X-Api-Key"] = api_key

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        allow_status: tuple = (),
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(
                f"WAHA request failed: {method} {path}: {e}",
                extra={"session": self.session, "error": str(e)},
            )
            raise GatewayUnavailableError(f"HTTP request failed: {e}") from e

        if response.status_code >= 400 and response.status_code not in allow_status:
            error_text = response.text
            logger.error(
                f"WAHA API error: {response.status_code} - {error_text}",
                extra={
                    "session": self.session,
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise WhatsAppTransportError(
                f"WAHA API returned {response.status_code} for {method} {path}"
            )

        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise WhatsAppTransportError(f"WAHA returned invalid JSON: {e}") from e

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Start the gateway session, restarting it if it already exists."""
        self.status = "STARTING"
        self.identity = None
        self._last_qr = None

        try:
            response = await self._request(
                "POST",
                "/api/sessions/start",
                json={"name": self.session},
                allow_status=(422,),
            )
            if response.status_code == 422:
                # Session already exists on the gateway
                logger.info(f"WAHA session '{self.session}' exists, restarting")
                await self._request("POST", f"/api/sessions/{self.session}/restart")
        except WhatsAppTransportError:
            self.status = "STOPPED"
            raise

        logger.info(f"WAHA session '{self.session}' initialization requested")
        await self.refresh()

    async def refresh(self) -> SessionStatus:
        """
        Poll the gateway for the session state and apply it.

        An unreachable gateway or a session the gateway no longer knows (404)
        counts as a disconnect. Any other failure leaves the session not
        ready and raises.

        Raises:
            WhatsAppTransportError: Gateway error or malformed status payload
        """
        try:
            response = await self._request(
                "GET",
                f"/api/sessions/{self.session}",
                allow_status=(404,),
            )
        except GatewayUnavailableError as e:
            logger.warning(f"WAHA gateway unreachable, treating session as stopped: {e}")
            await self.apply_status("STOPPED")
            return self.status
        except WhatsAppTransportError:
            self.identity = None
            raise

        if response.status_code == 404:
            logger.warning(f"WAHA session '{self.session}' not found on gateway")
            await self.apply_status("STOPPED")
            return self.status

        try:
            data = self._json(response)
            if not isinstance(data, dict):
                raise WhatsAppTransportError(
                    f"WAHA returned unexpected session payload: {data!r}"
                )
        except WhatsAppTransportError:
            self.identity = None
            raise

        await self.apply_status(data.get("status", "STOPPED"), data.get("me"))
        return self.status

    async def fetch_pairing_token(self) -> Optional[str]:
        """Fetch the raw QR value the phone must scan."""
        try:
            response = await self._request(
                "GET",
                f"/api/{self.session}/auth/qr",
                params={"format": "raw"},
            )
        except WhatsAppTransportError:
            return None
        try:
            return self._json(response).get("value")
        except WhatsAppTransportError:
            return None

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def check_deliverable(self, recipient: str) -> bool:
        phone = recipient.split("@", 1)[0]
        response = await self._request(
            "GET",
            "/api/contacts/check-exists",
            params={"phone": phone, "session": self.session},
        )
        return bool(self._json(response).get("numberExists"))

    async def send(self, recipient: str, text: str) -> SendReceipt:
        payload = {
            "session": self.session,
            "chatId": recipient,
            "text": text,
        }
        response = await self._request("POST", "/api/sendText", json=payload)

        message_id = None
        try:
            result = response.json()
        except ValueError:
            result = {}
        if isinstance(result, dict):
            raw_id = result.get("id")
            # WAHA engines return either a string or {"_serialized": ...}
            if isinstance(raw_id, dict):
                message_id = raw_id.get("_serialized")
            elif raw_id is not None:
                message_id = str(raw_id)

        logger.debug(
            f"WAHA accepted message for {recipient}",
            extra={"recipient": recipient, "message_id": message_id},
        )
        return SendReceipt(recipient=recipient, message_id=message_id)
