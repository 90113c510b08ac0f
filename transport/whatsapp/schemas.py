"""
WAHA Gateway Event Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between the WAHA gateway and the relay.

ref: https://waha.devlike.pro/docs/how-to/events/
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class WahaMe(BaseModel):
    """The account paired with the session."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., description="Chat id of the paired account, e.g. 628xx@c.us")
    push_name: Optional[str] = Field(None, alias="pushName")


class WahaEvent(BaseModel):
    """
    A webhook event pushed by the gateway.

    Only `session.status` events drive the lifecycle; everything else is
    acknowledged and ignored.
    """

    model_config = ConfigDict(extra="allow")  # WAHA may add fields

    event: str = Field(..., description="Event name, e.g. 'session.status'")
    session: str = Field(..., description="Gateway session name")
    payload: Dict[str, Any] = Field(default_factory=dict)
    me: Optional[WahaMe] = None

    @property
    def status(self) -> Optional[str]:
        return self.payload.get("status")
