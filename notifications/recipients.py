"""Admin recipient registry built from configuration."""

from typing import Optional, Tuple

WHATSAPP_USER_SUFFIX = "@c.us"


def normalize_recipient(number: str) -> str:
    """Turn a raw configured number into a WhatsApp chat id (628xx -> 628xx@c.us)."""
    number = number.strip()
    if number.endswith(WHATSAPP_USER_SUFFIX):
        return number
    return f"{number}{WHATSAPP_USER_SUFFIX}"


def parse_recipients(raw: Optional[str]) -> Tuple[str, ...]:
    """
    Parse a comma-separated number list into recipient identifiers.

    Order and duplicates are preserved; blank entries are skipped. An empty
    or absent value yields an empty registry.
    """
    if not raw:
        return ()
    return tuple(
        normalize_recipient(part)
        for part in raw.split(",")
        if part.strip()
    )
