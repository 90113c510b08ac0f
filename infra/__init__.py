"""
Infrastructure module exports.

Configuration and bootstrap for the WhatsApp session and recipients.
"""

from .config import RelayConfig, get_config, WhatsAppBackendType
from .bootstrap import RelayBootstrap, bootstrap_relay

__all__ = [
    "RelayConfig",
    "get_config",
    "WhatsAppBackendType",
    "RelayBootstrap",
    "bootstrap_relay",
]
