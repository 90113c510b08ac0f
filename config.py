"""
Configuration management for the ticket WhatsApp relay.

Loads environment variables from .env file and provides typed access to configuration.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
    pass


class Config:
    """Configuration class for the relay service."""

    # HTTP server
    PORT = int(os.getenv("PORT", "3001"))

    # Recipients (comma-separated raw numbers, e.g. 628xxxxxxxxx)
    ADMIN_WHATSAPP_NUMBERS = os.getenv("ADMIN_WHATSAPP_NUMBERS", "")

    # Sender (superadmin number paired with the WhatsApp session)
    SENDER_WHATSAPP_NUMBER = os.getenv("SENDER_WHATSAPP_NUMBER", "")

    # Session backend
    WHATSAPP_BACKEND = os.getenv("WHATSAPP_BACKEND", "waha")
    WAHA_BASE_URL = os.getenv("WAHA_BASE_URL", "http://localhost:3000")
    WAHA_SESSION = os.getenv("WAHA_SESSION", "default")
    WAHA_API_KEY = os.getenv("WAHA_API_KEY", "")
    WAHA_TIMEOUT = float(os.getenv("WAHA_TIMEOUT", "30"))
    WAHA_WEBHOOK_HMAC_KEY = os.getenv("WAHA_WEBHOOK_HMAC_KEY", "")  # unset disables /webhook/waha
    SESSION_POLL_INTERVAL = float(os.getenv("SESSION_POLL_INTERVAL", "10"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> bool:
        """Validate that required configuration is set."""
        required = ["SENDER_WHATSAPP_NUMBER"]
        missing = [key for key in required if not getattr(cls, key)]

        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Please set them in .env file")
            return False

        return True

    @classmethod
    def require_valid(cls) -> None:
        """Raise ConfigurationError unless validate() passes."""
        if not cls.validate():
            raise ConfigurationError("SENDER_WHATSAPP_NUMBER not found in environment. Please set it.")


if __name__ == "__main__":
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Port: {Config.PORT}")
    print(f"  Admin numbers: {Config.ADMIN_WHATSAPP_NUMBERS or '(none)'}")
    print(f"  Sender number: {'✓ Set' if Config.SENDER_WHATSAPP_NUMBER else '✗ Missing'}")
    print(f"  Backend: {Config.WHATSAPP_BACKEND} ({Config.WAHA_BASE_URL}, session={Config.WAHA_SESSION})")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate() else '✗ FAILED'}")
