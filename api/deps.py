"""FastAPI dependencies resolving the process-wide relay components."""

from typing import Tuple

from fastapi import Depends

from infra import RelayBootstrap, bootstrap_relay
from transport.whatsapp import SessionHandle, SessionLifecycle


def get_bootstrap() -> RelayBootstrap:
    """Process-wide bootstrap (overridden in tests)."""
    return bootstrap_relay()


def get_lifecycle(bootstrap: RelayBootstrap = Depends(get_bootstrap)) -> SessionLifecycle:
    return bootstrap.get_lifecycle()


def get_session(bootstrap: RelayBootstrap = Depends(get_bootstrap)) -> SessionHandle:
    return bootstrap.get_session()


def get_recipients(bootstrap: RelayBootstrap = Depends(get_bootstrap)) -> Tuple[str, ...]:
    return bootstrap.get_recipients()
