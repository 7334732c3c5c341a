"""
Efí client wiring.

The Efí client is built ONCE per process, at start-up, and injected into
EfiPayService. Any configuration problem raises EfiConfigurationError and
must stop the application from starting.

Switching:
INTEGRATIONS_MODE=mock (or test) wires the offline MockEfiPixClient instead.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Mapping, Optional

from src.integrations.clients.mocks.efi_pix import MockEfiPixClient
from src.integrations.clients.real_http.efi_pix import EfiPixClient
from src.integrations.policy.efi_pay_service import EfiPayService
from src.utils.efi_config_loader import EfiEnvironment, load_efi_environment, select_credentials

logger = logging.getLogger(__name__)

_MOCK_PIX_KEY = "mock-pix-key@example.com"


def initialize_efi_client(
    environment: EfiEnvironment,
    client_factory: Callable[..., Any] = EfiPixClient,
) -> Any:
    """
    Validate the environment and construct the Efí client.

    Raises:
        EfiConfigurationError: Missing credentials, Pix key or certificate
        Exception: Whatever the client constructor raises, unchanged
    """
    credentials = select_credentials(environment)

    logger.info(
        "[Efí Pay] Initialising client in %s mode. Client ID: %s",
        "Sandbox" if credentials.sandbox else "Production",
        "set" if credentials.client_id else "***NOT SET***",
    )
    try:
        return client_factory(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            certificate=credentials.certificate.as_bytes(),
            sandbox=credentials.sandbox,
        )
    except Exception:
        logger.critical("[Efí Pay] CRITICAL ERROR while creating the Efí client", exc_info=True)
        raise


def should_use_mock_client(environ: Optional[Mapping[str, str]] = None) -> bool:
    environ = os.environ if environ is None else environ
    mode = (environ.get("INTEGRATIONS_MODE") or "").strip().lower()
    return mode in {"mock", "test"}


def build_efi_pay_service(environ: Optional[Mapping[str, str]] = None) -> EfiPayService:
    """Build the EfiPayService the host application shares across requests."""
    environment = load_efi_environment(environ)

    if should_use_mock_client(os.environ if environ is None else environ):
        logger.info("[Efí Pay] INTEGRATIONS_MODE is mock; using MockEfiPixClient")
        return EfiPayService(MockEfiPixClient(), environment.pix_key or _MOCK_PIX_KEY)

    client = initialize_efi_client(environment)
    return EfiPayService(client, environment.pix_key)
