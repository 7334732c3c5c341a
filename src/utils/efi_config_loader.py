"""
Configuration loader for the Efí Pay integration.

Reads the Efí credentials, Pix key and certificate source from the process
environment (a local .env file is honoured), and resolves the certificate
value into usable material.

Environment variables:
- NODE_ENV: "production" selects production credentials, anything else the sandbox
- EFI_PROD_CLIENT_ID / EFI_PROD_CLIENT_SECRET: production credentials
- EFI_HOMOLOG_CLIENT_ID / EFI_HOMOLOG_CLIENT_SECRET: sandbox (homologação) credentials
- EFI_PIX_KEY: Pix key registered at Efí, used in every charge
- EFI_CERTIFICATE: base64 certificate content or a path to the certificate file
"""

from __future__ import annotations

import base64
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_BASE64_RE = re.compile(r"^(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?$")


class EfiConfigurationError(RuntimeError):
    """Missing or invalid Efí configuration. Start-up must not continue."""


class EfiEnvironment(BaseModel):
    """Raw Efí settings as found in the environment."""

    model_config = ConfigDict(frozen=True)

    node_env: str = ""
    prod_client_id: Optional[str] = None
    prod_client_secret: Optional[str] = None
    homolog_client_id: Optional[str] = None
    homolog_client_secret: Optional[str] = None
    pix_key: Optional[str] = None
    certificate: Optional[str] = None

    @property
    def production(self) -> bool:
        return self.node_env == "production"


@dataclass(frozen=True)
class CertificateMaterial:
    content: Union[str, bytes]
    source: str  # "inline" or "file"

    def as_bytes(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return base64.b64decode(self.content.strip(), validate=True)


@dataclass(frozen=True)
class EfiCredentials:
    """Credentials selected for the active mode, ready for client construction."""

    sandbox: bool
    client_id: str
    client_secret: str
    pix_key: str
    certificate: CertificateMaterial


def load_efi_environment(environ: Optional[Mapping[str, str]] = None) -> EfiEnvironment:
    """
    Build an EfiEnvironment from a mapping of environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading .env

    Returns:
        EfiEnvironment with empty values normalised to None
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    def _get(name: str) -> Optional[str]:
        value = environ.get(name)
        return value if value else None

    return EfiEnvironment(
        node_env=environ.get("NODE_ENV", "") or "",
        prod_client_id=_get("EFI_PROD_CLIENT_ID"),
        prod_client_secret=_get("EFI_PROD_CLIENT_SECRET"),
        homolog_client_id=_get("EFI_HOMOLOG_CLIENT_ID"),
        homolog_client_secret=_get("EFI_HOMOLOG_CLIENT_SECRET"),
        pix_key=_get("EFI_PIX_KEY"),
        certificate=_get("EFI_CERTIFICATE"),
    )


def is_base64(value: Optional[str]) -> bool:
    """Return True if the value looks like strict, padded base64 content."""
    if not value or not isinstance(value, str):
        return False
    stripped = value.strip()
    if not stripped:
        return False
    return _BASE64_RE.fullmatch(stripped) is not None


def resolve_certificate(value: Optional[str]) -> CertificateMaterial:
    """
    Resolve EFI_CERTIFICATE into certificate material.

    A value that looks like base64 and is not an existing path is used as
    inline content, unchanged. Anything else is read from disk as a path.

    Raises:
        EfiConfigurationError: If the value is missing, the file does not
            exist, or the file cannot be read
    """
    if not value:
        raise EfiConfigurationError(
            "EFI_CERTIFICATE (base64 content or path to the certificate file) is not set."
        )

    if is_base64(value) and not os.path.exists(value):
        logger.info("[Efí Pay] Using certificate content directly from the environment value.")
        return CertificateMaterial(content=value, source="inline")

    logger.info("[Efí Pay] Reading certificate from path: %s", value)
    path = Path(value)
    if not path.exists():
        raise EfiConfigurationError(f"Certificate file not found at path: {value}")
    try:
        content = path.read_bytes()
    except OSError as exc:
        raise EfiConfigurationError(
            f"Failed to read certificate file at {value}. Check its permissions."
        ) from exc
    return CertificateMaterial(content=content, source="file")


def select_credentials(environment: EfiEnvironment) -> EfiCredentials:
    """
    Validate the environment for its mode and pick the matching credentials.

    Raises:
        EfiConfigurationError: On any missing credential, Pix key or certificate
    """
    if environment.production:
        if not environment.prod_client_id or not environment.prod_client_secret:
            raise EfiConfigurationError(
                "Efí PRODUCTION credentials (EFI_PROD_CLIENT_ID, EFI_PROD_CLIENT_SECRET) are not set."
            )
        client_id, client_secret = environment.prod_client_id, environment.prod_client_secret
    else:
        if not environment.homolog_client_id or not environment.homolog_client_secret:
            raise EfiConfigurationError(
                "Efí SANDBOX credentials (EFI_HOMOLOG_CLIENT_ID, EFI_HOMOLOG_CLIENT_SECRET) are not set."
            )
        client_id, client_secret = environment.homolog_client_id, environment.homolog_client_secret

    if not environment.pix_key:
        raise EfiConfigurationError("EFI_PIX_KEY is not set.")

    certificate = resolve_certificate(environment.certificate)

    return EfiCredentials(
        sandbox=not environment.production,
        client_id=client_id,
        client_secret=client_secret,
        pix_key=environment.pix_key,
        certificate=certificate,
    )
