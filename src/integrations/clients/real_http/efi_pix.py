"""
Efí Pay Pix HTTP Client.

Talks to the Efí Pix API over mutual TLS:
- OAuth2 client-credentials token (cached until shortly before it expires)
- immediate charge creation (POST /v2/cob)
- QR code generation for a charge (GET /v2/loc/:id/qrcode)

Built once per process by src/integrations/clients/efi_factory.py.
"""

from __future__ import annotations

import logging
import os
import ssl
import tempfile
import time
from collections import OrderedDict
from typing import Any, Dict, Optional

import httpx
from cryptography.hazmat.primitives.serialization import Encoding, NoEncryption, PrivateFormat, pkcs12

from src.integrations.policy.response_wrappers import IntegrationResponseError, normalize_pix_charge_response

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://pix.api.efipay.com.br"
SANDBOX_BASE_URL = "https://pix-h.api.efipay.com.br"

# Refresh the token this many seconds before Efí expires it.
_TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Locations remembered from charge creation, keyed by txid.
_LOCATION_CACHE_SIZE = 1024


class EfiApiError(Exception):
    """Error response returned by the Efí API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}


def build_ssl_context(certificate: bytes) -> ssl.SSLContext:
    """
    Build a client-auth SSL context from certificate bytes.

    Efí issues PKCS#12 (.p12) files without a password; PEM bundles holding
    both the private key and the certificate are accepted as well.
    """
    if b"-----BEGIN" in certificate:
        pem = certificate
    else:
        key, cert, additional = pkcs12.load_key_and_certificates(certificate, None)
        if key is None or cert is None:
            raise ValueError("PKCS#12 certificate must contain a private key and a certificate.")
        pem = key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
        pem += cert.public_bytes(Encoding.PEM)
        for extra in additional or []:
            pem += extra.public_bytes(Encoding.PEM)

    context = ssl.create_default_context()
    # load_cert_chain only reads from files
    fd, pem_path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(pem)
        context.load_cert_chain(pem_path)
    finally:
        os.remove(pem_path)
    return context


class EfiPixClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        certificate: bytes,
        sandbox: bool = True,
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.sandbox = sandbox
        self.base_url = SANDBOX_BASE_URL if sandbox else PRODUCTION_BASE_URL
        self.timeout_seconds = timeout_seconds

        if http_client is None:
            http_client = httpx.AsyncClient(verify=build_ssl_context(certificate), timeout=timeout_seconds)
        self._http = http_client

        self._access_token: Optional[str] = None
        self._token_expires_at = 0.0
        self._locations: "OrderedDict[str, int]" = OrderedDict()

    async def pix_create_immediate_charge(self, body: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._request("POST", "/v2/cob", json=body)
        loc = data.get("loc") if isinstance(data.get("loc"), dict) else {}
        if data.get("txid") and loc.get("id") is not None:
            self._locations[str(data["txid"])] = loc["id"]
            while len(self._locations) > _LOCATION_CACHE_SIZE:
                self._locations.popitem(last=False)
        return data

    async def pix_generate_qrcode(self, txid: str) -> Dict[str, Any]:
        """
        Return the QR code of a charge.

        The QR code endpoint is keyed by location. Charges created through this
        client already know theirs; any other txid is looked up first.
        """
        loc_id = self._locations.pop(txid, None)
        if loc_id is None:
            charge = normalize_pix_charge_response(await self._request("GET", f"/v2/cob/{txid}"))
            if charge.loc_id is None:
                raise IntegrationResponseError(f"Charge {txid} has no location attached.", payload=charge.raw)
            loc_id = charge.loc_id
        return await self._request("GET", f"/v2/loc/{loc_id}/qrcode")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_access_token(self) -> str:
        now = time.monotonic()
        if self._access_token and now < self._token_expires_at:
            return self._access_token

        response = await self._http.post(
            f"{self.base_url}/oauth/token",
            json={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
        )
        data = _decode_response(response)
        token = data.get("access_token")
        if not token:
            raise EfiApiError(
                "Efí OAuth response did not include an access_token.",
                status_code=response.status_code,
                payload=data,
            )

        expires_in = int(data.get("expires_in") or 3600)
        self._access_token = token
        self._token_expires_at = now + max(expires_in - _TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        logger.debug("Efí access token refreshed (expires_in=%s)", expires_in)
        return token

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        token = await self._get_access_token()
        headers = {"Authorization": f"Bearer {token}"}
        response = await self._http.request(method, f"{self.base_url}{path}", json=json, headers=headers)
        return _decode_response(response)


def _decode_response(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json() if response.content else {}
    except ValueError:
        data = {"raw": response.text}
    if not isinstance(data, dict):
        data = {"raw": data}

    if response.status_code >= 400:
        message = (
            data.get("mensagem")
            or data.get("message")
            or f"Efí API request failed with status {response.status_code}"
        )
        raise EfiApiError(str(message), status_code=response.status_code, payload=data)
    return data
