"""
Efí Pay Service

Creates immediate Pix charges and returns the QR code data needed by the
frontend. The Efí client is injected; build it once at start-up with
src/integrations/clients/efi_factory.py.
"""

from __future__ import annotations

import logging
from typing import Any

from src.integrations.contracts.pix import (
    DEFAULT_PAYER_REQUEST_TEMPLATE,
    Amount,
    PixChargeRequest,
    PixChargeResult,
    format_amount,
    validate_charge_arguments,
)
from src.integrations.policy.response_wrappers import normalize_pix_charge_response, normalize_pix_qrcode_response

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to communicate with the payment API."


class EfiPayError(Exception):
    """A charge could not be created. Carries only a human-readable message."""


def extract_error_message(error: BaseException) -> str:
    """
    Pick the most useful message from an Efí failure.

    Order: error_description, first entry of erros[].mensagem, the
    exception's own message, then a fixed default.
    """
    payload = getattr(error, "payload", None)
    if not isinstance(payload, dict):
        payload = {}

    description = payload.get("error_description")
    if description:
        return str(description)

    erros = payload.get("erros")
    if isinstance(erros, list) and erros and isinstance(erros[0], dict) and erros[0].get("mensagem"):
        return str(erros[0]["mensagem"])

    message = str(error).strip()
    if message:
        return message
    return DEFAULT_ERROR_MESSAGE


class EfiPayService:
    def __init__(self, client: Any, pix_key: str, payer_request_template: str = DEFAULT_PAYER_REQUEST_TEMPLATE):
        self.client = client
        self.pix_key = pix_key
        self.payer_request_template = payer_request_template

    def build_charge_request(self, total: Amount, expiration_in_seconds: int) -> PixChargeRequest:
        return PixChargeRequest(
            amount=total,
            expiration_seconds=expiration_in_seconds,
            pix_key=self.pix_key,
            payer_request=self.payer_request_template.format(amount=format_amount(total)),
        )

    async def create_pix_charge(self, total: Amount, expiration_in_seconds: int) -> PixChargeResult:
        """
        Create an immediate Pix charge and fetch its QR code.

        Raises:
            ValueError: If total or expiration_in_seconds is not positive
            EfiPayError: If either Efí call fails
        """
        validate_charge_arguments(total, expiration_in_seconds)
        request = self.build_charge_request(total, expiration_in_seconds)

        try:
            logger.info("Sending Pix charge request to Efí (R$%s)", format_amount(total))
            charge = normalize_pix_charge_response(
                await self.client.pix_create_immediate_charge(request.to_body())
            )
            qrcode = normalize_pix_qrcode_response(await self.client.pix_generate_qrcode(charge.txid))
            logger.info("Pix charge %s and QR code generated", charge.txid)
        except Exception as exc:
            message = extract_error_message(exc)
            logger.error("Failed to create Efí charge: %s (%r)", message, exc, exc_info=True)
            raise EfiPayError(message) from exc

        return PixChargeResult(
            txid=charge.txid,
            pix_copia_e_cola=qrcode.qrcode,
            imagem_qrcode=qrcode.imagem_qrcode,
        )
