"""
Pix contracts.

Request/response shapes for Efí immediate charges ("cobrança imediata").
Used by both:
- clients/mocks/efi_pix.py
- clients/real_http/efi_pix.py
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Union

Amount = Union[int, float, Decimal]

DEFAULT_PAYER_REQUEST_TEMPLATE = "Pedido Gamer Store R${amount}"


def format_amount(total: Amount) -> str:
    """Format an amount the way the Pix API expects it: two decimal places."""
    value = total if isinstance(total, Decimal) else Decimal(str(total))
    try:
        return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    except InvalidOperation as exc:
        raise ValueError(f"total cannot be expressed with two decimal places; got {total!r}") from exc


@dataclass
class PixChargeRequest:
    amount: Amount
    expiration_seconds: int
    pix_key: str
    payer_request: str

    def to_body(self) -> Dict[str, Any]:
        return {
            "calendario": {"expiracao": str(self.expiration_seconds)},
            "valor": {"original": format_amount(self.amount)},
            "chave": self.pix_key,
            "solicitacaoPagador": self.payer_request,
        }


@dataclass
class PixChargeResult:
    txid: str
    pix_copia_e_cola: str
    imagem_qrcode: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "txid": self.txid,
            "pixCopiaECola": self.pix_copia_e_cola,
            "imagemQrcode": self.imagem_qrcode,
        }


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_charge_arguments(total: Amount, expiration_in_seconds: int) -> None:
    """Raise ValueError when the charge arguments are unusable."""
    if isinstance(total, bool) or not isinstance(total, (int, float, Decimal)):
        raise ValueError(f"total must be a number; got {total!r}")
    if not total > 0:
        raise ValueError(f"total must be greater than zero; got {total!r}")
    if not math.isfinite(total):
        raise ValueError(f"total must be finite; got {total!r}")
    format_amount(total)
    if isinstance(expiration_in_seconds, bool) or not isinstance(expiration_in_seconds, int):
        raise ValueError(f"expiration_in_seconds must be an integer; got {expiration_in_seconds!r}")
    if expiration_in_seconds <= 0:
        raise ValueError(f"expiration_in_seconds must be greater than zero; got {expiration_in_seconds}")
