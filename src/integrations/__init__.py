"""
Integrations layer.
This package contains all code used to communicate with Efí Pay:
- Pix immediate charges and their QR codes
- OAuth and mutual-TLS plumbing for the Efí Pix API

Key rule:
- Callers MUST NOT call the Efí API directly.
- They should go through EfiPayService (src/integrations/policy/efi_pay_service.py).
- The Efí client is built once at start-up (src/integrations/clients/efi_factory.py)
  and injected into the service.
"""

from .contracts.pix import (
    PixChargeRequest,
    PixChargeResult,
    format_amount,
    validate_charge_arguments,
)

__all__ = [
    "PixChargeRequest", "PixChargeResult",
    "format_amount", "validate_charge_arguments",
]
