from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from src.integrations.policy.efi_pay_service import EfiPayError, EfiPayService

api = APIRouter()
payments_api = api

# Upper bound for a single charge (R$ 1 billion).
MAX_CHARGE_TOTAL = 1_000_000_000


class PixChargeCreateRequest(BaseModel):
    total: float = Field(..., gt=0, le=MAX_CHARGE_TOTAL, allow_inf_nan=False, description="Charge amount in BRL")
    expiration_in_seconds: int = Field(default=3600, gt=0, description="Seconds until the charge expires")


def get_efi_pay_service(request: Request) -> EfiPayService:
    service = getattr(request.app.state, "efi_pay_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Payment service is not configured.")
    return service


@api.post("/pix/charges", tags=["Payments"])
async def create_pix_charge(
    request: PixChargeCreateRequest,
    service: EfiPayService = Depends(get_efi_pay_service),
) -> Dict[str, Any]:
    try:
        result = await service.create_pix_charge(request.total, request.expiration_in_seconds)
    except EfiPayError as e:
        raise HTTPException(status_code=502, detail={"message": str(e)}) from e
    return result.to_dict()
