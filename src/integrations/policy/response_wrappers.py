from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class PixChargeResponseModel(BaseModel):
    txid: str
    loc_id: Optional[int] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class PixQRCodeResponseModel(BaseModel):
    qrcode: str
    imagem_qrcode: str
    raw: Dict[str, Any] = Field(default_factory=dict)


def normalize_pix_charge_response(raw: Dict[str, Any]) -> PixChargeResponseModel:
    txid = _first_non_empty(raw, "txid", "txId")
    loc = raw.get("loc") if isinstance(raw.get("loc"), dict) else {}

    return _build_model(
        PixChargeResponseModel,
        {
            "txid": str(txid),
            "loc_id": loc.get("id"),
            "raw": raw,
        },
        raw,
    )


def normalize_pix_qrcode_response(raw: Dict[str, Any]) -> PixQRCodeResponseModel:
    qrcode = _first_non_empty(raw, "qrcode", "pix_copia_e_cola", "pixCopiaECola")
    imagem = _first_non_empty(raw, "imagemQrcode", "imagem_qrcode")

    return _build_model(
        PixQRCodeResponseModel,
        {
            "qrcode": str(qrcode),
            "imagem_qrcode": str(imagem),
            "raw": raw,
        },
        raw,
    )


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
