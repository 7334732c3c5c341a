"""Pytest fixtures for the Efí Pay integration tests."""

import base64

import pytest

INLINE_CERTIFICATE = base64.b64encode(b"fake-p12-certificate-bytes").decode("ascii")


class FakeEfiClient:
    """Records calls and returns canned Efí responses."""

    def __init__(self, txid="abc123", charge_error=None, qrcode_error=None):
        self.txid = txid
        self.charge_error = charge_error
        self.qrcode_error = qrcode_error
        self.charge_bodies = []
        self.qrcode_txids = []

    async def pix_create_immediate_charge(self, body):
        self.charge_bodies.append(body)
        if self.charge_error is not None:
            raise self.charge_error
        return {"txid": self.txid, "status": "ATIVA", "loc": {"id": 1}}

    async def pix_generate_qrcode(self, txid):
        self.qrcode_txids.append(txid)
        if self.qrcode_error is not None:
            raise self.qrcode_error
        return {
            "qrcode": f"00020101-copia-e-cola-{txid}",
            "imagemQrcode": "data:image/png;base64,AAAA",
        }


@pytest.fixture
def fake_client():
    return FakeEfiClient()


@pytest.fixture
def sandbox_environ():
    return {
        "NODE_ENV": "development",
        "EFI_HOMOLOG_CLIENT_ID": "Client_Id_homolog",
        "EFI_HOMOLOG_CLIENT_SECRET": "Client_Secret_homolog",
        "EFI_PIX_KEY": "loja@example.com",
        "EFI_CERTIFICATE": INLINE_CERTIFICATE,
    }


@pytest.fixture
def production_environ():
    return {
        "NODE_ENV": "production",
        "EFI_PROD_CLIENT_ID": "Client_Id_prod",
        "EFI_PROD_CLIENT_SECRET": "Client_Secret_prod",
        "EFI_PIX_KEY": "loja@example.com",
        "EFI_CERTIFICATE": INLINE_CERTIFICATE,
    }
