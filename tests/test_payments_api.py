import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.integrations.clients.mocks.efi_pix import MockEfiPixClient
from src.integrations.clients.real_http.efi_pix import EfiApiError
from src.integrations.policy.efi_pay_service import EfiPayService

from conftest import FakeEfiClient


def test_create_charge_endpoint_returns_unified_result(fake_client):
    app = create_app(EfiPayService(fake_client, pix_key="loja@example.com"))
    client = TestClient(app)

    response = client.post("/api/v1/payments/pix/charges", json={"total": 19.9, "expiration_in_seconds": 3600})

    assert response.status_code == 200
    assert response.json() == {
        "txid": "abc123",
        "pixCopiaECola": "00020101-copia-e-cola-abc123",
        "imagemQrcode": "data:image/png;base64,AAAA",
    }
    assert fake_client.charge_bodies[0]["valor"]["original"] == "19.90"


def test_efi_failure_maps_to_bad_gateway():
    failing = FakeEfiClient(charge_error=EfiApiError("x", payload={"error_description": "invalid_key"}))
    client = TestClient(create_app(EfiPayService(failing, pix_key="k")))

    response = client.post("/api/v1/payments/pix/charges", json={"total": 10})

    assert response.status_code == 502
    assert response.json()["detail"] == {"message": "invalid_key"}


def test_non_positive_total_is_rejected(fake_client):
    client = TestClient(create_app(EfiPayService(fake_client, pix_key="k")))

    response = client.post("/api/v1/payments/pix/charges", json={"total": 0})

    assert response.status_code == 422
    assert fake_client.charge_bodies == []


@pytest.mark.parametrize("raw_body", ['{"total": 1e30}', '{"total": Infinity}', '{"total": NaN}'])
def test_huge_or_non_finite_total_is_rejected(fake_client, raw_body):
    client = TestClient(create_app(EfiPayService(fake_client, pix_key="k")))

    response = client.post(
        "/api/v1/payments/pix/charges",
        content=raw_body,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert fake_client.charge_bodies == []


def test_shutdown_closes_the_efi_client(fake_client):
    closed = []

    async def aclose():
        closed.append(True)

    fake_client.aclose = aclose

    with TestClient(create_app(EfiPayService(fake_client, pix_key="k"))) as client:
        assert client.get("/health").status_code == 200
        assert closed == []

    assert closed == [True]


@pytest.mark.asyncio
async def test_mock_client_forgets_oldest_charges_beyond_its_limit():
    client = MockEfiPixClient(max_charges=2)
    first = await client.pix_create_immediate_charge({"valor": {"original": "1.00"}})
    await client.pix_create_immediate_charge({"valor": {"original": "2.00"}})
    last = await client.pix_create_immediate_charge({"valor": {"original": "3.00"}})

    with pytest.raises(EfiApiError):
        await client.pix_generate_qrcode(first["txid"])
    assert (await client.pix_generate_qrcode(last["txid"]))["qrcode"]

    await client.aclose()
    with pytest.raises(EfiApiError):
        await client.pix_generate_qrcode(last["txid"])


def test_app_in_mock_mode_serves_charges_end_to_end(monkeypatch):
    monkeypatch.setenv("INTEGRATIONS_MODE", "mock")
    client = TestClient(create_app())

    health = client.get("/health").json()
    response = client.post("/api/v1/payments/pix/charges", json={"total": 42.5, "expiration_in_seconds": 120})

    assert health["efi_client"] == "MockEfiPixClient"
    assert response.status_code == 200
    assert len(response.json()["txid"]) == 32
    assert response.json()["imagemQrcode"].startswith("data:image/png;base64,")


@pytest.mark.asyncio
async def test_mock_client_rejects_unknown_txid():
    service = EfiPayService(MockEfiPixClient(), pix_key="k")
    created = await service.create_pix_charge(5, 60)

    assert "5.00" in created.pix_copia_e_cola

    with pytest.raises(EfiApiError) as excinfo:
        await service.client.pix_generate_qrcode("unknown")
    assert excinfo.value.payload["erros"][0]["mensagem"] == "Charge unknown not found"
