"""
Efí Pix — MOCK client.

⚠️  Mock implementation for development and testing.
    Makes no network calls; charges live in memory and are lost on restart.
    Exposes the same coroutines as clients/real_http/efi_pix.py.
"""

import base64
import logging
import uuid
from collections import OrderedDict
from typing import Any, Dict

from src.integrations.clients.real_http.efi_pix import EfiApiError

logger = logging.getLogger(__name__)

# 1x1 transparent PNG
_PLACEHOLDER_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


class MockEfiPixClient:
    """
    Mock Efí Pix client.

    Parameters
    ----------
    sandbox : bool
        Reported back on charges for parity with the real client. Default True.
    max_charges : int
        Charges kept in memory; the oldest are forgotten first. Default 1000.
    """

    def __init__(self, sandbox: bool = True, max_charges: int = 1000):
        self.sandbox = sandbox
        self.max_charges = max_charges
        self._charges: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        self._next_loc_id = 1
        logger.info("[EFI MOCK] Client initialised")

    async def pix_create_immediate_charge(self, body: Dict[str, Any]) -> Dict[str, Any]:
        txid = uuid.uuid4().hex  # 32 alphanumeric chars, within the Pix 26-35 range
        loc_id = self._next_loc_id
        self._next_loc_id += 1

        charge = {
            "txid": txid,
            "status": "ATIVA",
            "calendario": dict(body.get("calendario", {})),
            "valor": dict(body.get("valor", {})),
            "chave": body.get("chave"),
            "solicitacaoPagador": body.get("solicitacaoPagador"),
            "loc": {"id": loc_id, "tipoCob": "cob"},
        }
        self._charges[txid] = charge
        while len(self._charges) > self.max_charges:
            self._charges.popitem(last=False)
        logger.info("[EFI MOCK] Charge %s created for R$%s", txid, charge["valor"].get("original"))
        return dict(charge)

    async def pix_generate_qrcode(self, txid: str) -> Dict[str, Any]:
        charge = self._charges.get(txid)
        if charge is None:
            raise EfiApiError(
                "Cobrança não encontrada para o txid informado.",
                status_code=404,
                payload={
                    "nome": "cobranca_nao_encontrada",
                    "erros": [{"caminho": "txid", "mensagem": f"Charge {txid} not found"}],
                },
            )

        amount = charge["valor"].get("original", "0.00")
        copia_e_cola = f"00020101021226830014BR.GOV.BCB.PIX2561mock.efipay.com.br/v2/{txid}5204000053039865406{amount}6304MOCK"
        imagem = "data:image/png;base64," + base64.b64encode(_PLACEHOLDER_PNG).decode("ascii")
        return {
            "qrcode": copia_e_cola,
            "imagemQrcode": imagem,
            "linkVisualizacao": f"https://mock.efipay.com.br/cob/{txid}",
        }

    async def aclose(self) -> None:
        self._charges.clear()
