"""
FastAPI application - Main entry point

Run with:
    uvicorn src.api.main:create_app --factory
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Optional

from fastapi import FastAPI

from src.api.endpoints.payments import payments_api
from src.integrations.clients.efi_factory import build_efi_pay_service
from src.integrations.policy.efi_pay_service import EfiPayService

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(efi_pay_service: Optional[EfiPayService] = None) -> FastAPI:
    """
    Build the API. The Efí service is created once here; configuration errors
    propagate so the server never starts half-configured.
    """
    app = FastAPI(
        title="Efí Pix Payments API",
        description="Immediate Pix charges with QR codes through Efí Pay",
        version="1.0.0",
    )

    app.state.efi_pay_service = efi_pay_service or build_efi_pay_service()

    # Register payments API router
    app.include_router(payments_api, prefix="/api/v1/payments", tags=["Payments"])

    @app.get("/health")
    async def health():
        client = app.state.efi_pay_service.client
        return {
            "status": "healthy",
            "efi_client": type(client).__name__,
            "sandbox": bool(getattr(client, "sandbox", True)),
        }

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the Efí client's connections on shutdown"""
        logger.info("Shutting down Efí Pix Payments API...")
        aclose = getattr(app.state.efi_pay_service.client, "aclose", None)
        if aclose is not None:
            await aclose()

    logger.info("Efí Pix Payments API ready")
    return app
