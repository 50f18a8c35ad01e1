"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, status

from order_spend.api.analysis import router as analysis_router
from order_spend.api.models import LoginRequest, OtpRequest, SessionRequest
from order_spend.app_logging import configure_logging
from order_spend.containers import AppContainer
from order_spend.domain.orders import OrderRecord
from order_spend.domain.outcomes import ExtractionOutcome, LoginOutcome, OtpOutcome


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutting down; releasing live sessions")
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(analysis_router)

    @app.get("/health")
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok", "message": "Server is running"}

    @app.post("/api/login")
    async def login(payload: LoginRequest, request: Request) -> dict[str, object]:
        """Open a browser session and request an OTP for the mobile number."""
        mobile_number = payload.mobile_number.strip()
        if not mobile_number:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Mobile number is required",
            )
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.scraper_service.begin_login(
            uuid4().hex, mobile_number
        )
        return _login_payload(outcome)

    @app.post("/api/submit-otp")
    async def submit_otp(payload: OtpRequest, request: Request) -> dict[str, object]:
        """Submit the OTP for a session that is waiting for one."""
        if not payload.session_id or not payload.otp.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Session ID and OTP are required",
            )
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.scraper_service.submit_otp(
            payload.session_id, payload.otp.strip()
        )
        return _otp_payload(outcome)

    @app.post("/api/scrape-orders")
    async def scrape_orders(
        payload: SessionRequest, request: Request
    ) -> dict[str, object]:
        """Extract orders for a logged-in session and close it."""
        if not payload.session_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Session ID is required",
            )
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.scraper_service.extract_orders(
            payload.session_id
        )
        return _extraction_payload(outcome)

    @app.post("/api/cancel")
    async def cancel(payload: SessionRequest, request: Request) -> dict[str, bool]:
        """Close a session at any point before extraction finishes."""
        state_container: AppContainer = request.app.state.container
        outcome = await state_container.scraper_service.cancel(payload.session_id)
        return {"success": outcome.success}

    return app


def _login_payload(outcome: LoginOutcome) -> dict[str, object]:
    return {
        "success": outcome.success,
        "sessionId": outcome.session_id,
        "needsOtp": outcome.needs_otp,
        "message": outcome.message,
        "diagnosticLog": outcome.diagnostic_log,
    }


def _otp_payload(outcome: OtpOutcome) -> dict[str, object]:
    return {
        "success": outcome.success,
        "message": outcome.message,
        "diagnosticLog": outcome.diagnostic_log,
    }


def _extraction_payload(outcome: ExtractionOutcome) -> dict[str, object]:
    return {
        "success": outcome.success,
        "orders": [order_payload(order) for order in outcome.orders],
        "message": outcome.message,
        "diagnosticLog": outcome.diagnostic_log,
    }


def order_payload(order: OrderRecord) -> dict[str, object]:
    """Serialize an order record for JSON responses."""
    return {
        "date": order.date.isoformat(),
        "amount": float(order.amount),
        "restaurantName": order.restaurant_name,
    }
