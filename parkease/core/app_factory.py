from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.auth_service import AuthService
from ..application.services.credential_service import CredentialVerifier
from ..application.services.session_service import SessionService
from ..application.services.token_service import TokenService
from ..domain.errors import ParkEaseError
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import bookings as bookings_router
from ..presentation.api.routers import content as content_router
from ..presentation.api.routers import locations as locations_router
from ..presentation.api.routers import payment_methods as payment_methods_router
from ..presentation.api.routers import user_router
from ..presentation.api.routers import vehicles as vehicles_router
from ..services.booking_service import BookingService
from ..services.content_service import ContentService
from ..services.email_service import EmailService
from ..services.location_service import LocationService
from ..services.payment_method_service import PaymentMethodService
from ..services.user_service import UserService
from ..services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)


def create_application(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(title="ParkEase API", lifespan=_create_lifespan(settings))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ParkEaseError, _handle_parkease_error)

    app.include_router(auth_router.router)
    app.include_router(user_router.router)
    app.include_router(vehicles_router.router)
    app.include_router(payment_methods_router.router)
    app.include_router(bookings_router.router)
    app.include_router(locations_router.router)
    app.include_router(content_router.router)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True}

    return app


async def _handle_parkease_error(request: Request, exc: ParkEaseError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.default_code},
        headers=headers,
    )


def _create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = SQLitePersistence(settings.database_path)
        email_service = EmailService(
            base_url=settings.frontend_base_url,
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_username,
            smtp_password=settings.smtp_password,
            from_email=settings.smtp_from_email,
        )
        credential_verifier = CredentialVerifier(persistence)
        token_service = TokenService(persistence, persistence)
        session_service = SessionService(
            secret_key=settings.session_token_secret,
            token_exp_minutes=settings.session_token_exp_minutes,
        )
        auth_service = AuthService(persistence, credential_verifier, token_service, email_service)
        auth_service.ensure_default_admin(settings.admin_default_email, settings.admin_default_password)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            email_service=email_service,
            credential_verifier=credential_verifier,
            token_service=token_service,
            session_service=session_service,
            auth_service=auth_service,
            user_service=UserService(persistence),
            vehicle_service=VehicleService(persistence),
            payment_method_service=PaymentMethodService(persistence),
            booking_service=BookingService(persistence),
            location_service=LocationService(persistence),
            content_service=ContentService(persistence),
        )

        app.state.container = container  # type: ignore[attr-defined]
        logger.info("ParkEase API started with database %s", settings.database_path)

        try:
            yield
        finally:
            persistence.close()

    return lifespan
