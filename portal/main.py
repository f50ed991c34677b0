import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.api.routes import admin, applications, auth, health, superadmin
from portal.core.config import FRONTEND_URL, LOG_LEVEL
from portal.core.errors import (
    AuthMethodMismatchError,
    ConflictError,
    NotFoundError,
    PortalError,
    ValidationFailed,
)
from portal.core.identity import IdentityConfig, init_identity, load_identity_config
from portal.core.logging_config import setup_logging
from portal.db.init_db import init_db
from portal.services.refresh_signal import RefreshSignal

logger = logging.getLogger(__name__)


# ============================================
# ✅ ERROR RESPONSES: {"error": message}
# ============================================

def _error(status_code: int, message: str, **extra) -> JSONResponse:
    body = {"error": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
    return _error(422, "invalid request", details=details)


async def portal_error_handler(request: Request, exc: PortalError):
    if isinstance(exc, NotFoundError):
        return _error(404, str(exc))
    if isinstance(exc, AuthMethodMismatchError):
        return _error(409, exc.user_message)
    if isinstance(exc, ConflictError):
        return _error(409, str(exc))
    if isinstance(exc, ValidationFailed):
        if exc.missing:
            return _error(400, str(exc), missing=exc.missing)
        return _error(400, str(exc))

    logger.error(f"Unhandled portal error on {request.url.path}: {exc}", exc_info=True)
    return _error(500, "internal server error")


def create_app(identity_settings: Optional[IdentityConfig] = None) -> FastAPI:
    """
    Build the API.

    The identity provider is checked during startup; a bad configuration
    aborts the boot with ``IdentityInitError``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(LOG_LEVEL)
        app.state.identity = init_identity(identity_settings or load_identity_config())
        init_db()
        logger.info("Hackathon portal API started")
        yield
        logger.info("Hackathon portal API stopped")

    app = FastAPI(title="Hackathon Portal API", lifespan=lifespan)

    # One signal per app; handed to routes through get_refresh_signal
    app.state.refresh_signal = RefreshSignal()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH"],
        allow_headers=["Authorization", "Content-Type"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PortalError, portal_error_handler)

    # ============================================
    # ✅ REGISTER ALL ROUTERS
    # ============================================

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(applications.router)
    app.include_router(admin.router)
    app.include_router(superadmin.router)

    @app.get("/")
    def root():
        return {"status": "Hackathon portal API running"}

    return app


app = create_app()
