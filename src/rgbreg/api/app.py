"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rgbreg import __version__
from rgbreg.config import Settings, get_settings
from rgbreg.registry.contracts import ErrorResponse
from rgbreg.registry.errors import RegistrationError, RegistrationValidationError
from rgbreg.registry.service import RegistrationService
from rgbreg.registry.store import RegistrationStore
from rgbreg.registry.validation import (
    SignatureVerifier,
    ValidationReason,
    ValidationResult,
    validate_payload,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    store: RegistrationStore = app.state.store
    # Startup
    await store.init()
    yield
    # Shutdown
    await store.close()


async def registration_error_handler(request: Request, exc: RegistrationError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, reason=exc.reason)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


async def request_parsing_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report an unparseable submission by the first rule it breaks."""
    service = request.app.state.registration_service
    result = validate_payload(exc.body, service.verifier)
    if result.is_valid:
        result = ValidationResult.invalid(ValidationReason.MISSING_FIELDS)
    logger.info("Registration rejected while parsing body: %s", result.reason.value)
    return await registration_error_handler(request, RegistrationValidationError.from_result(result))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    body = ErrorResponse(error="Internal server error", reason="internal_error")
    return JSONResponse(status_code=500, content=body.model_dump())


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[RegistrationStore] = None,
    verifier: Optional[SignatureVerifier] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use, defaults to get_settings()
        store: Store shared by all requests; built from settings.database_url if omitted
        verifier: Signature capability, defaults to the length heuristic
    """
    settings = settings or get_settings()
    if store is None:
        settings.ensure_data_dir()
        store = RegistrationStore(
            settings.database_url,
            echo=settings.debug and not settings.is_production,
        )

    app = FastAPI(
        title="rgbreg API",
        description="Registration intake for EVM to Taproot address bindings",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.registration_service = RegistrationService(
        store,
        verifier=verifier,
        conflict_status_code=settings.conflict_status_code,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RegistrationError, registration_error_handler)
    app.add_exception_handler(RequestValidationError, request_parsing_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register routes
    from rgbreg.api.routes import health, registrations

    app.include_router(health.router, tags=["Health"])
    app.include_router(registrations.router, tags=["Registrations"])

    return app
