"""Job tracker API application.

``create_app`` wires logging, middleware, the error envelope handlers and
the v1 routers. Every failure, whatever raised it, leaves as
``{"error": {"code", "message", "details"}}``.
"""

import logging

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from job_tracker.api.v1.router import router as v1_router
from job_tracker.core.config import settings
from job_tracker.core.errors import (
    APIError,
    BackendError,
    InternalError,
    ValidationError,
)
from job_tracker.core.rate_limiting import limiter, rate_limit_exceeded_handler
from job_tracker.core.responses import ErrorDetail, ErrorResponse

logger = structlog.get_logger()


def configure_logging(level_name: str) -> None:
    """Apply LOG_LEVEL to both stdlib logging and structlog."""
    level = logging.getLevelNamesMapping().get(level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


# Sent on every response. The API never serves HTML, so nothing may be
# framed, sniffed or loaded cross-origin.
_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Cross-Origin-Resource-Policy": "same-origin",
}

_HSTS_VALUE = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach hardening headers to every response.

    /api/ responses also get ``Cache-Control: no-store`` since they carry
    per-user data. HSTS is production-only (TLS ends at the proxy).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        response.headers.update(_SECURITY_HEADERS)
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store, max-age=0"
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = _HSTS_VALUE

        return response


def _error_response(exc: APIError) -> JSONResponse:
    """Render an APIError as the {"error": {...}} envelope."""
    body = ErrorResponse(
        error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details)
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    return _error_response(exc)


def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body, path and query validation failures as 400, not 422.

    Each pydantic error becomes one ``{"loc", "msg", "type"}`` detail.
    """
    details = [
        {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
        for error in exc.errors()
    ]
    return _error_response(ValidationError("Request validation failed", details))


def backend_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Report a database failure with the driver's own message.

    Args:
        request: The failing request (path is logged).
        exc: Any SQLAlchemy error; DBAPI errors expose the driver message.

    Returns:
        500 BACKEND_ERROR envelope.
    """
    message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
    logger.error("Backend error", path=str(request.url.path), error=message)
    return _error_response(BackendError(message))


def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log the traceback, answer a generic 500."""
    logger.exception("Unhandled exception", exc_info=exc, path=str(request.url.path))
    return _error_response(InternalError())


def create_app() -> FastAPI:
    """Build the application.

    Tests call this for an isolated app; uvicorn uses the module-level one.
    """
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Job Tracker API",
        version="1.0.0",
        description="Personal job application tracker",
    )

    app.add_middleware(SecurityHeadersMiddleware)
    # Added last so it runs first: preflight requests never reach the app.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization", "X-Request-ID"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(SQLAlchemyError, backend_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    app.state.limiter = limiter

    app.include_router(v1_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Liveness check; touches neither the database nor auth."""
        return {"status": "healthy"}

    return app


# Used by uvicorn: uvicorn job_tracker.main:app
app = create_app()
