"""Error Handlers — global exception handlers that keep every body an envelope.

Invariants:
    - MapperError → {status, msg} with the error's http_status
    - RequestValidationError → 400 envelope
    - Exception (catch-all) → 500 envelope carrying the raw message
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from psql_mapper.core.errors import MapperError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_mapper_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_mapper_error_handler(app: FastAPI) -> None:

    @app.exception_handler(MapperError)
    async def mapper_error_handler(request: Request, exc: MapperError):
        """Handle mapper errors raised outside the dispatcher."""
        logger.error(
            f"MapperError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_envelope(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": status.HTTP_400_BAD_REQUEST, "msg": "invalid request"},
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — surfaces the raw message as 500."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"method": request.method, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "msg": str(exc) or type(exc).__name__,
            },
        )
