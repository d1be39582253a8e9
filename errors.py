"""
Error taxonomy for the storefront API.

Services raise these; the handlers registered by ``install_error_handlers``
turn them into ``{"error": message}`` JSON responses at the request boundary.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("quantum_build")


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    """A required field is missing or malformed."""
    status_code = 400


class AuthError(StoreError):
    status_code = 401


class NotFoundError(StoreError):
    status_code = 404


class ConflictError(StoreError):
    """The resource already exists (duplicate signup email)."""
    status_code = 409


class PersistenceError(StoreError):
    """A collection file could not be written."""
    status_code = 500


def _describe(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe(exc)})
