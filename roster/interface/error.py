"""Interface layer error mapping.

Domain and adapter errors are turned into JSON responses carrying the
specific message, e.g. ``{"detail": "This invitation has expired"}``.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from roster.adapter.error import ProviderError
from roster.domain.error import (
    AlreadyUsedError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ExpiredError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)

# Looked up along the MRO of the raised error
ERROR_STATUS: dict[type[Exception], int] = {
    ValidationError: 422,  # Unprocessable content
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ExpiredError: status.HTTP_410_GONE,
    AlreadyUsedError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ProviderError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(error: Exception) -> int:
    """HTTP status for an error, defaulting to 500."""
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render a domain or provider error."""
    status_code = status_for(exc)
    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for the domain and provider error families."""
    app.add_exception_handler(DomainError, handle_error)
    app.add_exception_handler(ProviderError, handle_error)
