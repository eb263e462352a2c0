"""Error boundary: maps raised exceptions to JSON error responses."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pantry_shopping.domain.errors import (
    BusinessRuleViolation,
    DomainError,
    NotFoundError,
    ValidationError,
)
from pantry_shopping.services.queries import PYDANTIC_RULES

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"


class UnauthorizedError(DomainError):
    """Raised when a request carries no user identity."""

    code = "UNAUTHORIZED"


def error_body(
    code: str,
    message: str,
    path: str,
    details: dict[str, object] | None = None,
) -> dict[str, object]:
    """Build the JSON error envelope."""
    error: dict[str, object] = {
        "code": code,
        "message": message,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "path": path,
    }
    if details:
        error["details"] = details
    return {"error": error}


def status_for(exc: DomainError) -> int:
    """Return the HTTP status for a domain error."""
    if isinstance(exc, UnauthorizedError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, BusinessRuleViolation):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code == status.HTTP_409_CONFLICT:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content=error_body(exc.code, exc.message, request.url.path, exc.details),
    )


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in {"body", "query"}]
    field = ".".join(loc) or "request"
    rule = PYDANTIC_RULES.get(str(first.get("type", "")), "invalid_format")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            ValidationError.code,
            f"{field}: {first.get('msg', 'invalid request')}",
            request.url.path,
            {"field": field, "rule": rule},
        ),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            INTERNAL_ERROR, "An unexpected error occurred", request.url.path
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error boundary on ``app``."""
    app.add_exception_handler(DomainError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
