"""Mapping of domain errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from feedback.domain.error import (
    AuthorizationError,
    DuplicateReviewError,
    InvalidTransitionError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from feedback.domain.value import DenialReason


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    logfire.info("Validation failed", path=request.url.path, errors=exc.messages)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": [
                {"field": v.field, "message": v.message} for v in exc.violations
            ],
        },
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logfire.info("Malformed request", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


async def handle_authorization_error(
    request: Request, exc: AuthorizationError
) -> JSONResponse:
    logfire.warn("Request not authorized", path=request.url.path, reason=exc.reason.value)
    status_code = (
        status.HTTP_401_UNAUTHORIZED
        if exc.reason == DenialReason.UNAUTHENTICATED
        else status.HTTP_403_FORBIDDEN
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "reason": exc.reason.value},
    )


async def handle_not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc)},
    )


async def handle_invalid_transition_error(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    logfire.info(
        "Invalid visibility transition",
        path=request.url.path,
        status=exc.status.value,
        action=exc.action.value,
    )
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": str(exc),
            "status": exc.status.value,
            "action": exc.action.value,
        },
    )


async def handle_duplicate_review_error(
    request: Request, exc: DuplicateReviewError
) -> JSONResponse:
    logfire.warn("Duplicate review rejected", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc)},
    )


async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
    logfire.error("Storage unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Review storage is temporarily unavailable"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install handlers for every domain error raised by use cases."""
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(AuthorizationError, handle_authorization_error)
    app.add_exception_handler(NotFoundError, handle_not_found_error)
    app.add_exception_handler(InvalidTransitionError, handle_invalid_transition_error)
    app.add_exception_handler(DuplicateReviewError, handle_duplicate_review_error)
    app.add_exception_handler(StorageError, handle_storage_error)
