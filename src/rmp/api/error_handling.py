from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rmp.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from rmp.application.errors import (
    AuthenticationRequiredError,
    BadRequestError,
    ConflictError,
    EmailAlreadyExistsError,
    ForbiddenError,
    InternalError,
    InvalidCredentialsError,
    MealNameConflictError,
    NotFoundError,
    UnauthorizedError,
)


logger = logging.getLogger(__name__)


def _error_response(
    *,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    request_id = request_id or get_request_id()
    return JSONResponse(
        status_code=status_code,
        headers={REQUEST_ID_HEADER: request_id} if request_id else None,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "requestId": request_id,
        },
    )


def _exception_handler(status_code: int, code: str):
    async def handler(_: Request, exc: Exception) -> JSONResponse:
        details = getattr(exc, "details", None)
        return _error_response(
            status_code=status_code,
            code=code,
            message=str(exc),
            details=details if isinstance(details, dict) else None,
        )

    return handler


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    message = str(http_exc.detail) if http_exc.detail else "request failed"
    code = "HTTP_ERROR"
    if http_exc.status_code == 404:
        code = "NOT_FOUND"
    elif http_exc.status_code == 400:
        code = "BAD_REQUEST"
    elif http_exc.status_code == 401:
        code = "UNAUTHORIZED"
    elif http_exc.status_code == 405:
        code = "METHOD_NOT_ALLOWED"
    return _error_response(
        status_code=http_exc.status_code,
        code=code,
        message=message,
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    return _error_response(
        status_code=400,
        code="INVALID_REQUEST",
        message="request validation failed",
        details={"errors": jsonable_encoder(validation_exc.errors())},
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the request id middleware, after its context has been reset.
    request_id = getattr(request.state, "request_id", None)
    logger.error("unhandled_exception", exc_info=exc)
    return _error_response(
        status_code=500,
        code="INTERNAL_ERROR",
        message="internal server error",
        request_id=request_id,
    )


def register_exception_handlers(app: FastAPI) -> None:
    # Handlers resolve along the exception MRO, so subclasses keep their own code.
    mappings: list[tuple[type[Exception], int, str]] = [
        (BadRequestError, 400, "BAD_REQUEST"),
        (UnauthorizedError, 401, "UNAUTHORIZED"),
        (InvalidCredentialsError, 401, "INVALID_CREDENTIALS"),
        (AuthenticationRequiredError, 401, "AUTHENTICATION_REQUIRED"),
        (ForbiddenError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
        (EmailAlreadyExistsError, 409, "EMAIL_ALREADY_EXISTS"),
        (MealNameConflictError, 409, "MEAL_NAME_CONFLICT"),
        (InternalError, 500, "INTERNAL_ERROR"),
    ]

    for exc_cls, status_code, code in mappings:
        app.add_exception_handler(exc_cls, _exception_handler(status_code, code))

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
