from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """
    Base class for failures that map onto a JSON error response.

    Subclasses fix the HTTP status and the default client-facing message.
    The optional ``error`` payload is echoed to the client only for 4xx errors.
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Any = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message
        self.error = error


class InvalidInput(ServiceError):
    status_code = 400
    message = "invalid input"


class AuthError(ServiceError):
    status_code = 401
    message = "invalid credentials"


class InvalidToken(AuthError):
    message = "invalid token"


class NotFound(ServiceError):
    status_code = 404
    message = "Not found"


class InternalError(ServiceError):
    """Any store or hashing failure. Rendered as a bare 500."""


class StoreError(InternalError):
    pass


class HashingError(InternalError):
    pass


# PUBLIC_INTERFACE
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """
    Render a ServiceError as ``{"message": ...}``, adding ``error`` for client errors.
    """
    if isinstance(exc, InternalError):
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc
        )
        return JSONResponse(status_code=500, content={"message": InternalError.message})

    content: dict = {"message": exc.message}
    if exc.error is not None:
        content["error"] = jsonable_encoder(exc.error)
    return JSONResponse(status_code=exc.status_code, content=content)


# PUBLIC_INTERFACE
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return request schema failures in the same shape as signup validation errors.

    Response format:
        {
            "message": "invalid input",
            "error": [... pydantic error details ...]
        }
    """
    return JSONResponse(
        status_code=400,
        content={"message": "invalid input", "error": jsonable_encoder(exc.errors())},
    )


# PUBLIC_INTERFACE
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: anything that escaped as a non-ServiceError still
    gets the uniform JSON 500 body.
    """
    logger.error("%s %s crashed", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": InternalError.message})
