import logging
from typing import Optional, Dict, Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# 400 messages used when a body cannot be parsed at all
VALIDATION_MESSAGES = {
    "/register": "Missing required fields",
    "/login": "Phone number is required",
}


class AppError(Exception):
    """Base class for errors that resolve to exactly one JSON error response."""
    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    status_code = 400
    default_message = "Already registered"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class MethodError(AppError):
    status_code = 405
    default_message = "Method not allowed"


class StoreError(AppError):
    """A credential store read, write or transaction failed."""
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.default_message}
        if self.details:
            body["details"] = self.details
        return body


def create_error_response(error: AppError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}: {exc.message} ({exc.details})")
    return create_error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework-raised HTTP errors in the {"error": ...} shape"""
    if exc.status_code == 405:
        return create_error_response(MethodError())
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Rejected malformed body on {request.url.path}: {exc.errors()}")
    message = VALIDATION_MESSAGES.get(request.url.path)
    return create_error_response(ValidationError(message))
