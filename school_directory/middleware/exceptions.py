from typing import Any, Dict, Optional
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from school_directory.core.exceptions import SchoolDirectoryError
from school_directory.schemas.response import ErrorResponse, ErrorDetail
from datetime import datetime, timezone
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        timestamp=datetime.now(timezone.utc).isoformat(),
        path=str(request.url),
        request_id=_request_id(request)
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)

def validation_error_response(request: Request, errors: Dict[str, str]) -> JSONResponse:
    """Per-field rejection of a submitted school."""
    logger.info(f"[{_request_id(request)}] School rejected, invalid fields: {sorted(errors)}")
    return error_response(
        request, 400, "VALIDATION_ERROR", "Validation failed", details={"fields": errors}
    )

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[{_request_id(request)}] Request validation error: {errors}")
    return error_response(
        request, 422, "VALIDATION_ERROR", "Request validation failed",
        details={"validation_errors": errors}
    )

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"[{_request_id(request)}] HTTP {exc.status_code}: {exc.detail}")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(
        request, exc.status_code, _get_error_code(exc.status_code), message,
        headers=getattr(exc, "headers", None)
    )

async def school_directory_exception_handler(request: Request, exc: SchoolDirectoryError):
    request_id = _request_id(request)
    if exc.expose_message:
        logger.warning(f"[{request_id}] {exc.code}: {exc.message}")
        return error_response(request, exc.status_code, exc.code, exc.message, details=exc.details)

    logger.error(f"[{request_id}] {type(exc).__name__}: {exc.message}", exc_info=exc)
    details = {"retryable": True} if getattr(exc, "retryable", False) else None
    return error_response(request, exc.status_code, exc.code, "Internal server error", details=details)

async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"[{_request_id(request)}] Unhandled exception: {exc}", exc_info=exc)
    return error_response(
        request, 500, "INTERNAL_SERVER_ERROR", "An unexpected error occurred"
    )
