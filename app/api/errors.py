import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.services.error_codes import ErrorCode, message_for
from app.services.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def _detail(code: ErrorCode) -> dict[str, str]:
    return {"code": code.value, "message": message_for(code)}


def http_error_from_service(err: ServiceError) -> HTTPException:
    headers = None
    if isinstance(err, NotFoundError):
        status = 404
    elif isinstance(err, PermissionDeniedError):
        status = 403
    elif isinstance(err, AuthenticationError):
        status = 401
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(err, (ConflictError, ValidationError)):
        status = 400
    else:
        status = 500

    return HTTPException(
        status_code=status,
        detail={"code": err.code, "message": err.message},
        headers=headers,
    )


_EMPTY_ERROR_TYPES = {"missing", "string_too_short"}


def _code_for_validation(errors: list[dict]) -> ErrorCode:
    if any(err.get("type") in _EMPTY_ERROR_TYPES for err in errors):
        return ErrorCode.EMPTY_FIELDS
    if any(tuple(err.get("loc", ()))[-1:] == ("email",) for err in errors):
        return ErrorCode.INVALID_EMAIL
    return ErrorCode.INVALID_INPUT


async def _validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    code = _code_for_validation(errors)
    logger.info("request_validation_failed", path=request.url.path, code=code.value, errors=len(errors))
    return JSONResponse(status_code=400, content={"detail": _detail(code)})


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    # RequestIdMiddleware has already logged the traceback; clients only get the generic message
    return JSONResponse(status_code=500, content={"detail": _detail(ErrorCode.INTERNAL_ERROR)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
