# app/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.errors import AppError
from app.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_KINDS = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
}


def error_response(status_code: int, kind: str, message: str, **extra) -> JSONResponse:
    body = {"kind": kind, "message": message}
    body.update(extra)
    return JSONResponse(status_code=status_code, content={"error": body})


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.kind, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    message = "; ".join(f"{'.'.join(d['loc'])}: {d['msg']}" for d in details) or "Invalid request"
    return error_response(422, "validation_error", message, details=details)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    kind = _HTTP_KINDS.get(exc.status_code, "internal_error" if exc.status_code >= 500 else "error")
    return error_response(exc.status_code, kind, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    #stack trace tylko w logach, klient dostaje ogolny komunikat
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, "internal_error", "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
