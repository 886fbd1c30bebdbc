# newsbubble/exception_handling.py
"""
HTTP mapping for errors that escape the routers.

The recommendation engine absorbs reasoning-service failures itself (it falls
back to keyword sections), so what reaches this layer is auth and validation
errors, store failures, and bugs.
"""
from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .logging_setup import get_logger

logger = get_logger("newsbubble.exceptions")


async def http_exception_handler(request: Request, exc: HTTPException):
    # 401 without X-User-Id and 404 on someone else's click are routine
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "HTTP_EXCEPTION",
        extra={"handled": True, "path": str(request.url.path), "status_code": exc.status_code},
    )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "REQUEST_INVALID",
        extra={"handled": True, "path": str(request.url.path), "errors": len(exc.errors())},
    )
    return await request_validation_exception_handler(request, exc)


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    # Article store, click log or profile write failed; nothing was recommended
    logger.exception(
        "STORE_ERROR",
        extra={"handled": False, "path": str(request.url.path), "error": type(exc).__name__},
    )
    return JSONResponse({"detail": "Article store unavailable"}, status_code=503)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "UNHANDLED_EXCEPTION",
        extra={"handled": False, "path": str(request.url.path), "error": type(exc).__name__},
    )
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
