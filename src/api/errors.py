"""
Exception handlers - uniform error bodies.

Every error response carries success=false next to FastAPI's usual
detail field. StoreFailure and unexpected exceptions become a generic 500;
their cause is only logged.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import StoreFailure

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Internal server error. Please try again later."


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "detail": jsonable_encoder(exc.errors())},
    )


async def store_failure_handler(request: Request, exc: StoreFailure) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "detail": GENERIC_FAILURE},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "detail": GENERIC_FAILURE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on an application (also used by test apps)."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreFailure, store_failure_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
