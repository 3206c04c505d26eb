"""
Exception handlers - map service errors to HTTP responses.
NotFound -> 404, Conflict -> 409, wrong input / request validation -> 400,
anything else -> 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import ServiceError, WrongInputError
from app.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _json(err: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=err.code, content=err.model_dump(mode="json"))


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("service error: %s", exc, exc_info=exc)
    else:
        logger.warning("service error: %s", exc)
    return _json(exc.to_response())


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = WrongInputError("invalid payload")
    for e in exc.errors():
        # loc is ("body", "email") / ("path", "user_id"); drop the location prefix
        loc = [str(part) for part in e.get("loc", ())[1:]]
        err.add_detail(".".join(loc) or "body", e.get("msg", "invalid value"))
    logger.warning("request validation failed: %s", err)
    return _json(err.to_response())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("internal server error", exc_info=exc)
    return _json(
        ErrorResponse(
            code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="unexpected internal server error",
        )
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
