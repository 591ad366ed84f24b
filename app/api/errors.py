import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Client error reported as 400 {"error": ..., "received": ...}."""

    def __init__(self, error: str, received: Any = None):
        super().__init__(error)
        self.error = error
        self.received = received


async def _bad_request(request: Request, exc: BadRequest) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": exc.error, "received": jsonable_encoder(exc.received)},
    )


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed JSON, or a body that is not a JSON object
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "received": jsonable_encoder(exc.errors())},
    )


async def log_and_catch(request: Request, call_next):
    """Log each request and turn any uncaught handler error into a 500."""
    logger.info("%s %s", request.method, request.url.path)
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Error handling %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BadRequest, _bad_request)
    app.add_exception_handler(RequestValidationError, _invalid_body)
    app.middleware("http")(log_and_catch)
