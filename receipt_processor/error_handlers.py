"""
Exception handlers for the receipts API.
An undecodable or structurally invalid receipt body is a client error (400),
not FastAPI's default 422.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from .utils.logging import logger


def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "detail": "The receipt is invalid.",
            "errors": jsonable_encoder(exc.errors()),
        },
    )
