"""
Domain exceptions for the inventory core

Services raise these; the API layer turns them into JSON error responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Base exception for all inventory errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Raised when a required caller-supplied field is missing or invalid"""
    status_code = 400


class NotFoundError(InventoryError):
    """Raised when a record looked up by id does not exist"""
    status_code = 404


class StoreError(InventoryError):
    """Raised when the row store cannot complete a read or write"""
    status_code = 503


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, inventory_error_handler)
