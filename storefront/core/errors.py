from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

_LOG = logging.getLogger("storefront.errors")


class ValidationError(Exception):
    """Malformed or out-of-range client input."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(Exception):
    """A single-record lookup found nothing."""

    def __init__(self, message: str, *, entity: str | None = None, entity_id: Any = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.entity_id = entity_id


def _error_body(message: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"message": message}
    body.update({key: value for key, value in extra.items() if value is not None})
    return body


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error_handler(request: Request, exc: ValidationError):
        _LOG.info("validation_error path=%s field=%s message=%s", request.url.path, exc.field, exc.message)
        return JSONResponse(status_code=400, content=_error_body(exc.message, field=exc.field))

    @app.exception_handler(NotFoundError)
    async def _not_found_handler(request: Request, exc: NotFoundError):
        _LOG.info("not_found path=%s entity=%s id=%s", request.url.path, exc.entity, exc.entity_id)
        return JSONResponse(status_code=404, content=_error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        # Malformed request bodies and path params are client errors, not 422s.
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request", errors=jsonable_encoder(exc.errors())),
        )
