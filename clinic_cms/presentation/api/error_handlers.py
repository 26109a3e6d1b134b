"""Exception handlers — turn domain errors into the ``{success, error}`` envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clinic_cms.application.schemas import ApiEnvelope
from clinic_cms.domain.exceptions import (
    ContentPersistenceError,
    ContentValidationError,
    DuplicateEntryError,
    EntityNotFoundError,
    MediaHostError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiEnvelope(success=False, error=error).model_dump(exclude_none=True),
    )


async def content_validation_handler(request: Request, exc: ContentValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0]["msg"].removeprefix("Value error, ") if errors else "Invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


async def duplicate_entry_handler(request: Request, exc: DuplicateEntryError) -> JSONResponse:
    return error_response(status.HTTP_409_CONFLICT, exc.message)


async def media_host_handler(request: Request, exc: MediaHostError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_502_BAD_GATEWAY, f"Media upload failed: {exc.message}")


async def persistence_handler(request: Request, exc: ContentPersistenceError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Unknown error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ContentValidationError, content_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(EntityNotFoundError, not_found_handler)
    app.add_exception_handler(DuplicateEntryError, duplicate_entry_handler)
    app.add_exception_handler(MediaHostError, media_host_handler)
    app.add_exception_handler(ContentPersistenceError, persistence_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
