from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.todo_board.domain.exceptions import (
    StoreUnavailableError,
    TodoNotFoundError,
    TodoValidationError,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Todo not found"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _describe_request_error(exc: RequestValidationError) -> str:
    messages: list[str] = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            messages.append("Request body is not valid JSON")
            continue
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid request")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


async def _not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})


async def _validation_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(400, str(exc))


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = _describe_request_error(exc)
    logger.warning(
        "Rejected malformed request",
        extra={"path": request.url.path, "method": request.method, "reason": message},
    )
    return error_response(400, message)


async def _store_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(500, str(exc))


async def _unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while serving request",
        extra={"path": request.url.path, "method": request.method},
    )
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Convert domain faults into ``{error}`` / ``{message}`` JSON responses."""
    app.add_exception_handler(TodoNotFoundError, _not_found_handler)
    app.add_exception_handler(TodoValidationError, _validation_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StoreUnavailableError, _store_handler)
    app.add_exception_handler(Exception, _unhandled_handler)
