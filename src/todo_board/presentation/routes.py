from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.setup.api_config import get_api_settings
from src.todo_board.application.services import TodoService
from src.todo_board.domain.exceptions import StoreUnavailableError
from src.todo_board.domain.models import Todo, TodoPage
from src.todo_board.presentation.errors import error_response

router = APIRouter(prefix="/api/todos", tags=["todos"])
health_router = APIRouter(tags=["health"])

_ERROR_RESPONSE = {"content": {"application/json": {"example": {"error": "message"}}}}
_NOT_FOUND_RESPONSE = {
    "description": "No todo with the given id.",
    "content": {"application/json": {"example": {"message": "Todo not found"}}},
}


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human-readable acknowledgement.")


class HealthResponse(BaseModel):
    status: str
    version: str


def get_todo_service() -> TodoService:
    settings = get_api_settings()
    return TodoService(
        default_limit=settings.DEFAULT_PAGE_SIZE,
        max_limit=settings.MAX_PAGE_SIZE,
    )


@router.get(
    "",
    response_model=TodoPage,
    summary="List todos",
    description=(
        "Returns one page of todos, newest first. `search` filters by a "
        "case-insensitive substring of the title; `total` counts every match "
        "regardless of paging. `search` is matched verbatim, whitespace included. "
        "Non-numeric `page`/`limit` fall back to defaults."
    ),
    responses={500: {"description": "Store failure.", **_ERROR_RESPONSE}},
)
async def list_todos(
    page: str | None = Query(None, description="1-based page number"),
    limit: str | None = Query(None, description="Page size"),
    search: str | None = Query(None, description="Title substring"),
    service: TodoService = Depends(get_todo_service),
) -> TodoPage:
    return await service.list_todos(page, limit, search)


@router.post(
    "",
    response_model=Todo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a todo",
    responses={400: {"description": "Validation or store failure.", **_ERROR_RESPONSE}},
)
async def create_todo(
    payload: dict[str, Any] = Body(...),
    service: TodoService = Depends(get_todo_service),
) -> Todo | JSONResponse:
    try:
        return await service.create_todo(payload)
    except StoreUnavailableError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@router.put(
    "",
    response_model=Todo,
    summary="Update a todo",
    description="Merges the provided fields into the todo identified by `id`.",
    responses={
        400: {"description": "Validation or store failure.", **_ERROR_RESPONSE},
        404: _NOT_FOUND_RESPONSE,
    },
)
async def update_todo(
    payload: dict[str, Any] = Body(...),
    service: TodoService = Depends(get_todo_service),
) -> Todo | JSONResponse:
    try:
        return await service.update_todo(payload.get("id"), payload)
    except StoreUnavailableError as exc:
        return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@router.delete(
    "",
    response_model=MessageResponse,
    summary="Delete a todo",
    responses={
        400: {"description": "Missing id.", **_ERROR_RESPONSE},
        404: _NOT_FOUND_RESPONSE,
        500: {"description": "Store failure.", **_ERROR_RESPONSE},
    },
)
async def delete_todo(
    payload: dict[str, Any] = Body(...),
    service: TodoService = Depends(get_todo_service),
) -> MessageResponse:
    await service.delete_todo(payload.get("id"))
    return MessageResponse(message="Todo deleted successfully")


@health_router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=get_api_settings().APP_VERSION)
