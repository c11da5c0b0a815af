from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.setup.client_config import get_client_settings
from src.todo_board.domain.models import Todo, TodoPage

logger = logging.getLogger(__name__)

TODOS_PATH = "/api/todos"

_M = TypeVar("_M", bound=BaseModel)


class TodoApiError(Exception):
    """Raised for non-2xx or unusable responses and transport failures (``status_code`` 0)."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class TodoNotFoundApiError(TodoApiError):
    """The server answered 404 for the targeted todo."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("error") or body.get("message") or body)
    return str(body)


def _parse(model: type[_M], body: Any) -> _M:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        logger.warning("Todo API returned an unexpected body", extra={"model": model.__name__})
        raise TodoApiError(0, f"Unexpected {model.__name__} response from todo API") from exc


class TodoApiClient:
    """Thin async wrapper over the ``/api/todos`` HTTP surface."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._owns_client = client is None
        if client is None:
            settings = get_client_settings()
            client = httpx.AsyncClient(
                base_url=base_url or settings.API_BASE_URL,
                timeout=timeout if timeout is not None else settings.TIMEOUT_SECONDS,
            )
        self._client = client

    async def __aenter__(self) -> TodoApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def list_todos(self, page: int = 1, limit: int = 6, search: str = "") -> TodoPage:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        data = await self._request("GET", params=params)
        return _parse(TodoPage, data)

    async def create_todo(self, data: Mapping[str, Any]) -> Todo:
        body = await self._request("POST", json=dict(data))
        return _parse(Todo, body)

    async def update_todo(self, todo_id: str, data: Mapping[str, Any]) -> Todo:
        body = await self._request("PUT", json={**data, "id": todo_id})
        return _parse(Todo, body)

    async def delete_todo(self, todo_id: str) -> str:
        body = await self._request("DELETE", json={"id": todo_id})
        return str(body.get("message", "")) if isinstance(body, dict) else ""

    async def _request(
        self,
        method: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        try:
            response = await self._client.request(method, TODOS_PATH, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("Todo API unreachable", extra={"method": method, "error": str(exc)})
            raise TodoApiError(0, str(exc) or exc.__class__.__name__) from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                logger.warning(
                    "Todo API returned a non-JSON body",
                    extra={"method": method, "status_code": response.status_code},
                )
                raise TodoApiError(response.status_code, "Malformed response from todo API") from exc

        message = _error_message(response)
        logger.info(
            "Todo API call failed",
            extra={"method": method, "status_code": response.status_code, "reason": message},
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise TodoNotFoundApiError(response.status_code, message)
        raise TodoApiError(response.status_code, message)
