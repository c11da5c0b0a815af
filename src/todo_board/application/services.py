import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import inject
from pydantic import ValidationError

from src.todo_board.domain.exceptions import TodoNotFoundError, TodoValidationError
from src.todo_board.domain.models import (
    Todo,
    TodoChanges,
    TodoDraft,
    TodoPage,
    TodoQuery,
    describe_validation_error,
)
from src.todo_board.domain.repositories import TodoRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _require_id(todo_id: Any) -> str:
    if isinstance(todo_id, int) and not isinstance(todo_id, bool):
        todo_id = str(todo_id)
    if not isinstance(todo_id, str) or not todo_id.strip():
        raise TodoValidationError("Todo id is required")
    return todo_id.strip()


class TodoService:
    """Validates todo requests and forwards them to the repository."""

    def __init__(
        self,
        repository: TodoRepository | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
        default_limit: int = 6,
        max_limit: int = 100,
    ) -> None:
        self._repository = repository or cast(TodoRepository, inject.instance(TodoRepository))
        self._clock = clock
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def list_todos(
        self,
        page: str | int | None = None,
        limit: str | int | None = None,
        search: str | None = None,
    ) -> TodoPage:
        """Return one page of todos plus the total matching ``search``."""
        query = TodoQuery.from_params(
            page,
            limit,
            search,
            default_limit=self._default_limit,
            max_limit=self._max_limit,
        )
        total = await self._repository.count(query.search)
        if query.offset >= total:
            # Past the last page; the offset may not even fit a BIGINT.
            tasks: list[Todo] = []
        else:
            tasks = await self._repository.find(
                query.search, offset=query.offset, limit=query.limit
            )
        logger.info(
            "Listed todos",
            extra={"page": query.page, "limit": query.limit, "search": query.search, "total": total},
        )
        return TodoPage(tasks=tasks, total=total, page=query.page, limit=query.limit)

    async def create_todo(self, payload: Mapping[str, Any]) -> Todo:
        """Validate ``payload``, assign id and timestamps, and persist it."""
        try:
            draft = TodoDraft.model_validate(payload)
        except ValidationError as exc:
            message = describe_validation_error(exc)
            logger.warning("Rejected todo creation", extra={"reason": message})
            raise TodoValidationError(message) from exc

        now = self._clock()
        todo = Todo(
            id=uuid4().hex,
            title=draft.title,
            description=draft.description,
            status=draft.status,
            created_at=now,
            updated_at=now,
        )
        stored = await self._repository.add(todo)
        logger.info("Created todo", extra={"todo_id": stored.id})
        return stored

    async def update_todo(self, todo_id: Any, payload: Mapping[str, Any]) -> Todo:
        """
        Merge the fields present in ``payload`` into an existing todo.

        ``id`` and timestamps in the payload are ignored; ``updated_at`` is
        refreshed from the service clock and always moves forward.
        """
        todo_id = _require_id(todo_id)
        try:
            changes = TodoChanges.model_validate(payload)
        except ValidationError as exc:
            message = describe_validation_error(exc)
            logger.warning("Rejected todo update", extra={"todo_id": todo_id, "reason": message})
            raise TodoValidationError(message) from exc

        current = await self._repository.get(todo_id)
        if current is None:
            logger.warning("Todo not found for update", extra={"todo_id": todo_id})
            raise TodoNotFoundError(todo_id)

        updated = changes.apply(current, updated_at=self._next_updated_at(current))
        stored = await self._repository.save(updated)
        if stored is None:
            # Deleted between the read and the write.
            raise TodoNotFoundError(todo_id)
        logger.info(
            "Updated todo",
            extra={"todo_id": todo_id, "fields": sorted(changes.model_fields_set)},
        )
        return stored

    def _next_updated_at(self, current: Todo) -> datetime:
        now = self._clock()
        if now <= current.updated_at:
            return current.updated_at + timedelta(microseconds=1)
        return now

    async def delete_todo(self, todo_id: Any) -> None:
        """Hard-delete a todo. Raises ``TodoNotFoundError`` when it is absent."""
        todo_id = _require_id(todo_id)
        if not await self._repository.remove(todo_id):
            logger.warning("Todo not found for delete", extra={"todo_id": todo_id})
            raise TodoNotFoundError(todo_id)
        logger.info("Deleted todo", extra={"todo_id": todo_id})
