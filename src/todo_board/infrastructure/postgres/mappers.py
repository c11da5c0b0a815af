from __future__ import annotations

from datetime import UTC, datetime

from src.todo_board.domain.models.todo import Todo
from src.todo_board.infrastructure.postgres.orm import TodoRow


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset; Postgres returns aware values.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class OrmMapper:
    @staticmethod
    def to_todo_row(todo: Todo) -> TodoRow:
        return TodoRow(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            status=todo.status,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )

    @staticmethod
    def merge_into_row(row: TodoRow, todo: Todo) -> None:
        """Copy mutable fields onto ``row``; id and created_at are never touched."""
        row.title = todo.title
        row.description = todo.description
        row.status = todo.status
        row.updated_at = todo.updated_at

    @staticmethod
    def to_domain_todo(row: TodoRow) -> Todo:
        return Todo(
            id=row.id,
            title=row.title,
            description=row.description or "",
            status=row.status,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )
