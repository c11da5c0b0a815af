from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from src.todo_board.domain.exceptions import StoreUnavailableError
from src.todo_board.domain.models.todo import Todo
from src.todo_board.domain.repositories import TodoRepository
from src.todo_board.infrastructure.postgres.mappers import OrmMapper
from src.todo_board.infrastructure.postgres.orm import PostgresOrm, TodoRow

logger = logging.getLogger(__name__)

_S = TypeVar("_S", bound=Select)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _filter_by_title(statement: _S, search: str) -> _S:
    if not search:
        return statement
    pattern = f"%{_escape_like(search)}%"
    return statement.where(TodoRow.title.ilike(pattern, escape="\\"))


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("Todo store operation failed", extra={"operation": operation})
        raise StoreUnavailableError(f"Todo store failed during {operation}") from exc


class PostgresTodoRepository(TodoRepository):
    """Postgres-backed todo storage using SQLAlchemy async sessions."""

    def __init__(self, orm: PostgresOrm) -> None:
        self._orm = orm

    async def add(self, todo: Todo) -> Todo:
        """Insert a new row for ``todo``."""
        row = OrmMapper.to_todo_row(todo)
        with _store_errors("add"):
            async with self._orm.session_factory() as session:
                async with session.begin():
                    session.add(row)
        return OrmMapper.to_domain_todo(row)

    async def get(self, todo_id: str) -> Todo | None:
        with _store_errors("get"):
            async with self._orm.session_factory() as session:
                row = await session.get(TodoRow, todo_id)
        return OrmMapper.to_domain_todo(row) if row is not None else None

    async def find(self, search: str, *, offset: int, limit: int) -> list[Todo]:
        """Title substring search, newest first; ties broken by id."""
        statement = (
            _filter_by_title(select(TodoRow), search)
            .order_by(TodoRow.created_at.desc(), TodoRow.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with _store_errors("find"):
            async with self._orm.session_factory() as session:
                result = await session.execute(statement)
                rows = result.scalars().all()
        return [OrmMapper.to_domain_todo(row) for row in rows]

    async def count(self, search: str) -> int:
        statement = _filter_by_title(select(func.count()).select_from(TodoRow), search)
        with _store_errors("count"):
            async with self._orm.session_factory() as session:
                total = await session.scalar(statement)
        return int(total or 0)

    async def save(self, todo: Todo) -> Todo | None:
        """Write the mutable fields of ``todo`` over the stored row."""
        with _store_errors("save"):
            async with self._orm.session_factory() as session:
                async with session.begin():
                    row = await session.get(TodoRow, todo.id)
                    if row is None:
                        return None
                    OrmMapper.merge_into_row(row, todo)
        return OrmMapper.to_domain_todo(row)

    async def remove(self, todo_id: str) -> bool:
        with _store_errors("remove"):
            async with self._orm.session_factory() as session:
                async with session.begin():
                    result = await session.execute(delete(TodoRow).where(TodoRow.id == todo_id))
        return bool(result.rowcount)
