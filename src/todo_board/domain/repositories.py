from __future__ import annotations

from typing import Protocol

from src.todo_board.domain.models.todo import Todo


class TodoRepository(Protocol):
    """Repository contract for the todo document collection."""

    async def add(self, todo: Todo) -> Todo:
        """Persist a new todo and return it as stored."""

    async def get(self, todo_id: str) -> Todo | None:
        """Fetch a todo by id, or ``None`` when it does not exist."""

    async def find(self, search: str, *, offset: int, limit: int) -> list[Todo]:
        """
        Return todos whose title contains ``search`` (case-insensitive),
        newest first, windowed by ``offset``/``limit``.
        """

    async def count(self, search: str) -> int:
        """Count todos whose title contains ``search`` (all when empty)."""

    async def save(self, todo: Todo) -> Todo | None:
        """Overwrite the stored fields of an existing todo; ``None`` if it is gone."""

    async def remove(self, todo_id: str) -> bool:
        """Delete a todo; return ``False`` when nothing was deleted."""
