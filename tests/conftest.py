from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.todo_board.application.services import TodoService
from src.todo_board.domain.models import Todo
from src.todo_board.domain.repositories import TodoRepository
from src.todo_board.presentation.main import create_app
from src.todo_board.presentation.routes import get_todo_service


class InMemoryTodoRepository(TodoRepository):
    """Dictionary-backed stand-in for the Postgres repository."""

    def __init__(self) -> None:
        self.todos: dict[str, Todo] = {}
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _matching(self, search: str) -> list[Todo]:
        needle = search.lower()
        return [todo for todo in self.todos.values() if needle in todo.title.lower()]

    async def add(self, todo: Todo) -> Todo:
        self._check()
        self.todos[todo.id] = todo
        return todo

    async def get(self, todo_id: str) -> Todo | None:
        self._check()
        return self.todos.get(todo_id)

    async def find(self, search: str, *, offset: int, limit: int) -> list[Todo]:
        self._check()
        ordered = sorted(
            self._matching(search),
            key=lambda todo: (todo.created_at, todo.id),
            reverse=True,
        )
        return ordered[offset : offset + limit]

    async def count(self, search: str) -> int:
        self._check()
        return len(self._matching(search))

    async def save(self, todo: Todo) -> Todo | None:
        self._check()
        if todo.id not in self.todos:
            return None
        self.todos[todo.id] = todo
        return todo

    async def remove(self, todo_id: str) -> bool:
        self._check()
        return self.todos.pop(todo_id, None) is not None


class FakeClock:
    """Returns strictly increasing UTC timestamps, one second apart."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def repository() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(repository: InMemoryTodoRepository, clock: FakeClock) -> TodoService:
    return TodoService(repository, clock=clock)


@pytest.fixture
def app(repository: InMemoryTodoRepository, clock: FakeClock) -> FastAPI:
    """API wired to the in-memory repository and the fake clock."""
    application = create_app(repository=repository)
    application.dependency_overrides[get_todo_service] = lambda: TodoService(
        repository, clock=clock
    )
    return application


@pytest.fixture
def api_client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
