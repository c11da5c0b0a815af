"""
Client-side state for the todo board.

The controller holds the currently loaded page of todos and reconciles it
with server responses after each mutation instead of refetching. Two scope
rules are intentional and visible to renderers:

* ``stats`` counts statuses on the loaded page only, not across the store.
* ``visible_todos`` applies ``search_term`` to the loaded page only; it does not
  change ``total_todos`` or pagination. Server-side search is ``server_search``.
"""
from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from src.setup.client_config import get_client_settings
from src.todo_board.client.api_client import TodoApiClient, TodoApiError
from src.todo_board.client.notifications import NotificationLog, Notifier
from src.todo_board.domain.models import Todo, TodoStatus

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Delete this task?"

ConfirmCallback = Callable[[str], bool | Awaitable[bool]]


@dataclass(frozen=True)
class TodoStats:
    pending: int = 0
    in_progress: int = 0
    completed: int = 0


def _always_confirm(message: str) -> bool:
    return True


class TodoBoardController:
    def __init__(
        self,
        api: TodoApiClient,
        *,
        notifier: Notifier | None = None,
        confirm: ConfirmCallback = _always_confirm,
        page_size: int | None = None,
    ) -> None:
        self._api = api
        self._notifier = notifier or NotificationLog()
        self._confirm = confirm
        self._page_size = page_size or get_client_settings().PAGE_SIZE
        self._load_seq = 0

        self.todos: list[Todo] = []
        self.total_todos = 0
        self.current_page = 1
        self.search_term = ""
        self.server_search = ""
        self.edit_id: str | None = None
        self.loading = False

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def stats(self) -> TodoStats:
        """Status counts for the loaded page (page-local by design)."""
        statuses = [todo.status for todo in self.todos]
        return TodoStats(
            pending=statuses.count(TodoStatus.PENDING),
            in_progress=statuses.count(TodoStatus.IN_PROGRESS),
            completed=statuses.count(TodoStatus.COMPLETED),
        )

    @property
    def visible_todos(self) -> list[Todo]:
        needle = self.search_term.lower()
        return [todo for todo in self.todos if needle in todo.title.lower()]

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1

    @property
    def has_next_page(self) -> bool:
        return self.current_page * self._page_size < self.total_todos

    @property
    def is_editing(self) -> bool:
        return self.edit_id is not None

    async def load_page(self, page: int = 1) -> bool:
        """
        Fetch ``page`` and replace the local list on success.

        Only the most recently issued load may update state; a response that
        arrives after a newer ``load_page`` call is dropped.
        """
        self._load_seq += 1
        seq = self._load_seq
        self.loading = True
        try:
            result = await self._api.list_todos(
                page=page, limit=self._page_size, search=self.server_search
            )
        except TodoApiError as exc:
            if seq == self._load_seq:
                self._notifier.error("Failed to fetch todos")
            logger.warning("Page load failed", extra={"page": page, "reason": exc.message})
            return False
        finally:
            if seq == self._load_seq:
                self.loading = False

        if seq != self._load_seq:
            logger.debug("Discarded stale page response", extra={"page": page})
            return False
        self.todos = list(result.tasks)
        self.total_todos = result.total
        self.current_page = page
        return True

    async def next_page(self) -> bool:
        if not self.has_next_page:
            return False
        return await self.load_page(self.current_page + 1)

    async def previous_page(self) -> bool:
        if not self.has_previous_page:
            return False
        return await self.load_page(self.current_page - 1)

    async def apply_server_search(self, search: str) -> bool:
        """Filter on the server by title and restart from the first page."""
        self.server_search = search.strip()
        return await self.load_page(1)

    def set_search_term(self, term: str) -> None:
        self.search_term = term

    async def create_todo(self, data: Mapping[str, Any]) -> Todo | None:
        try:
            todo = await self._api.create_todo(data)
        except TodoApiError as exc:
            self._notifier.error(f"Could not create task: {exc.message}")
            return None
        self.todos = [todo, *self.todos]
        self.total_todos += 1
        self._notifier.success("New task created!")
        return todo

    def begin_edit(self, todo: Todo) -> None:
        self.edit_id = todo.id

    def cancel_edit(self) -> None:
        self.edit_id = None

    async def save_edit(self, data: Mapping[str, Any]) -> Todo | None:
        """Send ``data`` for the tracked edit target and swap the result in by id."""
        if self.edit_id is None:
            raise RuntimeError("No todo is being edited")
        edit_id = self.edit_id
        try:
            updated = await self._api.update_todo(edit_id, data)
        except TodoApiError as exc:
            self._notifier.error(f"Could not update task: {exc.message}")
            return None
        self.todos = [updated if todo.id == edit_id else todo for todo in self.todos]
        self.edit_id = None
        self._notifier.success("Task updated!")
        return updated

    async def submit(self, data: Mapping[str, Any]) -> Todo | None:
        if self.is_editing:
            return await self.save_edit(data)
        return await self.create_todo(data)

    async def delete_todo(self, todo_id: str) -> bool:
        if not await self._confirmed(DELETE_PROMPT):
            return False
        try:
            await self._api.delete_todo(todo_id)
        except TodoApiError as exc:
            self._notifier.error(f"Could not delete task: {exc.message}")
            return False

        self.todos = [todo for todo in self.todos if todo.id != todo_id]
        self.total_todos = max(self.total_todos - 1, 0)
        if self.edit_id == todo_id:
            self.edit_id = None
        self._notifier.success("Task deleted!")
        if not self.todos and self.current_page > 1:
            await self.load_page(self.current_page - 1)
        return True

    async def _confirmed(self, message: str) -> bool:
        answer = self._confirm(message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)
