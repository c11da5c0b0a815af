from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from src.todo_board.domain.models import (
    Todo,
    TodoChanges,
    TodoDraft,
    TodoQuery,
    TodoStatus,
    describe_validation_error,
)


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (None, None, (1, 6)),
        ("2", "10", (2, 10)),
        ("3abc", " 4 ", (3, 4)),
        ("abc", "", (1, 6)),
        ("0", "-1", (1, 6)),
        (5, 7, (5, 7)),
        ("1", "5000", (1, 100)),
    ],
)
def test_query_param_parsing(page, limit, expected) -> None:
    query = TodoQuery.from_params(page, limit)

    assert (query.page, query.limit) == expected


def test_query_offset_and_search_kept_verbatim() -> None:
    query = TodoQuery.from_params("3", "6", "  milk ")

    assert query.offset == 12
    assert query.search == "  milk "


def test_draft_description_defaults_to_empty() -> None:
    draft = TodoDraft.model_validate({"title": "x", "description": None, "unknown": 1})

    assert draft.description == ""
    assert draft.status is TodoStatus.PENDING


def test_changes_apply_only_provided_fields() -> None:
    stamp = datetime(2026, 3, 1, tzinfo=UTC)
    todo = Todo(
        id="abc",
        title="Old",
        description="keep me",
        status=TodoStatus.PENDING,
        created_at=stamp,
        updated_at=stamp,
    )
    later = datetime(2026, 3, 2, tzinfo=UTC)

    merged = TodoChanges.model_validate({"status": "In-Progress"}).apply(todo, updated_at=later)

    assert merged.title == "Old"
    assert merged.description == "keep me"
    assert merged.status is TodoStatus.IN_PROGRESS
    assert merged.updated_at == later
    assert merged.created_at == stamp


def test_todo_serialises_with_camel_case_keys() -> None:
    stamp = datetime(2026, 3, 1, 12, 30, tzinfo=UTC)
    todo = Todo(id="abc", title="t", created_at=stamp, updated_at=stamp)

    data = todo.model_dump(by_alias=True, mode="json")

    assert set(data) == {"id", "title", "description", "status", "createdAt", "updatedAt"}
    assert data["status"] == "Pending"
    assert Todo.model_validate(data) == todo


def test_describe_validation_error_joins_messages() -> None:
    with pytest.raises(ValidationError) as exc_info:
        TodoDraft.model_validate({"status": "Nope"})

    message = describe_validation_error(exc_info.value)

    assert "Title is required" in message
    assert "'Nope' is not a valid status" in message
