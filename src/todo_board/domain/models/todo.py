from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class TodoStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In-Progress"
    COMPLETED = "Completed"


def _clean_title(value: Any) -> Any:
    if value is None:
        raise ValueError("Title is required")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
    return value


def _clean_description(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return value


class Todo(BaseModel):
    """A single unit of work as stored and returned over the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(description="Unique todo identifier, assigned at creation.")
    title: str = Field(description="Trimmed, non-empty title.")
    description: str = Field(default="", description="Trimmed free text.")
    status: TodoStatus = Field(default=TodoStatus.PENDING, description="Workflow status.")
    created_at: datetime = Field(description="Creation timestamp (UTC).")
    updated_at: datetime = Field(description="Last successful mutation (UTC).")


class TodoDraft(BaseModel):
    """Payload accepted by the create operation."""

    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""
    status: TodoStatus = TodoStatus.PENDING

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> Any:
        return _clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def _validate_description(cls, value: Any) -> Any:
        return _clean_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def _validate_status(cls, value: Any) -> Any:
        return TodoStatus.PENDING if value is None else value


class TodoChanges(BaseModel):
    """Partial update payload. Only fields present in the input are applied."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None
    status: TodoStatus | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _validate_title(cls, value: Any) -> Any:
        return _clean_title(value)

    @field_validator("description", mode="before")
    @classmethod
    def _validate_description(cls, value: Any) -> Any:
        return _clean_description(value)

    @field_validator("status", mode="before")
    @classmethod
    def _validate_status(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Status is required")
        return value

    def apply(self, todo: Todo, updated_at: datetime) -> Todo:
        """Return a copy of ``todo`` with the provided fields merged in."""
        changes = self.model_dump(exclude_unset=True)
        changes["updated_at"] = updated_at
        return todo.model_copy(update=changes)


class TodoQuery(BaseModel):
    page: int = 1
    limit: int = 6
    search: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        page: str | int | None = None,
        limit: str | int | None = None,
        search: str | None = None,
        *,
        default_limit: int = 6,
        max_limit: int = 100,
    ) -> TodoQuery:
        """
        Normalise raw query parameters.

        ``page`` and ``limit`` take the leading integer of the raw value
        (``"3abc"`` -> 3). Missing, non-numeric or non-positive values fall
        back to the defaults; ``limit`` is capped at ``max_limit``.
        """
        return cls(
            page=_positive_int(page, 1),
            limit=min(_positive_int(limit, default_limit), max_limit),
            search=search or "",
        )


class TodoPage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tasks: list[Todo] = Field(description="Todos on the requested page, newest first.")
    total: int = Field(description="Number of todos matching the search, ignoring paging.")
    page: int
    limit: int


def _positive_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw)
        if match is None:
            return default
        value = int(match.group(1))
    return value if value > 0 else default


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into a single human-readable message."""
    messages: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "body"
        if error["type"] == "missing":
            messages.append(f"{field.capitalize()} is required")
        elif error["type"] == "value_error":
            messages.append(str(error["ctx"]["error"]))
        elif error["type"] == "enum":
            messages.append(f"'{error['input']}' is not a valid {field}")
        else:
            messages.append(f"{field}: {error['msg']}")
    return "; ".join(messages)
