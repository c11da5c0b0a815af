from src.todo_board.domain.models.todo import (
    Todo,
    TodoChanges,
    TodoDraft,
    TodoPage,
    TodoQuery,
    TodoStatus,
    describe_validation_error,
)

__all__ = [
    "Todo",
    "TodoStatus",
    "TodoDraft",
    "TodoChanges",
    "TodoQuery",
    "TodoPage",
    "describe_validation_error",
]
