class TodoNotFoundError(Exception):
    """Raised when a todo identifier does not exist in the store."""
    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo with id '{todo_id}' was not found.")
        self.todo_id = todo_id


class TodoValidationError(ValueError):
    """Raised when a todo payload is rejected at the boundary."""


class StoreUnavailableError(Exception):
    """Raised when the persistence store fails to complete an operation."""
