import inject

from src.todo_board.domain.repositories import TodoRepository


def configure_di(repository: TodoRepository) -> None:
    """Bind the todo repository into the DI container, replacing any previous binding."""

    def _config(binder: inject.Binder) -> None:
        binder.bind(TodoRepository, repository)

    inject.clear_and_configure(_config)


def reset_di() -> None:
    inject.clear()
