from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di, reset_di
from src.setup.db_config import get_database_settings
from src.setup.logging_config import configure_logging
from src.todo_board.domain.repositories import TodoRepository
from src.todo_board.infrastructure.postgres.orm import PostgresOrm
from src.todo_board.infrastructure.postgres.repository import PostgresTodoRepository
from src.todo_board.presentation.errors import register_exception_handlers
from src.todo_board.presentation.routes import health_router, router as todos_router

logger = logging.getLogger(__name__)


def create_app(repository: TodoRepository | None = None) -> FastAPI:
    """
    Build the todo API.

    When ``repository`` is given it is bound as-is and no database handle is
    opened; otherwise the lifespan opens a ``PostgresOrm`` from
    ``DatabaseSettings`` and disposes it on shutdown.
    """
    settings = get_api_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        orm: PostgresOrm | None = None
        if repository is not None:
            configure_di(repository)
        else:
            db_settings = get_database_settings()
            orm = PostgresOrm(db_settings.DATABASE_URL, echo=db_settings.DATABASE_ECHO)
            if db_settings.CREATE_SCHEMA:
                await orm.create_schema()
            configure_di(PostgresTodoRepository(orm))
        app.state.orm = orm
        logger.info("Todo API started", extra={"version": settings.APP_VERSION})
        try:
            yield
        finally:
            reset_di()
            if orm is not None:
                await orm.dispose()
            logger.info("Todo API stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Todo board API: paginated, searchable task CRUD",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(todos_router)
    app.include_router(health_router)
    return app


app = create_app()
