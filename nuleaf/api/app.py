"""
Application factory.

``create_app`` configures logging, registers the error handlers and mounts
one route group per entity kind. Unless prebuilt repositories are passed
in, the lifespan opens the store pool, applies the table DDL (when
``settings.create_schema`` is set) and builds the repositories on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nuleaf.api.errors import register_error_handlers
from nuleaf.api.routes import build_router
from nuleaf.config import Settings
from nuleaf.db_context import Database
from nuleaf.kinds import KINDS
from nuleaf.logging_config import setup_logging
from nuleaf.repositories import Repositories, build_repositories
from nuleaf.schema import create_schema

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, repositories: Repositories | None = None
) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if repositories is not None:
            yield
            return

        database = await Database.connect(
            settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        try:
            if settings.create_schema:
                await create_schema(database, settings.db_schema)
            app.state.database = database
            app.state.repositories = build_repositories(
                database, settings.repository_config()
            )
            logger.info("%s ready", settings.project_name)
            yield
        finally:
            await database.close()

    app = FastAPI(title=settings.project_name, lifespan=lifespan)
    if repositories is not None:
        app.state.repositories = repositories

    register_error_handlers(app)
    for kind in KINDS.values():
        app.include_router(build_router(kind))

    return app
