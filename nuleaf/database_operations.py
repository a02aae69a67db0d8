import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import asyncpg

from nuleaf.db_context import Database
from nuleaf.errors import InternalError, ValidationError

logger = logging.getLogger(__name__)


@contextmanager
def translate_store_errors(query: str) -> Iterator[None]:
    """Map driver exceptions onto the repository error taxonomy"""
    try:
        yield
    except asyncpg.UniqueViolationError as exc:
        raise ValidationError(_unique_violation_message(exc)) from exc
    except (asyncpg.IntegrityConstraintViolationError, asyncpg.DataError) as exc:
        raise ValidationError(str(exc)) from exc
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
        logger.exception("Store failure while executing: %s", query)
        raise InternalError("Store operation failed") from exc


def _unique_violation_message(exc: asyncpg.UniqueViolationError) -> str:
    detail = getattr(exc, "detail", None)
    if detail:
        return f"Already exists: {detail}"
    return "A record with the same unique value already exists"


class DatabaseOperations:
    """Composition class for statement execution on a Database"""

    def __init__(self, database: Database):
        self.database = database

    async def fetch_all(self, query: str, params: list[Any]) -> list[Any]:
        """Execute query and fetch all rows"""
        self.database.log_query(query, params)
        with translate_store_errors(query):
            async with self.database.connection() as conn:
                return await conn.fetch(query, *params)

    async def fetch_one(self, query: str, params: list[Any]) -> Any:
        """Execute a query and fetch one row"""
        self.database.log_query(query, params)
        with translate_store_errors(query):
            async with self.database.connection() as conn:
                return await conn.fetchrow(query, *params)

    async def fetch_value(self, query: str, params: list[Any]) -> Any:
        """Execute query and fetch single value"""
        self.database.log_query(query, params)
        with translate_store_errors(query):
            async with self.database.connection() as conn:
                return await conn.fetchval(query, *params)

    async def execute_query(self, query: str, params: list[Any]) -> str:
        """Execute query and return the status tag"""
        self.database.log_query(query, params)
        with translate_store_errors(query):
            async with self.database.connection() as conn:
                return await conn.execute(query, *params)
