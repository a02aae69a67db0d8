import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class QueryLog:
    """Represents a logged query"""

    query: str
    params: list[Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    stack_trace: str | None = None


class QueryTracker:
    """Tracks queries executed during a context"""

    def __init__(self):
        self.queries: list[QueryLog] = []
        self._enabled: bool = False

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def log_query(self, query: str, params: list[Any], stack_trace: str | None = None):
        if self._enabled:
            self.queries.append(
                QueryLog(query=query, params=list(params), stack_trace=stack_trace)
            )

    def get_queries(self) -> list[QueryLog]:
        return self.queries.copy()

    def clear(self):
        self.queries.clear()

    def count(self) -> int:
        return len(self.queries)

    def to_dict(self) -> list[dict[str, Any]]:
        return [
            {
                "query": log.query,
                "params": log.params,
                "timestamp": log.timestamp.isoformat(),
                "stack_trace": log.stack_trace,
            }
            for log in self.queries
        ]


class Database:
    """A pooled store connection shared by the repositories.

    Connections are acquired per statement unless a transaction is open in
    the current task context, in which case its connection is reused.
    """

    def __init__(self, pool: asyncpg.Pool, name: str = "default"):
        self.pool = pool
        self.name = name
        self._current_connection: ContextVar[asyncpg.Connection | None] = ContextVar(
            f"nuleaf_connection_{name}_{id(self)}", default=None
        )
        self._query_tracker: ContextVar[QueryTracker | None] = ContextVar(
            f"nuleaf_tracker_{name}_{id(self)}", default=None
        )

    @classmethod
    async def connect(
        cls, dsn: str, *, min_size: int = 1, max_size: int = 10, name: str = "default"
    ) -> "Database":
        pool = await asyncpg.create_pool(dsn, min_size=min_size, max_size=max_size)
        logger.info("Connected database pool %r (size %d-%d)", name, min_size, max_size)
        return cls(pool, name)

    async def close(self):
        await self.pool.close()
        logger.info("Closed database pool %r", self.name)

    def get_current_connection(self) -> asyncpg.Connection | None:
        return self._current_connection.get()

    def get_query_tracker(self) -> QueryTracker | None:
        return self._query_tracker.get()

    def log_query(self, query: str, params: list[Any]):
        """Log a statement and hand it to the current query tracker, if any"""
        logger.debug("[%s] %s", self.name, query)
        tracker = self._query_tracker.get()
        if tracker:
            # Skip this method and the DatabaseOperations frame
            stack = traceback.extract_stack()[:-2]
            tracker.log_query(query, params, "".join(traceback.format_list(stack)))

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """Yield the context's transaction connection or a pooled one"""
        current_conn = self._current_connection.get()
        if current_conn is not None:
            yield current_conn
            return

        async with self.pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self, track_queries: bool = False) -> AsyncIterator[asyncpg.Connection]:
        """Context manager for a transaction bound to the current task context.

        Nested use opens a savepoint on the same connection. The acquired
        connection always goes back to the pool when the block exits.
        """
        current_conn = self._current_connection.get()

        if current_conn is not None:
            async with current_conn.transaction():
                yield current_conn
            return

        async with self.pool.acquire() as conn, conn.transaction():
            conn_token = self._current_connection.set(conn)

            tracker_token = None
            if track_queries and not self._query_tracker.get():
                tracker = QueryTracker()
                tracker.enable()
                tracker_token = self._query_tracker.set(tracker)

            try:
                yield conn
            finally:
                self._current_connection.reset(conn_token)
                if tracker_token:
                    self._query_tracker.reset(tracker_token)

    @asynccontextmanager
    async def track_queries(self) -> AsyncIterator[QueryTracker]:
        """Record every statement issued inside the block.

        async with database.track_queries() as tracker:
            await events.find({"title": "launch"})
            queries = tracker.get_queries()
        """
        current_tracker = self._query_tracker.get()

        if current_tracker:
            was_enabled = current_tracker.is_enabled()
            current_tracker.enable()
            try:
                yield current_tracker
            finally:
                if not was_enabled:
                    current_tracker.disable()
        else:
            tracker = QueryTracker()
            tracker.enable()
            token = self._query_tracker.set(tracker)
            try:
                yield tracker
            finally:
                self._query_tracker.reset(token)
