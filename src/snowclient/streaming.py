"""Row streaming for SELECT statements"""

import asyncio
import logging
from collections import deque
from typing import Any, Optional

from snowflake.connector import DictCursor, SnowflakeConnection
from snowflake.connector.errors import Error as DriverError

from snowclient.errors import ExecutionError

logger = logging.getLogger(__name__)


class RowStream:
    """Single-pass async iterator over the rows of a SELECT

    The statement is executed on the first ``__anext__`` and rows are fetched
    from the driver ``batch_size`` at a time, as the consumer asks for them.
    Driver failures are raised from iteration as ExecutionError. Once
    exhausted, failed or closed the stream yields nothing more.

    Example:
        >>> rows = await client.select("SELECT * FROM loans", stream_results=True)
        >>> async for row in rows:
        ...     print(row["LOAN_ID"])
    """

    def __init__(self, connection: SnowflakeConnection, sql: str, batch_size: int = 1000):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.sql = sql
        self._connection = connection
        self._batch_size = batch_size
        self._cursor: Optional[Any] = None
        self._buffer: deque[dict[str, Any]] = deque()
        self._done = False
        self.rows_yielded = 0

    def __aiter__(self) -> "RowStream":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if self._buffer:
            return self._take()
        if self._done:
            raise StopAsyncIteration

        try:
            if self._cursor is None:
                self._cursor = await asyncio.to_thread(self._execute)
            batch = await asyncio.to_thread(self._cursor.fetchmany, self._batch_size)
        except DriverError as e:
            logger.error(str(e))
            await self.aclose()
            raise ExecutionError(f"Streaming select failed: {e}", original=e, sql=self.sql) from e

        if not batch:
            logger.info("Select statement successful (%d rows streamed)", self.rows_yielded)
            await self.aclose()
            raise StopAsyncIteration

        logger.debug("Fetched batch of %d rows", len(batch))
        self._buffer.extend(batch)
        return self._take()

    def _take(self) -> dict[str, Any]:
        self.rows_yielded += 1
        return self._buffer.popleft()

    def _execute(self) -> Any:
        cursor = self._connection.cursor(DictCursor)
        try:
            cursor.execute(self.sql)
        except Exception:
            cursor.close()
            raise
        return cursor

    @property
    def closed(self) -> bool:
        return self._done

    async def aclose(self) -> None:
        """Stop the stream and release the driver cursor"""
        self._done = True
        self._buffer.clear()
        cursor, self._cursor = self._cursor, None
        if cursor is not None:
            await asyncio.to_thread(cursor.close)

    def __repr__(self) -> str:
        status = "closed" if self._done else "open"
        return f"RowStream(rows_yielded={self.rows_yielded}, {status})"
