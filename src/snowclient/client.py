"""Async convenience client for running SELECT/INSERT/UPDATE/DELETE on Snowflake"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pandas as pd
from snowflake.connector import DictCursor, SnowflakeConnection
from snowflake.connector.errors import Error as DriverError

from snowclient.connection import ClientOptions, ConnectionState, SnowflakeConnector
from snowclient.errors import ExecutionError, SnowflakeConnectionError, ValidationError
from snowclient.statements import Record, build_delete, build_insert, build_update, require_select
from snowclient.streaming import RowStream

try:
    import pyarrow  # noqa: F401
    HAS_PYARROW = True
except ImportError:
    HAS_PYARROW = False

logger = logging.getLogger(__name__)


class SnowflakeClient:
    """
    Lazily connects to Snowflake and runs simple statements on a single connection.

    Every operation first makes sure a live connection exists, opening one if
    none is held or the held one was closed. Concurrent callers share one
    connection attempt. Blocking driver calls run in worker threads.

    Table names, column names and WHERE clauses are interpolated into the SQL
    text verbatim. Never pass untrusted input for them; see
    ``snowclient.utils.quote_identifier`` for quoting names.

    Args:
        options: Connection configuration. If omitted, ``**kwargs`` are used to
            build one (account, username, password, role, warehouse, database, schema)
        stream_batch_size: Rows fetched per driver round trip when streaming

    Example:
        >>> async with SnowflakeClient(account="ab13241.us-east-2.aws",
        ...                            username="loader", password="...") as client:
        ...     rows = await client.select("SELECT * FROM loans")
        ...     await client.insert("loans", [{"LOAN_ID": "101", "SYSTEM": "test"}])
        ...     await client.update("loans", {"FIRST_NAME": "updated"}, "LOAN_ID = 101")
        ...     await client.delete("loans", "FIRST_NAME = 'updated'")
    """

    def __init__(
        self,
        options: Optional[ClientOptions] = None,
        *,
        stream_batch_size: int = 1000,
        **kwargs: Any,
    ) -> None:
        if options is None:
            options = ClientOptions.from_mapping(kwargs)
        elif kwargs:
            raise TypeError("Pass either ClientOptions or keyword options, not both")

        self.options = options
        self.stream_batch_size = stream_batch_size
        self._connector = SnowflakeConnector(options)
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()

    @classmethod
    def from_profile(
        cls,
        profile: str,
        path: Optional[Union[str, Path]] = None,
        *,
        stream_batch_size: int = 1000,
        **overrides: Any,
    ) -> "SnowflakeClient":
        """Create a client from a connections.toml profile"""
        options = ClientOptions.from_profile(profile, path=path, **overrides)
        return cls(options, stream_batch_size=stream_batch_size)

    @property
    def state(self) -> ConnectionState:
        """Current connection state; a held connection that was closed reads as DISCONNECTED"""
        if self._state is ConnectionState.CONNECTED and not self._connector.is_live():
            return ConnectionState.DISCONNECTED
        return self._state

    async def _ensure_connection(self) -> SnowflakeConnection:
        """Return a live connection, opening one if needed"""
        async with self._lock:
            if self._connector.is_live():
                logger.debug("Reusing live connection to %s", self.options.account)
                assert self._connector.connection is not None
                self._state = ConnectionState.CONNECTED
                return self._connector.connection

            self._state = ConnectionState.CONNECTING
            try:
                connection = await asyncio.to_thread(self._connector.connect)
            except DriverError as e:
                logger.error(str(e))
                raise SnowflakeConnectionError(
                    f"Failed to connect to Snowflake {self.options.account}: {e}", original=e
                ) from e
            finally:
                # Any failure, cancellation included, leaves no usable connection
                if self._state is ConnectionState.CONNECTING and not self._connector.is_live():
                    self._state = ConnectionState.DISCONNECTED

            self._state = ConnectionState.CONNECTED
            return connection

    async def _run(
        self,
        sql: str,
        bindings: Optional[Any] = None,
        many: bool = False,
        fetch: bool = False,
    ) -> Optional[list[dict[str, Any]]]:
        """Execute one statement on its own cursor, wrapping driver failures"""
        connection = await self._ensure_connection()
        logger.info("Executing statement: %s", sql)
        try:
            return await asyncio.to_thread(_execute, connection, sql, bindings, many, fetch)
        except DriverError as e:
            logger.error(str(e))
            raise ExecutionError(f"Statement failed: {e}", original=e, sql=sql) from e

    async def select(
        self,
        statement: str,
        stream_results: bool = False,
    ) -> Union[list[dict[str, Any]], RowStream]:
        """
        Execute a SELECT statement.

        Args:
            statement: SELECT statement to execute
            stream_results: Return a RowStream to consume with ``async for``
                instead of a list

        Returns:
            List of row dicts, or a RowStream when ``stream_results`` is True.
            Errors while streaming are raised from the stream's iteration.

        Raises:
            ValidationError: If the statement is not a SELECT. The driver is not touched.
            SnowflakeConnectionError: If a connection cannot be opened
            ExecutionError: If the driver fails to execute the statement
        """
        _validate(require_select, statement)

        if stream_results:
            connection = await self._ensure_connection()
            logger.info("Executing statement: %s", statement)
            return RowStream(connection, statement, batch_size=self.stream_batch_size)

        rows = await self._run(statement, fetch=True)
        logger.info("Select statement successful")
        return rows or []

    async def select_df(self, statement: str, lowercase_columns: bool = True) -> pd.DataFrame:
        """Execute a SELECT statement and return the results as a DataFrame with optional column casing"""
        _validate(require_select, statement)
        connection = await self._ensure_connection()
        logger.info("Executing statement: %s", statement)
        try:
            df = await asyncio.to_thread(_fetch_df, connection, statement)
        except DriverError as e:
            logger.error(str(e))
            raise ExecutionError(f"Statement failed: {e}", original=e, sql=statement) from e

        if lowercase_columns and len(df.columns) > 0:
            df.columns = df.columns.str.lower()
        logger.info("Select statement successful")
        return df

    async def insert(self, table: str, records: Iterable[Record] = ()) -> None:
        """
        Insert records into a table with a single parameterized INSERT.

        The column list is every key seen across the records, in first-seen
        order. Records missing a column bind NULL for it.

        Args:
            table: Table to insert into (interpolated verbatim)
            records: ``{COLUMN: VALUE}`` mappings; any iterable, consumed once

        Raises:
            ValidationError: If ``records`` is empty or carries no columns
            ExecutionError: If the driver rejects the statement
        """
        sql, rows = _validate(build_insert, table, records)
        await self._run(sql, rows, many=True)
        logger.info("Insert statement successful (%d records)", len(rows))

    async def update(self, table: str, updates: Record, where: str) -> None:
        """
        Update rows matching a WHERE clause.

        Args:
            table: Table to update (interpolated verbatim)
            updates: ``{COLUMN: VALUE}`` pairs, bound in key order
            where: Predicate appended verbatim after WHERE

        Raises:
            ValidationError: If ``updates`` or ``where`` is empty
            ExecutionError: If the driver rejects the statement
        """
        sql, bindings = _validate(build_update, table, updates, where)
        await self._run(sql, bindings)
        logger.info("Update statement successful")

    async def delete(self, table: str, where: str) -> None:
        """
        Delete rows matching a WHERE clause.

        Args:
            table: Table to delete from (interpolated verbatim)
            where: Predicate appended verbatim after WHERE

        Raises:
            ValidationError: If ``where`` is empty
            ExecutionError: If the driver rejects the statement
        """
        sql = _validate(build_delete, table, where)
        await self._run(sql)
        logger.info("Delete statement successful")

    async def close(self) -> None:
        """Close the held connection, if any"""
        async with self._lock:
            await asyncio.to_thread(self._connector.close)
            self._state = ConnectionState.DISCONNECTED

    async def __aenter__(self) -> "SnowflakeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"SnowflakeClient(account='{self.options.account}', state={self.state.value})"


def _validate(builder: Any, *args: Any) -> Any:
    try:
        return builder(*args)
    except ValidationError as e:
        logger.error(str(e))
        raise


def _execute(
    connection: SnowflakeConnection,
    sql: str,
    bindings: Optional[Any],
    many: bool,
    fetch: bool,
) -> Optional[list[dict[str, Any]]]:
    cursor = connection.cursor(DictCursor)
    try:
        if many:
            cursor.executemany(sql, bindings)
        elif bindings is None:
            cursor.execute(sql)
        else:
            cursor.execute(sql, bindings)
        if fetch:
            return cursor.fetchall()
        return None
    finally:
        cursor.close()


def _fetch_df(connection: SnowflakeConnection, sql: str) -> pd.DataFrame:
    cursor = connection.cursor()
    try:
        cursor.execute(sql)
        if HAS_PYARROW:
            return cursor.fetch_pandas_all()

        # Fallback when the pandas extra (pyarrow) is not installed
        if cursor.description:
            columns = [desc[0] for desc in cursor.description]
            return pd.DataFrame(cursor.fetchall(), columns=columns)
        return pd.DataFrame()
    finally:
        cursor.close()
