"""Snowflake connection management."""

import logging
from typing import Optional, Any, Literal

import snowflake.connector
from snowflake.connector import SnowflakeConnection

from .base import BaseConnector
from .options import ClientOptions

logger = logging.getLogger(__name__)


class SnowflakeConnector(BaseConnector):
    """
    Owns at most one driver connection built from ClientOptions.

    All methods are blocking; SnowflakeClient calls them from worker threads.

    Args:
        options: Connection configuration

    Example:
        >>> with SnowflakeConnector(ClientOptions(account="...", username="...", password="...")) as conn:
        ...     conn.cursor().execute("SELECT CURRENT_VERSION()")
    """

    def __init__(self, options: ClientOptions) -> None:
        super().__init__(options)

        # Connection initialized lazily
        self._connection: Optional[SnowflakeConnection] = None

    @property
    def connection(self) -> Optional[SnowflakeConnection]:
        """The currently held connection, if any"""
        return self._connection

    def is_live(self) -> bool:
        """Liveness check: a connection is held and the driver does not report it closed"""
        return self._connection is not None and not self._connection.is_closed()

    def connect(self) -> SnowflakeConnection:
        """
        Return the held connection, opening a new one if absent or no longer live.

        Returns:
            Live SnowflakeConnection

        Raises:
            snowflake.connector.errors.*: Any error the driver raises while connecting
        """
        if self.is_live():
            assert self._connection is not None
            return self._connection

        logger.info("Connecting to Snowflake %s", self.options.account)
        self._connection = None
        connection = snowflake.connector.connect(**self.connect_kwargs())
        self._connection = connection
        logger.info("Connected to Snowflake %s", self.options.account)
        return connection

    def close(self) -> None:
        """Close the connection, releasing resources."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> SnowflakeConnection:
        """Context manager entry: establish connection."""
        return self.connect()

    def __exit__(
        self,
        exc_type: Any,
        exc_val: Any,
        exc_tb: Any
    ) -> Literal[False]:
        """
        Context manager exit: close connection.

        Always returns False to propagate any exceptions.
        """
        self.close()
        return False

    def __repr__(self) -> str:
        """String representation of the connector."""
        status = "connected" if self.is_live() else "not connected"
        return f"SnowflakeConnector(account='{self.options.account}', {status})"
