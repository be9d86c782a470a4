"""Exceptions raised by snowclient"""

from typing import Any, Optional


class SnowClientError(Exception):
    """Base class for all snowclient errors"""


class ValidationError(SnowClientError, ValueError):
    """Caller supplied input the client refuses to send to Snowflake"""


class SnowflakeConnectionError(SnowClientError, ConnectionError):
    """The driver failed to open a connection"""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ExecutionError(SnowClientError):
    """The driver reported a failure while executing a statement

    The driver's exception is kept on ``original`` (and chained as
    ``__cause__``). Snowflake error details are copied over when the driver
    provides them.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None, sql: Optional[str] = None):
        super().__init__(message)
        self.original = original
        self.sql = sql
        self.errno: Optional[int] = _attr(original, "errno")
        self.sqlstate: Optional[str] = _attr(original, "sqlstate")
        self.query_id: Optional[str] = _attr(original, "sfqid")

    def __repr__(self) -> str:
        return f"ExecutionError({str(self)!r}, errno={self.errno}, query_id={self.query_id!r})"


def _attr(error: Optional[BaseException], name: str) -> Any:
    if error is None:
        return None
    return getattr(error, name, None)
