"""Connection module exports."""

from .connection import SnowflakeConnector
from .options import ClientOptions
from .state import ConnectionState

__all__ = [
    "SnowflakeConnector",
    "ClientOptions",
    "ConnectionState",
]
