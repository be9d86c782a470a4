"""
snowclient - async convenience client for Snowflake

Code is organized in layers
- config/ and connection/ as the interface to snowflake-connector-python
- statements and streaming build SQL text and consume results
- client is the SnowflakeClient exposing select/insert/update/delete
"""

# Layer 1: Core connectivity
from snowclient.config import load_profile, load_options, list_profiles
from snowclient.connection import ClientOptions, ConnectionState, SnowflakeConnector

# Layer 2: Statements and results
from snowclient.statements import build_insert, build_update, build_delete, derive_columns
from snowclient.streaming import RowStream
from snowclient.utils import is_valid_identifier, quote_identifier, quote_name

# Layer 3: Client
from snowclient.client import SnowflakeClient
from snowclient.errors import (
    SnowClientError,
    ValidationError,
    SnowflakeConnectionError,
    ExecutionError,
)

__version__ = "0.1.0"
__all__ = [
    # Layer 1: Configuration & Connection
    "load_profile",
    "load_options",
    "list_profiles",
    "ClientOptions",
    "ConnectionState",
    "SnowflakeConnector",
    # Layer 2: Statements and results
    "build_insert",
    "build_update",
    "build_delete",
    "derive_columns",
    "RowStream",
    "is_valid_identifier",
    "quote_identifier",
    "quote_name",
    # Layer 3: Client
    "SnowflakeClient",
    "SnowClientError",
    "ValidationError",
    "SnowflakeConnectionError",
    "ExecutionError",
]
