"""Connection lifecycle states"""

from enum import Enum


class ConnectionState(str, Enum):
    """Lifecycle of the single connection a client holds"""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
