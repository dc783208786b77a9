"""
Connection settings for the 0-db client.
"""

import os
from dataclasses import dataclass

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 9900


@dataclass
class ClientConfig:
    """
    Connection parameters for a 0-db server.

    Attributes:
        host: Server host name or address.
        port: Server TCP port.
        namespace: Namespace to SELECT after connecting (None keeps the default one).
        password: Namespace password when ``namespace`` is set, otherwise the
            server admin password sent with AUTH.
        socket_timeout: Seconds to wait for a reply (None waits forever).
        connect_timeout: Seconds to wait for the TCP connection.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    namespace: str | None = None
    password: str | None = None
    socket_timeout: float | None = None
    connect_timeout: float | None = None

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("host cannot be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port must be in 1..65535, got {self.port}")
        if self.socket_timeout is not None and self.socket_timeout <= 0:
            raise ValueError(f"socket_timeout must be positive, got {self.socket_timeout}")
        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise ValueError(f"connect_timeout must be positive, got {self.connect_timeout}")

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_address(cls, address: str, **kwargs) -> "ClientConfig":
        """
        Build a config from a ``host:port`` string.

        The port may be omitted, in which case the 0-db default is used.
        """
        if not address or not address.strip():
            raise ValueError("address cannot be empty")

        host, sep, port = address.strip().rpartition(":")
        if not sep:
            return cls(host=port, **kwargs)

        try:
            return cls(host=host, port=int(port), **kwargs)
        except ValueError as e:
            raise ValueError(f"invalid address {address!r}: {e}") from e

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build a config from ZDB_ADDRESS, ZDB_NAMESPACE, ZDB_PASSWORD and
        ZDB_SOCKET_TIMEOUT.
        """
        timeout = os.environ.get("ZDB_SOCKET_TIMEOUT")
        return cls.from_address(
            os.environ.get("ZDB_ADDRESS", f"{DEFAULT_HOST}:{DEFAULT_PORT}"),
            namespace=os.environ.get("ZDB_NAMESPACE") or None,
            password=os.environ.get("ZDB_PASSWORD") or None,
            socket_timeout=float(timeout) if timeout else None,
        )
