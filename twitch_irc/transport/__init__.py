"""Line oriented transports the client can run over."""

from .protocols import LineTransport  # noqa: F401
from .socket_transport import SocketLineTransport  # noqa: F401

__all__ = ["LineTransport", "SocketLineTransport"]
