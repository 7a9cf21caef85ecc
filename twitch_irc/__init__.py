"""Rate limited Twitch chat client with named message listeners."""

from .config import ClientConfig, load_config  # noqa: F401
from .errors import ClientError, TwitchIRCError  # noqa: F401
from .irc import (  # noqa: F401
    ChatMessage,
    ConnectionState,
    ListenerRegistry,
    TwitchIRCClient,
    parse_chat_line,
)
from .transport import LineTransport, SocketLineTransport  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "ChatMessage",
    "ClientConfig",
    "ClientError",
    "ConnectionState",
    "LineTransport",
    "ListenerRegistry",
    "SocketLineTransport",
    "TwitchIRCClient",
    "TwitchIRCError",
    "load_config",
    "parse_chat_line",
]
