"""IRC subsystem package.

Contains the line parser, the rate limited sender, the listener registry,
the dispatcher and the client that ties them to a transport.
"""

from .client import TwitchIRCClient  # noqa: F401
from .dispatcher import ChatDispatcher, DispatchOutcome  # noqa: F401
from .models import (  # noqa: F401
    ChatMessage,
    ClientResult,
    ConnectionState,
    ListenerEntry,
    MessageHandler,
    PollResult,
    SendResult,
)
from .parser import build_privmsg, parse_chat_line  # noqa: F401
from .registry import ListenerRegistry  # noqa: F401
from .sender import RateLimitedSender  # noqa: F401

__all__ = [
    "ChatDispatcher",
    "ChatMessage",
    "ClientResult",
    "ConnectionState",
    "DispatchOutcome",
    "ListenerEntry",
    "ListenerRegistry",
    "MessageHandler",
    "PollResult",
    "RateLimitedSender",
    "SendResult",
    "TwitchIRCClient",
    "build_privmsg",
    "parse_chat_line",
]
