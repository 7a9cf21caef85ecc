"""Shared IRC data models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol

from ..errors.internal import ClientError, TwitchIRCError

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchIRCClient


class ConnectionState(Enum):
    UNCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSED = auto()


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """One channel message as received from the server.

    ``timestamp_ms`` is stamped by the client at receive time; the parser
    leaves it at 0.
    """

    timestamp_ms: int
    username: str
    text: str

    def with_timestamp(self, timestamp_ms: int) -> ChatMessage:
        return replace(self, timestamp_ms=timestamp_ms)


class MessageHandler(Protocol):
    """Callable invoked with the message and the client that received it."""

    def __call__(self, message: ChatMessage, client: TwitchIRCClient) -> Any: ...


@dataclass(frozen=True, slots=True)
class ListenerEntry:
    name: str
    search: str
    handler: MessageHandler | Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ClientResult:
    """Outcome of a client operation.

    Truthy when the operation succeeded. ``error`` carries the failure kind
    when the failure is an error rather than an expected refusal.
    """

    ok: bool
    error: ClientError | None = None
    detail: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise TwitchIRCError(self.error, self.detail)

    @classmethod
    def success(cls) -> ClientResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: ClientError, detail: str | None = None) -> ClientResult:
        return cls(ok=False, error=error, detail=detail)


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of one outbound line. Truthy iff the line was transmitted."""

    sent: bool
    queued: bool = False
    error: ClientError | None = None
    detail: str | None = None

    def __bool__(self) -> bool:
        return self.sent

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise TwitchIRCError(self.error, self.detail)


@dataclass(frozen=True, slots=True)
class PollResult:
    """Summary of one poll cycle. Truthy when the cycle ran."""

    ok: bool
    error: ClientError | None = None
    detail: str | None = None
    lines_read: int = 0
    keepalives: int = 0
    dispatched: list[ChatMessage] = field(default_factory=list)
    drained: bool = False

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise TwitchIRCError(self.error, self.detail)


__all__ = [
    "ChatMessage",
    "ClientResult",
    "ConnectionState",
    "ListenerEntry",
    "MessageHandler",
    "PollResult",
    "SendResult",
]
