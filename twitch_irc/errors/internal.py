"""Centralized internal error hierarchy.

The client reports connection problems through result objects carrying a
``ClientError`` kind; the exceptions below exist for callers that prefer to
unwind (``result.raise_for_error()``) and for configuration failures.

Classes:
  ClientError          – Error kinds surfaced by connect/send/poll.
  InternalError        – Base for all internal errors.
  TwitchIRCError       – A failed client operation, tagged with its kind.
  ConfigError          – Configuration missing or invalid.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ClientError(Enum):
    """Failure kinds reported by the client.

    ``UNABLE_TO_AUTH`` is reserved: the handshake is fire-and-forget, so no
    code path currently produces it.
    """

    UNKNOWN = "unknown"
    UNABLE_TO_CONNECT = "unable_to_connect"
    UNABLE_TO_AUTH = "unable_to_auth"


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TwitchIRCError(InternalError):
    """Exception raised when a client operation fails.

    Args:
        kind: The ``ClientError`` describing the failure.
        message: Optional error message, defaults to the kind's value.
        data: Optional mapping of additional context data.
    """

    def __init__(
        self,
        kind: ClientError,
        message: str | None = None,
        *,
        data: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message or kind.value.replace("_", " "), data=data)
        self.kind = kind


class ConfigError(InternalError):
    """Exception raised when the client configuration cannot be loaded."""


__all__ = [
    "ClientError",
    "InternalError",
    "TwitchIRCError",
    "ConfigError",
]
