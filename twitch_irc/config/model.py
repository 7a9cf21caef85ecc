from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    DEFAULT_MIN_SEND_INTERVAL_MS,
    POLL_INTERVAL_SECONDS,
    SOCKET_CONNECT_TIMEOUT,
    TWITCH_IRC_HOST,
    TWITCH_IRC_PORT,
)


class ClientConfig(BaseModel):
    """Connection settings for one client.

    Attributes:
        username: Twitch login used for USER and NICK.
        oauth_token: Chat token; the ``oauth:`` prefix is added when missing.
        channel: Channel to join, stored without ``#`` and lowercased.
        host: IRC server host name.
        port: IRC server port.
        min_send_interval_ms: Minimum spacing of rate limited sends.
        poll_interval_seconds: Sleep between polls in the CLI loop.
        connect_timeout: Seconds allowed for the TCP handshake.
    """

    username: str = Field(min_length=3, max_length=25)
    oauth_token: str = Field(min_length=1)
    channel: str = Field(min_length=1)
    host: str = TWITCH_IRC_HOST
    port: int = Field(default=TWITCH_IRC_PORT, ge=1, le=65535)
    min_send_interval_ms: int = Field(default=DEFAULT_MIN_SEND_INTERVAL_MS, ge=0)
    poll_interval_seconds: float = Field(default=POLL_INTERVAL_SECONDS, gt=0)
    connect_timeout: float = Field(default=SOCKET_CONNECT_TIMEOUT, gt=0)

    @field_validator("username", mode="before")
    @classmethod
    def normalize_username(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("oauth_token", mode="before")
    @classmethod
    def normalize_token(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        token = v.strip()
        if token and not token.startswith("oauth:"):
            token = f"oauth:{token}"
        return token

    @field_validator("channel", mode="before")
    @classmethod
    def normalize_channel(cls, v: Any) -> Any:
        """Strip whitespace and a leading '#', lowercase."""
        if isinstance(v, str):
            return v.strip().lstrip("#").lower()
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientConfig:
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
