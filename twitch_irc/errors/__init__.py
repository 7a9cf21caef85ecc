"""Error hierarchy and error logging helpers."""

from .handling import log_error  # noqa: F401
from .internal import (  # noqa: F401
    ClientError,
    ConfigError,
    InternalError,
    TwitchIRCError,
)

__all__ = [
    "ClientError",
    "ConfigError",
    "InternalError",
    "TwitchIRCError",
    "log_error",
]
