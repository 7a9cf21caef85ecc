"""
Configuration constants for the Twitch IRC client

This module contains all configurable constants used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Same contract as ``_get_env_int`` for floating point values.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is not None and value.strip():
        return value.strip()
    return default


# Server endpoint
TWITCH_IRC_HOST = _get_env_str(
    "TWITCH_IRC_HOST", "irc.chat.twitch.tv"
)  # Plain-text IRC endpoint
TWITCH_IRC_PORT = _get_env_int("TWITCH_IRC_PORT", 6667)  # Plain-text IRC port

# Outbound rate limiting
DEFAULT_MIN_SEND_INTERVAL_MS = _get_env_int(
    "DEFAULT_MIN_SEND_INTERVAL_MS", 2000
)  # Minimum milliseconds between two rate-limited sends

# Socket transport
SOCKET_CONNECT_TIMEOUT = _get_env_float(
    "SOCKET_CONNECT_TIMEOUT", 10.0
)  # Seconds to wait for the TCP handshake
SOCKET_RECV_BUFFER_SIZE = _get_env_int(
    "SOCKET_RECV_BUFFER_SIZE", 4096
)  # Bytes read per non-blocking recv call

# Host loop
POLL_INTERVAL_SECONDS = _get_env_float(
    "POLL_INTERVAL_SECONDS", 0.05
)  # Sleep between poll() calls in the CLI loop

# Protocol tokens
LINE_DELIMITER = "\r\n"
CHAT_COMMAND = "PRIVMSG"
KEEPALIVE_PROBE = "PING"
KEEPALIVE_REPLY = "PONG"
CATCH_ALL_LISTENER = ""  # Listener name reserved for the fallback handler
