"""
Command line entry point: connect, join the configured channel and log chat
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable

from .config import ClientConfig, load_config
from .errors import ConfigError, log_error
from .irc import ChatMessage, TwitchIRCClient
from .logging_config import LoggerConfigurator
from .logs.logger import logger


def log_chat_message(message: ChatMessage, client: TwitchIRCClient) -> None:
    """Catch-all listener printing every chat line nobody else handled."""
    logger.log_event(
        "chat",
        "message",
        user=client.username,
        channel=client.channel,
        author=message.username,
        text=message.text,
    )


def run_client(
    config: ClientConfig,
    client: TwitchIRCClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: int | None = None,
) -> int:
    """Connect and poll until the connection drops.

    Returns:
        Process exit code: 0 after a clean stop, 1 on connection failure.
    """
    client = client or TwitchIRCClient.from_config(config)
    client.add_listener("", "", log_chat_message)
    with client:
        if not client.connect_from_config():
            return 1
        polls = 0
        while max_polls is None or polls < max_polls:
            if not client.poll():
                return 1
            polls += 1
            sleep(config.poll_interval_seconds)
    return 0


def health_check() -> int:
    try:
        load_config()
    except ConfigError as e:
        logger.log_event(
            "app", "health_check_failed", level=logging.ERROR, error=str(e)
        )
        return 1
    logger.log_event("app", "health_check_passed")
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    LoggerConfigurator().configure()

    if argv and argv[0] == "--health-check":
        return health_check()

    logger.log_event("app", "start")
    try:
        config = load_config()
        logger.log_event(
            "app", "config_loaded", username=config.username, channel=config.channel
        )
        return run_client(config)
    except ConfigError as e:
        log_error("Configuration error", e)
        return 1
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        return 0
    finally:
        logger.log_event("app", "shutdown")


if __name__ == "__main__":
    sys.exit(main())
