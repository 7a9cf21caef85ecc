"""Twitch chat client: handshake, channel join and the cooperative poll cycle."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..config.model import ClientConfig
from ..constants import DEFAULT_MIN_SEND_INTERVAL_MS
from ..errors.internal import ClientError
from ..logs.logger import logger
from ..transport.protocols import LineTransport
from ..transport.socket_transport import SocketLineTransport
from ..utils.clock import Clock, monotonic_millis
from .dispatcher import ChatDispatcher
from .models import ClientResult, ConnectionState, MessageHandler, PollResult, SendResult
from .parser import (
    build_join,
    build_keepalive_reply,
    build_nick,
    build_pass,
    build_privmsg,
    build_user,
    is_keepalive,
    normalize_channel,
    parse_chat_line,
)
from .registry import ListenerRegistry
from .sender import RateLimitedSender


class TwitchIRCClient:
    """One connection, one channel, driven by repeated ``poll()`` calls.

    Nothing runs in the background: ``connect`` performs the handshake
    synchronously and every ``poll`` drains the inbound lines that are
    available right now, then tries to send one queued line. All methods
    must be called from the thread that drives ``poll``.
    """

    def __init__(
        self,
        transport: LineTransport | None = None,
        clock: Clock = monotonic_millis,
        min_send_interval_ms: int = DEFAULT_MIN_SEND_INTERVAL_MS,
        registry: ListenerRegistry | None = None,
        propagate_handler_errors: bool = False,
    ) -> None:
        self.transport: LineTransport = transport or SocketLineTransport()
        self.clock = clock
        self.registry = registry if registry is not None else ListenerRegistry()
        self.sender = RateLimitedSender(self.transport, clock, min_send_interval_ms)
        self.dispatcher = ChatDispatcher(
            self.registry, self, propagate_handler_errors=propagate_handler_errors
        )
        self.config: ClientConfig | None = None

        self.state = ConnectionState.UNCONNECTED
        self.host: str | None = None
        self.port: int | None = None
        self.username: str | None = None
        self.channel: str | None = None

        self.lines_received = 0
        self.messages_dispatched = 0
        self.keepalives_answered = 0

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: LineTransport | None = None, **kwargs: Any
    ) -> TwitchIRCClient:
        if transport is None:
            transport = SocketLineTransport(connect_timeout=config.connect_timeout)
        client = cls(
            transport=transport,
            min_send_interval_ms=config.min_send_interval_ms,
            **kwargs,
        )
        client.config = config
        return client

    def __enter__(self) -> TwitchIRCClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Rate limit settings
    # ------------------------------------------------------------------ #
    @property
    def min_send_interval_ms(self) -> int:
        return self.sender.min_interval_ms

    @min_send_interval_ms.setter
    def min_send_interval_ms(self, millis: int) -> None:
        self.sender.min_interval_ms = millis
        logger.log_event(
            "send",
            "interval_changed",
            level=logging.DEBUG,
            user=self.username,
            interval_ms=self.sender.min_interval_ms,
        )

    @property
    def pending_count(self) -> int:
        return self.sender.pending_count

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED and self.transport.is_connected()

    # ------------------------------------------------------------------ #
    # Connection
    # ------------------------------------------------------------------ #
    def connect(self, host: str, port: int, username: str, oauth: str) -> ClientResult:
        """Open the transport and send PASS, USER and NICK.

        The handshake is fire-and-forget: no server reply is awaited.
        """
        self.host, self.port, self.username = host, port, username
        self.state = ConnectionState.CONNECTING
        logger.log_event("irc", "connect_start", user=username, host=host, port=port)

        if not self.transport.connect(host, port):
            self.state = ConnectionState.UNCONNECTED
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                user=username,
                host=host,
                port=port,
            )
            return ClientResult.failure(
                ClientError.UNABLE_TO_CONNECT, f"unable to connect to {host}:{port}"
            )

        self.state = ConnectionState.CONNECTED
        logger.log_event("irc", "connected", user=username, host=host, port=port)

        for line in (build_pass(oauth), build_user(username), build_nick(username)):
            result = self.sender.send(line, disobey_timeout=True)
            if result.error is not None:
                self._note_disconnect()
                return ClientResult.failure(result.error, result.detail)
        logger.log_event("irc", "auth_sent", level=logging.DEBUG, user=username)
        return ClientResult.success()

    def connect_from_config(self) -> ClientResult:
        """Connect with the stored config, then join its channel."""
        if self.config is None:
            raise ValueError("client was not created from a config")
        cfg = self.config
        result = self.connect(cfg.host, cfg.port, cfg.username, cfg.oauth_token)
        if not result:
            return result
        joined = self.join_channel(cfg.channel)
        if joined.error is not None:
            return ClientResult.failure(joined.error, joined.detail)
        return result

    def join_channel(self, name: str) -> SendResult:
        self.channel = normalize_channel(name)
        logger.log_event("irc", "join", user=self.username, target=self.channel)
        return self.send(build_join(self.channel), disobey_timeout=True)

    def close(self) -> None:
        was_open = self.state is not ConnectionState.CLOSED
        self.transport.close()
        self.state = ConnectionState.CLOSED
        if was_open:
            logger.log_event("irc", "closed", user=self.username)

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #
    def send(
        self, raw: str, disobey_timeout: bool = False, should_queue: bool = False
    ) -> SendResult:
        result = self.sender.send(
            raw, disobey_timeout=disobey_timeout, should_queue=should_queue
        )
        if result.error is ClientError.UNABLE_TO_CONNECT:
            self._note_disconnect()
        return result

    def send_channel_message(
        self, text: str, disobey_timeout: bool = False, should_queue: bool = False
    ) -> SendResult:
        if not self.channel:
            logger.log_event(
                "send", "no_channel", level=logging.WARNING, user=self.username
            )
            return SendResult(sent=False, detail="no channel joined")
        return self.send(
            build_privmsg(self.channel, text),
            disobey_timeout=disobey_timeout,
            should_queue=should_queue,
        )

    def clear_pending(self) -> int:
        return self.sender.clear_pending()

    # ------------------------------------------------------------------ #
    # Listeners
    # ------------------------------------------------------------------ #
    def add_listener(self, name: str, search: str, handler: MessageHandler) -> None:
        self.registry.register(name, search, handler)

    def remove_listener(self, name: str) -> bool:
        return self.registry.unregister(name)

    def clear_listeners(self) -> None:
        self.registry.clear()

    def listener(
        self, name: str, search: str = ""
    ) -> Callable[[MessageHandler], MessageHandler]:
        """Decorator form of ``add_listener``."""

        def decorator(handler: MessageHandler) -> MessageHandler:
            self.add_listener(name, search, handler)
            return handler

        return decorator

    # ------------------------------------------------------------------ #
    # Poll cycle
    # ------------------------------------------------------------------ #
    def poll(self) -> PollResult:
        if not self.transport.is_connected():
            self._note_disconnect()
            logger.log_event(
                "irc", "not_connected", level=logging.WARNING, operation="poll"
            )
            return PollResult(
                ok=False, error=ClientError.UNABLE_TO_CONNECT, detail="not connected"
            )

        lines_read = 0
        keepalives = 0
        dispatched = []
        line = self.transport.receive_line()
        while line:
            lines_read += 1
            self.lines_received += 1
            if is_keepalive(line):
                keepalives += 1
                self._answer_keepalive(line)
            else:
                logger.log_event("irc", "raw", level=logging.DEBUG, line=line)
                message = parse_chat_line(line)
                if message is not None:
                    message = message.with_timestamp(self.clock())
                    logger.log_event(
                        "irc",
                        "privmsg",
                        level=logging.DEBUG,
                        user=self.username,
                        channel=self.channel,
                        author=message.username,
                        text=message.text,
                    )
                    self.dispatcher.dispatch(message)
                    self.messages_dispatched += 1
                    dispatched.append(message)
            line = self.transport.receive_line()

        if not self.transport.is_connected():
            # Dropped or closed by a handler while reading; keep the queue.
            self._note_disconnect()
            return PollResult(
                ok=False,
                error=ClientError.UNABLE_TO_CONNECT,
                detail="connection closed during poll",
                lines_read=lines_read,
                keepalives=keepalives,
                dispatched=dispatched,
            )

        drain = self.sender.drain_one()
        return PollResult(
            ok=True,
            lines_read=lines_read,
            keepalives=keepalives,
            dispatched=dispatched,
            drained=bool(drain),
        )

    def _answer_keepalive(self, line: str) -> None:
        result = self.sender.send(build_keepalive_reply(line), disobey_timeout=True)
        if result.sent:
            self.keepalives_answered += 1
            logger.log_event("irc", "keepalive", level=logging.DEBUG, user=self.username)

    def _note_disconnect(self) -> None:
        if self.state is ConnectionState.CONNECTED and not self.transport.is_connected():
            self.state = ConnectionState.CLOSED
            logger.log_event(
                "irc", "connection_lost", level=logging.WARNING, user=self.username
            )

    def get_stats(self) -> dict[str, object]:
        return {
            "state": self.state.name,
            "connected": self.connected,
            "channel": self.channel,
            "lines_received": self.lines_received,
            "messages_dispatched": self.messages_dispatched,
            "keepalives_answered": self.keepalives_answered,
            "sent": self.sender.sent_count,
            "queued": self.sender.queued_count,
            "dropped": self.sender.dropped_count,
            "pending": self.sender.pending_count,
            "handler_errors": self.dispatcher.handler_errors,
            "min_send_interval_ms": self.sender.min_interval_ms,
        }
