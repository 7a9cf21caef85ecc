"""Rate limited outbound gate with a FIFO deferral queue."""

from __future__ import annotations

import logging
from collections import deque

from ..constants import DEFAULT_MIN_SEND_INTERVAL_MS, LINE_DELIMITER
from ..errors.internal import ClientError
from ..logs.logger import logger
from ..transport.protocols import LineTransport
from ..utils.clock import Clock, monotonic_millis
from .models import SendResult
from .parser import redact_line


class RateLimitedSender:
    """Every outbound line goes through ``send``.

    A line is transmitted immediately when the caller disobeys the limit or
    when more than ``min_interval_ms`` elapsed since the last transmission.
    Otherwise it is queued (``should_queue``) or dropped.
    """

    def __init__(
        self,
        transport: LineTransport,
        clock: Clock = monotonic_millis,
        min_interval_ms: int = DEFAULT_MIN_SEND_INTERVAL_MS,
    ) -> None:
        self.transport = transport
        self.clock = clock
        self._min_interval_ms = 0
        self.min_interval_ms = min_interval_ms
        # None until the first transmission so the first limited send passes.
        self.last_send_ms: int | None = None
        self._queue: deque[str] = deque()
        self.sent_count = 0
        self.queued_count = 0
        self.dropped_count = 0

    @property
    def min_interval_ms(self) -> int:
        return self._min_interval_ms

    @min_interval_ms.setter
    def min_interval_ms(self, value: int) -> None:
        if value < 0:
            raise ValueError("min_interval_ms must be >= 0")
        self._min_interval_ms = int(value)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._queue)

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def clear_pending(self) -> int:
        count = len(self._queue)
        self._queue.clear()
        return count

    def interval_elapsed(self) -> bool:
        if self.last_send_ms is None:
            return True
        return self.clock() - self.last_send_ms > self._min_interval_ms

    def send(
        self, raw: str, disobey_timeout: bool = False, should_queue: bool = False
    ) -> SendResult:
        if not self.transport.is_connected():
            logger.log_event(
                "irc", "not_connected", level=logging.WARNING, operation="send"
            )
            return SendResult(
                sent=False, error=ClientError.UNABLE_TO_CONNECT, detail="not connected"
            )

        if disobey_timeout or self.interval_elapsed():
            return self._transmit(raw)

        if should_queue:
            self._queue.append(raw)
            self.queued_count += 1
            logger.log_event(
                "send", "queued", level=logging.DEBUG, pending=len(self._queue)
            )
            return SendResult(sent=False, queued=True)

        self.dropped_count += 1
        logger.log_event("send", "dropped", level=logging.DEBUG, line=redact_line(raw))
        return SendResult(sent=False)

    def drain_one(self) -> SendResult | None:
        """Try the oldest queued line once; it stays at the front unless sent."""
        if not self._queue:
            return None
        if not self.interval_elapsed():
            return SendResult(sent=False, queued=True)
        result = self.send(self._queue[0])
        if result.sent:
            self._queue.popleft()
            logger.log_event(
                "send", "queue_drained", level=logging.DEBUG, pending=len(self._queue)
            )
        return result

    def _transmit(self, raw: str) -> SendResult:
        if not self.transport.send(f"{raw}{LINE_DELIMITER}".encode("utf-8")):
            logger.log_event(
                "send", "transport_failed", level=logging.ERROR, line=redact_line(raw)
            )
            return SendResult(
                sent=False,
                error=ClientError.UNABLE_TO_CONNECT,
                detail="transport send failed",
            )
        self.last_send_ms = self.clock()
        self.sent_count += 1
        logger.log_event("send", "sent", level=logging.DEBUG, line=redact_line(raw))
        return SendResult(sent=True)
