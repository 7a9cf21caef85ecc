"""
Plain TCP transport for Twitch IRC using raw sockets
"""

from __future__ import annotations

import logging
import socket

from ..constants import LINE_DELIMITER, SOCKET_CONNECT_TIMEOUT, SOCKET_RECV_BUFFER_SIZE
from ..logs.logger import logger

_DELIMITER = LINE_DELIMITER.encode("ascii")


class SocketLineTransport:
    """Non-blocking socket transport framing inbound data on CRLF.

    The handshake and every send run with a timeout; between sends the
    socket is non-blocking so ``receive_line`` never waits.
    """

    def __init__(
        self,
        connect_timeout: float = SOCKET_CONNECT_TIMEOUT,
        recv_buffer_size: int = SOCKET_RECV_BUFFER_SIZE,
    ) -> None:
        self.connect_timeout = connect_timeout
        self.recv_buffer_size = recv_buffer_size
        self.sock: socket.socket | None = None
        self.connected = False
        self._buffer = b""

    def connect(self, host: str, port: int) -> bool:
        self.close()
        try:
            self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            self.sock.settimeout(self.connect_timeout)
            self.sock.connect((host, port))
            self.sock.setblocking(False)
        except OSError as e:
            logger.log_event(
                "transport",
                "socket_error",
                level=logging.ERROR,
                operation="connect",
                error=str(e),
            )
            self._discard_socket()
            return False
        self.connected = True
        self._buffer = b""
        return True

    def send(self, data: bytes) -> bool:
        if not self.sock or not self.connected:
            return False
        try:
            # Writes wait for buffer space up to the timeout; reads stay non-blocking.
            self.sock.settimeout(self.connect_timeout)
            self.sock.sendall(data)
            self.sock.setblocking(False)
        except OSError as e:
            logger.log_event(
                "transport",
                "socket_error",
                level=logging.ERROR,
                operation="send",
                error=str(e),
            )
            self.connected = False
            return False
        return True

    def receive_line(self) -> str:
        while True:
            line = self._pop_line()
            if line is not None:
                if line:
                    return line
                continue  # blank line between delimiters
            if not self._fill_buffer():
                return ""

    def is_connected(self) -> bool:
        return self.connected and self.sock is not None

    def close(self) -> None:
        self.connected = False
        self._buffer = b""
        self._discard_socket()

    def _pop_line(self) -> str | None:
        if _DELIMITER not in self._buffer:
            return None
        line, self._buffer = self._buffer.split(_DELIMITER, 1)
        return line.decode("utf-8", errors="ignore")

    def _fill_buffer(self) -> bool:
        """Read whatever is available; False when nothing new arrived."""
        if not self.sock or not self.connected:
            return False
        try:
            data = self.sock.recv(self.recv_buffer_size)
        except (BlockingIOError, InterruptedError):
            return False
        except OSError as e:
            logger.log_event(
                "transport",
                "socket_error",
                level=logging.ERROR,
                operation="receive",
                error=str(e),
            )
            self.connected = False
            return False
        if not data:
            logger.log_event("transport", "peer_closed", level=logging.WARNING)
            self.connected = False
            return False
        self._buffer += data
        return True

    def _discard_socket(self) -> None:
        if self.sock:
            try:
                self.sock.close()
            except OSError:
                pass
            self.sock = None
