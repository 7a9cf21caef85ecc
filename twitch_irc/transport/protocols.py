"""Protocol definition for the byte stream collaborator.

The client only depends on this surface, so tests and hosts can supply any
object that frames lines and reports connectivity.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LineTransport(Protocol):
    """Protocol for a line framed, non-blocking transport."""

    def connect(self, host: str, port: int) -> bool:
        """Open the connection; return False when it cannot be established."""
        ...

    def send(self, data: bytes) -> bool:
        """Write raw bytes; return False when nothing could be written."""
        ...

    def receive_line(self) -> str:
        """Return one complete line without delimiter, or "" if none is buffered."""
        ...

    def is_connected(self) -> bool:
        """Report whether the connection is usable."""
        ...

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        ...
