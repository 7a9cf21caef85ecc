"""Named chat listeners."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from ..constants import CATCH_ALL_LISTENER
from ..logs.logger import logger
from .models import ListenerEntry, MessageHandler


class ListenerRegistry:
    """Maps a unique listener name to its search text and handler.

    Registering an existing name replaces it. The entry stored under the
    empty name is the catch-all.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ListenerEntry] = {}

    def register(self, name: str, search: str, handler: MessageHandler) -> None:
        self._entries[name] = ListenerEntry(name=name, search=search, handler=handler)
        logger.log_event(
            "dispatch", "listener_registered", level=logging.DEBUG, name=name
        )

    def unregister(self, name: str) -> bool:
        removed = self._entries.pop(name, None) is not None
        if removed:
            logger.log_event(
                "dispatch", "listener_removed", level=logging.DEBUG, name=name
            )
        return removed

    def clear(self) -> None:
        self._entries.clear()
        logger.log_event("dispatch", "listeners_cleared", level=logging.DEBUG)

    def get(self, name: str) -> ListenerEntry | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return list(self._entries)

    @property
    def catch_all(self) -> ListenerEntry | None:
        return self._entries.get(CATCH_ALL_LISTENER)

    def named_entries(self) -> list[ListenerEntry]:
        """Snapshot of every entry except the catch-all."""
        return [e for n, e in self._entries.items() if n != CATCH_ALL_LISTENER]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ListenerEntry]:
        return iter(list(self._entries.values()))
