"""Routes parsed chat messages to the registered listeners."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..logs.logger import logger
from .models import ChatMessage, ListenerEntry
from .registry import ListenerRegistry

if TYPE_CHECKING:  # pragma: no cover
    from .client import TwitchIRCClient

# Shorter names or search strings never match.
MIN_MATCH_LENGTH = 2


@dataclass(slots=True)
class DispatchOutcome:
    fired: list[str] = field(default_factory=list)
    catch_all_fired: bool = False
    errors: int = 0

    @property
    def handled(self) -> bool:
        return bool(self.fired) or self.catch_all_fired


def is_eligible(entry: ListenerEntry) -> bool:
    return len(entry.name) >= MIN_MATCH_LENGTH and len(entry.search) >= MIN_MATCH_LENGTH


def matches(entry: ListenerEntry, message: ChatMessage) -> bool:
    return is_eligible(entry) and entry.search in message.text


class ChatDispatcher:
    """Invokes every matching named listener, else the catch-all.

    Matching is inclusive: all eligible listeners whose search text occurs in
    the message text fire. A handler that raises is logged and counted and
    the remaining listeners still run, unless ``propagate_handler_errors`` is
    set, in which case the exception reaches the caller of ``dispatch``.
    """

    def __init__(
        self,
        registry: ListenerRegistry,
        client: TwitchIRCClient | None = None,
        propagate_handler_errors: bool = False,
    ) -> None:
        self.registry = registry
        self.client = client
        self.propagate_handler_errors = propagate_handler_errors
        self.handler_errors = 0

    def dispatch(self, message: ChatMessage) -> DispatchOutcome:
        outcome = DispatchOutcome()
        for entry in self.registry.named_entries():
            if matches(entry, message):
                outcome.fired.append(entry.name)
                self._invoke(entry, message, outcome)

        if not outcome.fired:
            catch_all = self.registry.catch_all
            if catch_all is not None:
                outcome.catch_all_fired = True
                logger.log_event(
                    "dispatch", "catch_all", level=logging.DEBUG, user=message.username
                )
                self._invoke(catch_all, message, outcome)
        return outcome

    def _invoke(
        self, entry: ListenerEntry, message: ChatMessage, outcome: DispatchOutcome
    ) -> Any:
        try:
            return entry.handler(message, self.client)
        except Exception as e:  # noqa: BLE001
            if self.propagate_handler_errors:
                raise
            outcome.errors += 1
            self.handler_errors += 1
            logger.log_event(
                "dispatch",
                "handler_error",
                level=logging.ERROR,
                user=message.username,
                name=entry.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
