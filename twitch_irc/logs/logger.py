"""Structured event logger used by the client modules."""

from __future__ import annotations

import logging

from ..logging_config import debug_enabled


class ClientLogger:
    """Emits ``<domain>_<action>`` events through a stdlib logger.

    Handlers are not installed here; the application decides where records
    go (see ``LoggerConfigurator``). Human text is taken from the event
    template catalog when ``human`` is not given.
    """

    EVENT_NAME_WIDTH = 32
    PREFIX_WIDTH = 24

    def __init__(self, name: str = "twitch_irc") -> None:
        self.logger = logging.getLogger(name)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            # Local import to avoid cyclic import issues during module init.
            from .event_catalog import EVENT_TEMPLATES as _event_templates

            template = _event_templates.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        user_o = kw.pop("user", None)
        channel_o = kw.pop("channel", None)
        user = user_o if isinstance(user_o, str) else None
        channel = channel_o if isinstance(channel_o, str) else None
        prefix = self._build_prefix(user, channel)
        if debug_enabled():
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @classmethod
    def _build_prefix(cls, user: str | None, channel: str | None) -> str:
        user_label = user or "system"
        core = f"{user_label}#{channel}" if channel else user_label
        padded = core.ljust(cls.PREFIX_WIDTH)[: cls.PREFIX_WIDTH]
        return f"[{padded}]"

    @classmethod
    def _build_debug_message(
        cls,
        event_name: str,
        prefix: str,
        human_text: str,
        kwargs: dict[str, object],
    ) -> str:
        width = cls.EVENT_NAME_WIDTH
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:  # truncate but keep rightmost indicator
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix} {human_text}"
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        if context:
            base = f"{base} ({context})"
        return base


logger = ClientLogger()
