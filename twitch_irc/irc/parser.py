"""IRC line parsing and outbound line builders."""

from __future__ import annotations

from ..constants import CHAT_COMMAND, KEEPALIVE_PROBE, KEEPALIVE_REPLY
from .models import ChatMessage

# Minimum tokens in a chat line: prefix, command, channel, first word of text
_MIN_CHAT_TOKENS = 4


def _tokenize(line: str) -> list[tuple[int, str]]:
    """Return (offset, token) pairs for every non-empty space separated token."""
    tokens: list[tuple[int, str]] = []
    offset = 0
    for part in line.split(" "):
        if part:
            tokens.append((offset, part))
        offset += len(part) + 1
    return tokens


def parse_chat_line(raw_line: str) -> ChatMessage | None:
    """Parse ``:<nick>!<rest> PRIVMSG #<channel> :<text>`` into a ChatMessage.

    Tokens are split on the ASCII space only; runs of spaces do not produce
    empty tokens. Any line that is not a channel message yields ``None``.
    The returned message is not timestamped.
    """
    tokens = _tokenize(raw_line)
    if len(tokens) < _MIN_CHAT_TOKENS:
        return None
    if tokens[1][1] != CHAT_COMMAND:
        return None

    username = tokens[0][1].split("!", 1)[0]
    if username.startswith(":"):
        username = username[1:]

    text = raw_line[tokens[3][0] :]
    if text.startswith(":"):
        text = text[1:]
    return ChatMessage(timestamp_ms=0, username=username, text=text)


def is_keepalive(line: str) -> bool:
    return line.startswith(KEEPALIVE_PROBE)


def build_keepalive_reply(line: str) -> str:
    """Rewrite the probe command to the reply command, keeping the rest verbatim."""
    return KEEPALIVE_REPLY + line[len(KEEPALIVE_PROBE) :]


def normalize_channel(name: str) -> str:
    return name.strip().lstrip("#").lower()


def build_pass(credential: str) -> str:
    return f"PASS {credential}"


def build_user(username: str) -> str:
    return f"USER {username}"


def build_nick(username: str) -> str:
    return f"NICK {username}"


def build_join(channel: str) -> str:
    return f"JOIN #{channel}"


def build_privmsg(channel: str, text: str) -> str:
    return f"{CHAT_COMMAND} #{channel} :{text}"


def redact_line(line: str) -> str:
    """Hide the credential of a PASS line before it is logged."""
    if line.startswith("PASS "):
        return "PASS ***"
    return line


__all__ = [
    "parse_chat_line",
    "is_keepalive",
    "build_keepalive_reply",
    "normalize_channel",
    "build_pass",
    "build_user",
    "build_nick",
    "build_join",
    "build_privmsg",
    "redact_line",
]
