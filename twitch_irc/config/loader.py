"""Configuration loading utilities."""

from __future__ import annotations

import os
from typing import Any

from pydantic import ValidationError

from ..errors.internal import ConfigError
from .model import ClientConfig
from .repository import ConfigRepository

CONFIG_FILE_ENV = "TWITCH_IRC_CONF_FILE"
DEFAULT_CONFIG_FILE = "twitch_irc.conf"

# Environment variables overlaid on top of the file contents
ENV_OVERRIDES = {
    "TWITCH_IRC_USERNAME": "username",
    "TWITCH_IRC_OAUTH": "oauth_token",
    "TWITCH_IRC_CHANNEL": "channel",
}


def config_path() -> str:
    return os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)


def apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    merged = dict(raw)
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            merged[field_name] = value
    return merged


def load_config(path: str | os.PathLike[str] | None = None) -> ClientConfig:
    """Load and validate the client configuration.

    Args:
        path: Config file path; defaults to ``$TWITCH_IRC_CONF_FILE`` or
            ``twitch_irc.conf``. A missing file is allowed when the
            environment supplies the required fields.

    Raises:
        ConfigError: If the merged settings do not validate.
    """
    source = str(path) if path is not None else config_path()
    raw = apply_env_overrides(ConfigRepository(source).load_raw())
    try:
        return ClientConfig.from_dict(raw)
    except ValidationError as e:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
        raise ConfigError(
            f"Invalid configuration in {source}: {', '.join(fields)}",
            data={"path": source, "fields": fields},
        ) from e
