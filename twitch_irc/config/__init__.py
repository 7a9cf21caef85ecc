"""Configuration package exports."""

from .loader import load_config  # noqa: F401
from .model import ClientConfig
from .repository import ConfigRepository

__all__ = ["ClientConfig", "ConfigRepository", "load_config"]
