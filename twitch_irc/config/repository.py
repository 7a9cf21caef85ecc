from __future__ import annotations

import json
import logging
import os
from typing import Any


class ConfigRepository:
    """Reads the JSON configuration file.

    The file holds a single JSON object with the ``ClientConfig`` fields.
    """

    def __init__(self, path: str | os.PathLike[str]):
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)

    def load_raw(self) -> dict[str, Any]:
        """Load the raw configuration mapping.

        Returns:
            The decoded object, or an empty dict when the file is missing,
            unreadable or does not contain a JSON object.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logging.error(f"Configuration load error: {e}")
            return {}
        if not isinstance(data, dict):
            logging.error(f"Configuration file {self.path} must contain a JSON object")
            return {}
        return data
