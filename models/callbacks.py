"""
models/callbacks.py
-------------------
Inline keyboard callback identifiers.
"""

from enum import Enum


class HelpTopic(str, Enum):
    """Callback data carried by the /start menu buttons."""

    UPLOAD = "help_upload"
    GET = "help_get"
    GENERAL = "help"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, data: str | None) -> "HelpTopic":
        """Map raw callback data to a topic; anything unrecognised is UNKNOWN."""
        try:
            return cls(data)
        except ValueError:
            return cls.UNKNOWN
