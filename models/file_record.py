"""
models/file_record.py
---------------------
Domain model for an archived file.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FileRecord:
    """
    Maps a public handle to the archived message in the storage channel.

    Attributes:
        handle: 12-digit public identifier users exchange.
        archive_message_id: Message id inside the storage channel.
        archive_channel_id: Channel holding the archived message.
        uploader_id: Telegram user ID of the uploader.
        created_at: Set by the database on insert (None before persisting).
    """
    handle: str
    archive_message_id: int
    archive_channel_id: str
    uploader_id: int
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"{self.handle} -> {self.archive_channel_id}/{self.archive_message_id}"
