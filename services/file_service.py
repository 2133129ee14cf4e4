"""
services/file_service.py
-------------------------
Business logic for archiving files in the storage channel and
delivering them back by handle.
"""

import asyncio
from typing import Optional

from telegram import Bot, Message

from config import DB_POOL_MAX, HANDLE_MAX_ATTEMPTS, STORAGE_CHANNEL_ID
from models.file_record import FileRecord
from repositories.file_repo import DuplicateHandleError, FileRepository
from services.handle_generator import generate_handle, is_valid_handle
from utils.logger import get_logger

logger = get_logger(__name__)


class HandleAllocationError(Exception):
    """Raised when no free handle was found within the attempt budget."""

    def __init__(self, attempts: int):
        super().__init__(f"No free handle after {attempts} attempts")
        self.attempts = attempts


class FileService:
    """
    Handles all business logic for archived files.

    Responsibilities:
        - Forward uploads into the storage channel.
        - Allocate a unique handle and persist the record.
        - Copy archived messages back to whoever presents a handle.

    Repository calls are blocking (psycopg2), so they run in a worker
    thread to keep other updates flowing while one waits on the database.
    At most `db_slots` of them run at once so the pool is never asked for
    more connections than it holds.
    """

    def __init__(
        self,
        repo: Optional[FileRepository] = None,
        channel_id: str = STORAGE_CHANNEL_ID,
        max_attempts: int = HANDLE_MAX_ATTEMPTS,
        db_slots: int = DB_POOL_MAX,
    ):
        self.repo = repo or FileRepository()
        self.channel_id = channel_id
        self.max_attempts = max_attempts
        self._db_slots = asyncio.Semaphore(db_slots)

    async def _query(self, func, *args):
        """Run a blocking repository call in a worker thread."""
        async with self._db_slots:
            return await asyncio.to_thread(func, *args)

    async def archive(self, bot: Bot, message: Message, uploader_id: int) -> FileRecord:
        """
        Forward a file-bearing message into the storage channel and register it.

        Args:
            bot: The bot used to forward the message.
            message: The message carrying the file.
            uploader_id: Telegram user ID of the uploader.

        Returns:
            The persisted FileRecord.
        """
        forwarded = await bot.forward_message(
            chat_id=self.channel_id,
            from_chat_id=message.chat_id,
            message_id=message.message_id,
        )
        try:
            return await self.register(forwarded.message_id, uploader_id)
        except Exception:
            # No rollback: the forwarded copy stays in the channel
            logger.error(
                f"Orphaned message {forwarded.message_id} in {self.channel_id} "
                f"(uploader {uploader_id})"
            )
            raise

    async def register(self, archive_message_id: int, uploader_id: int) -> FileRecord:
        """
        Allocate a free handle and persist a record pointing at the archived message.

        A candidate is skipped if it already exists; an insert that still
        collides (a concurrent upload took the same handle) also counts as
        an attempt and triggers regeneration.

        Raises:
            HandleAllocationError: If every attempt collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            handle = generate_handle()
            if await self._query(self.repo.exists, handle):
                logger.warning(f"Handle {handle} already taken (attempt {attempt})")
                continue

            record = FileRecord(
                handle=handle,
                archive_message_id=archive_message_id,
                archive_channel_id=self.channel_id,
                uploader_id=uploader_id,
            )
            try:
                return await self._query(self.repo.add, record)
            except DuplicateHandleError:
                logger.warning(f"Handle {handle} taken concurrently (attempt {attempt})")

        raise HandleAllocationError(self.max_attempts)

    async def find(self, handle: str) -> Optional[FileRecord]:
        """Look up a record; malformed handles are never stored, so skip the query."""
        if not is_valid_handle(handle):
            return None
        return await self._query(self.repo.get_by_handle, handle)

    async def retrieve(self, bot: Bot, handle: str, chat_id: int) -> Optional[FileRecord]:
        """
        Copy the archived message for `handle` into `chat_id`.

        Returns:
            The record that was delivered, or None if the handle is unknown.
        """
        record = await self.find(handle)
        if record is None:
            return None

        await bot.copy_message(
            chat_id=chat_id,
            from_chat_id=record.archive_channel_id,
            message_id=record.archive_message_id,
        )
        logger.info(f"Delivered file {handle} to chat {chat_id}")
        return record
