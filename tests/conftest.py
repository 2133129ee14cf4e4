"""Pytest configuration and fixtures for FileVault tests."""

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from repositories.file_repo import DuplicateHandleError

STORAGE_CHANNEL = "@test_storage"


class InMemoryFileRepository:
    """Stand-in for FileRepository with the same primary-key behaviour."""

    def __init__(self):
        self.records = {}
        # Handles whose insert fails as if another upload took them first
        self.taken_concurrently = set()

    def exists(self, handle):
        return handle in self.records

    def add(self, record):
        if record.handle in self.records or record.handle in self.taken_concurrently:
            raise DuplicateHandleError(record.handle)
        stored = replace(record, created_at=datetime.now(timezone.utc))
        self.records[record.handle] = stored
        return stored

    def get_by_handle(self, handle):
        return self.records.get(handle)


class FakeBot:
    """Records forward/copy calls and keeps channel contents by message id."""

    def __init__(self):
        self.channels = {}
        self.delivered = []
        self.next_message_id = 1000
        self.forward_message = AsyncMock(side_effect=self._forward)
        self.copy_message = AsyncMock(side_effect=self._copy)
        self.send_message = AsyncMock()

    async def _forward(self, chat_id, from_chat_id, message_id):
        self.next_message_id += 1
        self.channels.setdefault(chat_id, {})[self.next_message_id] = (from_chat_id, message_id)
        return MagicMock(message_id=self.next_message_id)

    async def _copy(self, chat_id, from_chat_id, message_id):
        payload = self.channels[from_chat_id][message_id]
        self.delivered.append((chat_id, payload))
        return MagicMock(message_id=1)


def make_message(
    chat_id=100,
    message_id=1,
    document=None,
    photo=(),
    video=None,
    audio=None,
    voice=None,
    reply_to_message=None,
):
    """Build a Message-like mock with every file attribute set explicitly."""
    message = MagicMock()
    message.chat_id = chat_id
    message.message_id = message_id
    message.document = document
    message.photo = photo
    message.video = video
    message.audio = audio
    message.voice = voice
    message.reply_to_message = reply_to_message
    message.reply_text = AsyncMock()
    return message


def make_update(message=None, user_id=42, chat_id=100, callback_data=None):
    """Build an Update-like mock for a message or a callback query."""
    update = MagicMock()
    update.effective_message = message
    update.effective_user.id = user_id
    update.effective_chat.id = chat_id
    if callback_data is None:
        update.callback_query = None
    else:
        update.callback_query.data = callback_data
        update.callback_query.answer = AsyncMock()
    return update


def make_context(bot, args=None):
    context = MagicMock()
    context.bot = bot
    context.args = args
    return context


@pytest.fixture
def repo():
    return InMemoryFileRepository()


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def service(repo):
    from services.file_service import FileService

    return FileService(repo=repo, channel_id=STORAGE_CHANNEL, max_attempts=5)


@pytest.fixture
def document():
    """A non-empty stand-in for telegram.Document."""
    return MagicMock(file_id="doc-1")
