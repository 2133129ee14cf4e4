"""
handlers/file_handler.py
-------------------------
Handles /upload and /file <handle>.
Delegates archiving and delivery to FileService.
"""

from typing import Optional

from telegram import Message, Update
from telegram.ext import ContextTypes

from services.file_service import FileService
from utils.logger import get_logger

logger = get_logger(__name__)
file_service = FileService()

# Message attributes that count as an uploadable file
FILE_ATTRIBUTES = ("document", "photo", "video", "audio", "voice")

NO_FILE_TEXT = "❌ Please send a file with /upload command or reply to a file with /upload"
UPLOAD_FAILED_TEXT = (
    "❌ Error uploading file. Please make sure the bot is admin in the storage channel."
)
FILE_USAGE_TEXT = "⚠️ Usage: /file <ID>\nExample: /file 123456789012"
NOT_FOUND_TEXT = "❌ File not found! Please check the ID and try again."
RETRIEVE_FAILED_TEXT = (
    "❌ Error retrieving file. The file might have been deleted from the channel."
)


def has_file(message: Optional[Message]) -> bool:
    """True if the message carries one of the supported attachments."""
    if message is None:
        return False
    return any(getattr(message, attr, None) for attr in FILE_ATTRIBUTES)


def resolve_file_message(message: Message) -> Optional[Message]:
    """
    Pick the message to archive: the message itself if it has a file,
    otherwise the message it replies to if that one has a file.
    """
    if has_file(message):
        return message
    replied = message.reply_to_message
    if has_file(replied):
        return replied
    return None


async def upload_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /upload - archive the attached or replied-to file.

    Usage:
        send a file with "/upload" as caption
        reply "/upload" to a message carrying a file
    """
    message = update.effective_message
    user = update.effective_user

    target = resolve_file_message(message)
    if target is None:
        await message.reply_text(NO_FILE_TEXT)
        return

    try:
        record = await file_service.archive(context.bot, target, user.id)
    except Exception as e:
        logger.error(f"Upload failed for user {user.id}: {e}")
        await message.reply_text(UPLOAD_FAILED_TEXT)
        return

    logger.info(f"User {user.id} uploaded file {record.handle}")
    await message.reply_text(
        "✅ *File uploaded successfully!*\n\n"
        f"📋 Unique ID: `{record.handle}`\n\n"
        "💡 Share this ID with anyone to access the file\n"
        f"📥 Use: /file {record.handle}",
        parse_mode="Markdown",
    )


async def file_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /file <handle> - copy the archived file into this chat.
    Anyone holding the handle may retrieve the file.
    """
    message = update.effective_message
    handle = " ".join(context.args or []).strip()

    if not handle:
        await message.reply_text(FILE_USAGE_TEXT)
        return

    try:
        record = await file_service.retrieve(context.bot, handle, update.effective_chat.id)
    except Exception as e:
        logger.error(f"Retrieval of {handle!r} failed: {e}")
        await message.reply_text(RETRIEVE_FAILED_TEXT)
        return

    if record is None:
        await message.reply_text(NOT_FOUND_TEXT)
        return

    await message.reply_text(
        f"✅ File retrieved successfully!\n📋 ID: `{handle}`",
        parse_mode="Markdown",
    )
