"""
handlers/start_handler.py
--------------------------
Handles /start, /help and the inline help buttons.
Stateless: nothing here touches the database.
"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from config import WELCOME_CHAT_ID, WELCOME_MESSAGE_ID
from models.callbacks import HelpTopic
from utils.logger import get_logger

logger = get_logger(__name__)

WELCOME_TEXT = "Welcome to our bot! 🌸 The ultimate cloud ☁️!"

UPLOAD_HELP_TEXT = (
    "📤 *Upload File*\n\n"
    "Send any file with /upload command or tag the file with /upload\n\n"
    "Example:\n"
    "• Send file + /upload in caption\n"
    "• Or reply to file with /upload"
)

GET_HELP_TEXT = (
    "📥 *Get File*\n\n"
    "Use /file command with unique ID\n\n"
    "Example:\n"
    "• /file 123456789012"
)

GENERAL_HELP_TEXT = (
    "💡 *How to use this bot*\n\n"
    "1️⃣ Upload: Send file with /upload\n"
    "2️⃣ Get unique ID after upload\n"
    "3️⃣ Share ID with anyone\n"
    "4️⃣ Anyone can access file using /file <ID>"
)

# Every topic is listed; UNKNOWN sends nothing.
HELP_BLOCKS: dict[HelpTopic, str | None] = {
    HelpTopic.UPLOAD: UPLOAD_HELP_TEXT,
    HelpTopic.GET: GET_HELP_TEXT,
    HelpTopic.GENERAL: GENERAL_HELP_TEXT,
    HelpTopic.UNKNOWN: None,
}


def main_menu() -> InlineKeyboardMarkup:
    """Inline keyboard shown under the welcome message."""
    return InlineKeyboardMarkup([
        [InlineKeyboardButton("📤 Upload File", callback_data=HelpTopic.UPLOAD.value)],
        [InlineKeyboardButton("📥 Get File", callback_data=HelpTopic.GET.value)],
        [InlineKeyboardButton("💡 Help", callback_data=HelpTopic.GENERAL.value)],
    ])


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start - send the welcome asset and the help menu."""
    chat_id = update.effective_chat.id
    user = update.effective_user
    logger.info(f"User {user.id if user else '?'} started the bot in chat {chat_id}.")

    try:
        await context.bot.copy_message(
            chat_id=chat_id,
            from_chat_id=WELCOME_CHAT_ID,
            message_id=WELCOME_MESSAGE_ID,
        )
        await context.bot.send_message(chat_id, WELCOME_TEXT, reply_markup=main_menu())
    except TelegramError as e:
        logger.warning(f"Welcome asset failed for chat {chat_id}: {e}")
        await context.bot.send_message(chat_id, WELCOME_TEXT)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help - show the general usage block."""
    await update.effective_message.reply_text(GENERAL_HELP_TEXT, parse_mode="Markdown")


async def help_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle presses on the /start menu buttons.

    The query is always answered, even when the data is unknown or
    sending the help text fails, so the client stops its spinner.
    """
    query = update.callback_query
    topic = HelpTopic.parse(query.data)
    try:
        text = HELP_BLOCKS[topic]
        if text is None:
            logger.debug(f"Ignoring unknown callback data {query.data!r}")
        else:
            await context.bot.send_message(
                update.effective_chat.id, text, parse_mode="Markdown"
            )
    finally:
        await query.answer()
