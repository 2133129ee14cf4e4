"""
main.py
-------
Entry point for the FileVault Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
    - Close the pool when the application shuts down.
"""

import re
import sys

import psycopg2
from telegram import BotCommand, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command, help_callback
from handlers.file_handler import upload_command, file_command
from utils.logger import get_logger

logger = get_logger(__name__)

# "/upload" anywhere in a caption, or in a text reply that is not itself a command
UPLOAD_MENTION = re.compile(r"(^|\s)/upload(@\w+)?(\s|$)")
UPLOAD_CAPTION = filters.CaptionRegex(UPLOAD_MENTION)
UPLOAD_TEXT = filters.TEXT & ~filters.COMMAND & filters.Regex(UPLOAD_MENTION)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("start", "🚀 Start the bot"),
        BotCommand("upload", "📤 Upload the attached or replied file"),
        BotCommand("file", "📥 Get a file by its ID"),
        BotCommand("help", "💡 How to use this bot"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


async def shutdown(application: Application) -> None:
    """Release the database pool once polling has stopped."""
    close_pool()


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log any exception that escaped a handler."""
    logger.error(
        f"Unhandled error while processing update {update}: {context.error}",
        exc_info=context.error,
    )


def build_application(token: str) -> Application:
    """Build the Telegram application and register every handler."""
    app = (
        Application.builder()
        .token(token)
        .concurrent_updates(True)
        .post_init(set_bot_commands)
        .post_shutdown(shutdown)
        .build()
    )

    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    app.add_handler(CommandHandler("upload", upload_command))
    app.add_handler(MessageHandler(UPLOAD_CAPTION | UPLOAD_TEXT, upload_command))
    app.add_handler(CommandHandler("file", file_command))
    app.add_handler(CallbackQueryHandler(help_callback))
    app.add_error_handler(error_handler)
    return app


def main() -> None:
    """Initialize and run the bot."""

    if not TELEGRAM_BOT_TOKEN:
        logger.critical("TELEGRAM_BOT_TOKEN is not set.")
        sys.exit(1)

    # ── 1. Database setup ─────────────────────────────────
    # Handlers report a generic error until the database is reachable.
    logger.info("Initializing database...")
    try:
        init_pool()
        create_tables()
    except psycopg2.Error as e:
        logger.error(f"Database unavailable at startup: {e}")

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = build_application(TELEGRAM_BOT_TOKEN)

    # ── 3. Start polling ──────────────────────────────────
    logger.info("🤖 FileVault is running! Press Ctrl+C to stop.")
    app.run_polling(
        drop_pending_updates=True,
        allowed_updates=[Update.MESSAGE, Update.CALLBACK_QUERY],
    )
    logger.info("FileVault stopped.")


if __name__ == "__main__":
    main()
