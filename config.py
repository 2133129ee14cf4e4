"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# Private channel used as the file archive. The bot must be an admin there.
STORAGE_CHANNEL_ID: str = os.getenv("STORAGE_CHANNEL_ID", "@your_storage_channel")

# Promotional asset copied into the chat on /start
WELCOME_CHAT_ID: str = os.getenv("WELCOME_CHAT_ID", "@sourceui")
WELCOME_MESSAGE_ID: int = int(os.getenv("WELCOME_MESSAGE_ID", "5"))

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "file_vault")
DB_USER: str = os.getenv("DB_USER", "file_vault_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# Upper bound of open connections; also caps concurrent queries
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "10"))

# ── Handles ───────────────────────────────────────────────
HANDLE_LENGTH: int = 12
HANDLE_MAX_ATTEMPTS: int = int(os.getenv("HANDLE_MAX_ATTEMPTS", "10"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
