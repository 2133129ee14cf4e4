"""Tests for application wiring and process lifecycle."""

from unittest.mock import MagicMock

import psycopg2
import pytest
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, MessageHandler

import main
from handlers.file_handler import file_command, upload_command
from handlers.start_handler import help_callback

TOKEN = "123456:TEST-TOKEN"


@pytest.fixture
def polling(monkeypatch):
    """Replace run_polling so main() returns instead of blocking."""
    run_polling = MagicMock()
    monkeypatch.setattr(Application, "run_polling", run_polling)
    return run_polling


class TestBuildApplication:
    """Tests for handler registration."""

    def test_registers_every_handler(self):
        app = main.build_application(TOKEN)
        handlers = app.handlers[0]

        commands = {
            command
            for handler in handlers
            if isinstance(handler, CommandHandler)
            for command in handler.commands
        }
        assert commands == {"start", "help", "upload", "file"}

        mention_uploads = [h for h in handlers if isinstance(h, MessageHandler)]
        assert [h.callback for h in mention_uploads] == [upload_command]
        assert any(isinstance(h, CallbackQueryHandler) and h.callback is help_callback for h in handlers)
        assert any(isinstance(h, CommandHandler) and h.callback is file_command for h in handlers)
        assert main.error_handler in app.error_handlers

    @pytest.mark.parametrize("text", [
        "/upload",
        "/upload@FileVaultBot my notes",
        "holiday photos /upload",
        "tagged\n/upload",
    ])
    def test_upload_mention_matches(self, text):
        assert main.UPLOAD_MENTION.search(text)

    @pytest.mark.parametrize("text", ["/uploads", "x/upload", "/uploader here", "upload"])
    def test_upload_mention_rejects(self, text):
        assert not main.UPLOAD_MENTION.search(text)

    @pytest.mark.asyncio
    async def test_shutdown_hook_closes_pool(self, monkeypatch):
        close_pool = MagicMock()
        monkeypatch.setattr(main, "close_pool", close_pool)
        app = main.build_application(TOKEN)

        await app.post_shutdown(app)

        close_pool.assert_called_once_with()


class TestMain:
    """Tests for startup behaviour."""

    def test_missing_token_exits(self, monkeypatch, polling):
        monkeypatch.setattr(main, "TELEGRAM_BOT_TOKEN", "")

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 1
        polling.assert_not_called()

    def test_polls_even_if_database_is_down(self, monkeypatch, polling, caplog):
        def unreachable():
            raise psycopg2.OperationalError("could not connect to server")

        create_tables = MagicMock()
        monkeypatch.setattr(main, "TELEGRAM_BOT_TOKEN", TOKEN)
        monkeypatch.setattr(main, "init_pool", unreachable)
        monkeypatch.setattr(main, "create_tables", create_tables)

        main.main()

        polling.assert_called_once()
        create_tables.assert_not_called()
        assert "Database unavailable at startup" in caplog.text

    def test_healthy_startup_creates_schema(self, monkeypatch, polling):
        init_pool = MagicMock()
        create_tables = MagicMock()
        monkeypatch.setattr(main, "TELEGRAM_BOT_TOKEN", TOKEN)
        monkeypatch.setattr(main, "init_pool", init_pool)
        monkeypatch.setattr(main, "create_tables", create_tables)

        main.main()

        init_pool.assert_called_once_with()
        create_tables.assert_called_once_with()
        polling.assert_called_once()


@pytest.mark.asyncio
async def test_error_handler_logs_traceback(caplog):
    try:
        raise ValueError("boom")
    except ValueError as e:
        error = e
    context = MagicMock(error=error)

    await main.error_handler("update-1", context)

    record = caplog.records[-1]
    assert record.levelname == "ERROR"
    assert record.exc_info[1] is error
