import logging
from unittest.mock import patch

from training_programs.logging_config.logging_config import setup_logging
from training_programs.main import main


def test_main_configures_logging_from_dotenv(clean_env, tmp_path):
    log_dir = tmp_path / "logs"
    (tmp_path / ".env").write_text(
        "SPREADSHEET_ID=sheet-123\n"
        "GOOGLE_CREDENTIALS=creds.json\n"
        "TELEGRAM_BOT_API_KEY=bot-token\n"
        "ALLOWED_TELEGRAM_IDS=1001\n"
        f"LOG_DIR={log_dir}\n"
    )

    with patch("training_programs.main.setup_logging") as setup, patch(
        "training_programs.main.GoogleSheetsClient"
    ) as sheets_client, patch("training_programs.main.TelegramHandler") as telegram_handler:
        main()

    setup.assert_called_once_with(log_dir=str(log_dir))
    sheets_client.assert_called_once_with(spreadsheet_id="sheet-123", credentials_path="creds.json")
    assert telegram_handler.call_args.kwargs["token"] == "bot-token"
    assert telegram_handler.call_args.kwargs["allowed_user_ids"] == {1001}
    telegram_handler.return_value.start_polling.assert_called_once()


def test_setup_logging_writes_to_given_directory(tmp_path):
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    try:
        setup_logging(app_name="test-bot", log_dir=tmp_path / "logs")
        logging.getLogger("training_programs.test").error("sheet unavailable")

        assert (tmp_path / "logs" / "test-bot.log").exists()
        assert "sheet unavailable" in (tmp_path / "logs" / "test-bot-error.log").read_text()
    finally:
        for handler in root_logger.handlers[len(handlers):]:
            handler.close()
        root_logger.handlers = handlers
        root_logger.setLevel(level)
