import logging

from training_programs.config import load_config
from training_programs.logging_config.logging_config import setup_logging
from training_programs.messaging.telegram_handler import TelegramHandler
from training_programs.programs.service import ProgramService
from training_programs.sheets.client import GoogleSheetsClient


# ruff: noqa: D103
def main() -> None:
    # .env may set LOG_DIR, so it has to be loaded before logging is configured
    config = load_config()

    setup_logging(log_dir=config["LOG_DIR"])
    logger = logging.getLogger(__name__)
    logger.info("Starting Training Programs Bot")

    sheets_client = GoogleSheetsClient(
        spreadsheet_id=config["SPREADSHEET_ID"],
        credentials_path=config["GOOGLE_CREDENTIALS"],
    )
    program_service = ProgramService(sheets_client)

    telegram_handler = TelegramHandler(
        token=config["TELEGRAM_BOT_API_KEY"],
        program_service=program_service,
        allowed_user_ids=config["ALLOWED_TELEGRAM_IDS"],
    )

    logger.info("🤖 Starting Telegram bot...")
    telegram_handler.start_polling()


if __name__ == "__main__":
    main()
