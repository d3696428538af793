import os
from typing import Iterable, Optional, Set, TypedDict

from dotenv import find_dotenv, load_dotenv

from training_programs.logging_config.logging_config import DEFAULT_LOG_DIR

BOT_REQUIRED_VARS = ("SPREADSHEET_ID", "GOOGLE_CREDENTIALS", "TELEGRAM_BOT_API_KEY")
API_REQUIRED_VARS = ("SPREADSHEET_ID", "GOOGLE_CREDENTIALS")


class AppConfig(TypedDict):
    """Configuration for the application"""

    SPREADSHEET_ID: str
    GOOGLE_CREDENTIALS: str
    TELEGRAM_BOT_API_KEY: Optional[str]
    ALLOWED_TELEGRAM_IDS: Set[int]
    LOG_DIR: str


def parse_telegram_ids(raw: Optional[str]) -> Set[int]:
    """Parse a comma separated list of Telegram user ids"""
    if not raw:
        return set()
    return {int(part) for part in raw.split(",") if part.strip()}


def load_config(required: Iterable[str] = BOT_REQUIRED_VARS) -> AppConfig:
    """Load configuration from the .env file in the working directory and the environment"""
    load_dotenv(find_dotenv(usecwd=True))

    config = {
        "SPREADSHEET_ID": os.getenv("SPREADSHEET_ID"),
        "GOOGLE_CREDENTIALS": os.getenv("GOOGLE_CREDENTIALS"),
        "TELEGRAM_BOT_API_KEY": os.getenv("TELEGRAM_TEST_BOT_API_KEY") or os.getenv("TELEGRAM_BOT_API_KEY"),
        "LOG_DIR": os.getenv("LOG_DIR") or DEFAULT_LOG_DIR,
    }

    missing = [name for name in required if not config.get(name)]
    if missing:
        raise OSError(f"Missing required environment variables: {', '.join(missing)}")

    try:
        config["ALLOWED_TELEGRAM_IDS"] = parse_telegram_ids(os.getenv("ALLOWED_TELEGRAM_IDS"))
    except ValueError as e:
        raise OSError(f"ALLOWED_TELEGRAM_IDS must be comma separated integers: {e}") from e

    return config
