import os
from pathlib import Path

from dotenv import load_dotenv

from .log import get_logger
from .models import TransactionStatus

# Load environment variables from a .env file at the project root, if any
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.APP_NAME = os.environ.get("APP_NAME", "txn-repair")
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
        self.DEFAULT_SELECTED_STATUS = _parse_status(
            os.environ.get("DEFAULT_SELECTED_STATUS", TransactionStatus.DECLINED.value)
        )

    def __repr__(self):
        return (
            f"Settings(APP_NAME={self.APP_NAME}, LOG_LEVEL={self.LOG_LEVEL}, "
            f"DEFAULT_SELECTED_STATUS={self.DEFAULT_SELECTED_STATUS.value})"
        )


def _parse_status(raw: str) -> TransactionStatus:
    try:
        return TransactionStatus(raw.strip().upper())
    except ValueError:
        get_logger().warning(
            f"Ignoring DEFAULT_SELECTED_STATUS={raw!r}; expected one of "
            f"{', '.join(s.value for s in TransactionStatus)}"
        )
        return TransactionStatus.DECLINED


settings = Settings()
