import logging
import os

from dotenv import load_dotenv
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

load_dotenv()

db = SQLAlchemy()
login = LoginManager()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return int(raw)


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///store.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # dashboard alert level when no explicit threshold is requested
    LOW_STOCK_THRESHOLD = _env_int("LOW_STOCK_THRESHOLD", 10)
    DEFAULT_ITEM_LOW_STOCK_THRESHOLD = _env_int("DEFAULT_ITEM_LOW_STOCK_THRESHOLD", 5)
    LOAN_PERIOD_DAYS = _env_int("LOAN_PERIOD_DAYS", 30)

    ADMIN_ENABLED = os.getenv("ADMIN_ENABLED", "1") not in ("0", "false", "False")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "DEBUG"
    ADMIN_ENABLED = False


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole app; dao modules use getLogger(__name__)."""
    level = (level or "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    root.setLevel(level)
