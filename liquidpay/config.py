import logging
import os
import sys
from pathlib import Path

import structlog
from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

BACKEND_URL = os.getenv("LIQUIDPAY_BACKEND_URL", "http://localhost:8080")
BACKEND_TIMEOUT = float(os.getenv("LIQUIDPAY_BACKEND_TIMEOUT", "15"))

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

CHECKOUT_DESCRIPTION = "LiquidPay Payment"
CHECKOUT_THEME_COLOR = "#4C6EF5"
PREFILL_EMAIL = os.getenv("LIQUIDPAY_PREFILL_EMAIL", "test@example.com")

# Gives the vendor checkout sheet time to dismiss before the success view appears
SUCCESS_SCREEN_DELAY = float(os.getenv("LIQUIDPAY_SUCCESS_DELAY", "0.5"))


def get_log_level() -> str:
    env = (os.getenv("ENV") or "development").lower()
    level_map = {
        "production": "INFO",
        "staging": "INFO",
        "development": "DEBUG",
        "test": "WARNING",
    }
    return os.getenv("LOG_LEVEL", level_map.get(env, "INFO"))


def configure_logging() -> None:
    """Configure stdlib logging and structlog for the checkout client.

    The host app calls this once at start-up, before building a
    ``PaymentController``; importing the package leaves logging untouched.
    """
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.contextvars.merge_contextvars,
    ]

    env = (os.getenv("ENV") or "development").lower()
    if env in ["production", "staging"]:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
