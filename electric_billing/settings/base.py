"""
Base settings for electric_billing project.

Values that differ between machines come from the environment, optionally
through a .env file at the project root.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "electric-billing-console-insecure-key")

DEBUG = False

ALLOWED_HOSTS: list[str] = []

INSTALLED_APPS = [
    "billing",
    "customers",
    "tariffs",
    "reports",
    "console",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DATABASE_PATH", BASE_DIR / "db.sqlite3"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_I18N = False
USE_TZ = True

LOG_DIR = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)


def _env_int(name: str, default: int) -> int:
    value = os.getenv(f"ELECTRIC_BILLING_{name}")
    return int(value) if value else default


ELECTRIC_BILLING = {
    "MAX_CUSTOMERS": _env_int("MAX_CUSTOMERS", 100),
    "MAX_BILL_HISTORY": _env_int("MAX_BILL_HISTORY", 12),
    "CUSTOMER_ID_BASE": _env_int("CUSTOMER_ID_BASE", 1001),
    "BILL_ID_SCHEME": os.getenv("ELECTRIC_BILLING_BILL_ID_SCHEME", "sequential"),
    "RATE_TABLE_PATH": os.getenv("ELECTRIC_BILLING_RATE_TABLE_PATH") or None,
    "REPORT_DIR": os.getenv("ELECTRIC_BILLING_REPORT_DIR", BASE_DIR / "reports_out"),
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        # The interactive console owns stdout, so only problems go to the terminal
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "standard",
        },
        "file": {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "level": "INFO",
            "formatter": "standard",
            "filename": LOG_DIR / "electric_billing.log",
            "when": "midnight",
            "backupCount": 14,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        name: {"handlers": ["console", "file"], "level": "INFO", "propagate": False}
        for name in ("billing", "customers", "reports", "console", "tariffs")
    },
}
