"""
Test settings for electric_billing project.
"""

from .base import *  # noqa: F403, F401

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

ELECTRIC_BILLING = {
    **ELECTRIC_BILLING,  # noqa: F405
    "MAX_CUSTOMERS": 100,
    "MAX_BILL_HISTORY": 12,
    "CUSTOMER_ID_BASE": 1001,
    "BILL_ID_SCHEME": "sequential",
    "RATE_TABLE_PATH": None,
}

# Keep test runs out of the rotating log file
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"null": {"class": "logging.NullHandler"}},
    "root": {"handlers": ["null"]},
}
