"""
Local development settings for electric_billing project.
"""

from .base import *  # noqa: F403, F401

# Development-specific settings
DEBUG = True

# Record debug detail in the log file while developing
for _logger_name in ("billing", "customers", "reports", "console", "tariffs"):
    LOGGING["loggers"][_logger_name]["level"] = "DEBUG"  # noqa: F405
