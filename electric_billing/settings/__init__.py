"""
Django settings module for electric_billing project.

By default, loads local development settings.
Override by setting DJANGO_SETTINGS_MODULE environment variable.
"""

from .local import *  # noqa: F403, F401
