"""
Fixtures shared by every app's tests.
"""

from datetime import date

import pytest

from billing.core.clock import FixedClock
from tariffs.rate_table import DEFAULT_RATE_TABLE_PATH, load_rate_table


@pytest.fixture
def rate_table():
    """The bundled default rate table."""
    return load_rate_table(DEFAULT_RATE_TABLE_PATH)


@pytest.fixture
def clock():
    """Clock pinned to 10 March 2024."""
    return FixedClock(date(2024, 3, 10))
