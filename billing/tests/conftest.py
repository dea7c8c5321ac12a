"""
Shared fixtures for billing tests.

Builds bills and histories directly, without going through the calculator,
so analytics tests can pick exact usages and amounts.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from billing.core.history import BillingHistory
from billing.core.types import Bill, UsageSplit


@pytest.fixture
def bill_factory():
    """Factory fixture for creating Bill instances with readable defaults."""

    def _create_bill(
        usage: str | Decimal = "100",
        amount: str | Decimal = "200.00",
        peak: str | Decimal = "0",
        off_peak: str | Decimal = "0",
        bill_id: int = 1,
        meter_start: str | Decimal = "0",
        issue_date: date = date(2024, 1, 1),
    ) -> Bill:
        usage = Decimal(str(usage))
        meter_start = Decimal(str(meter_start))
        return Bill(
            bill_id=bill_id,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=15),
            meter_start=meter_start,
            meter_end=meter_start + usage,
            total_usage=usage,
            usage_split=UsageSplit(
                peak_units=Decimal(str(peak)), off_peak_units=Decimal(str(off_peak))
            ),
            amount=Decimal(str(amount)),
        )

    return _create_bill


@pytest.fixture
def history_factory(bill_factory):
    """
    Factory fixture for a BillingHistory from (usage, amount) pairs, oldest first.

    Extra keyword arguments are passed to every bill.
    """

    def _create_history(*entries, capacity: int = 12, **bill_kwargs) -> BillingHistory:
        bills = []
        reading = Decimal("0")
        for index, (usage, amount) in enumerate(entries):
            bill = bill_factory(
                usage=usage,
                amount=amount,
                bill_id=index + 1,
                meter_start=reading,
                issue_date=date(2024, 1, 1) + timedelta(days=30 * index),
                **bill_kwargs,
            )
            reading = bill.meter_end
            bills.append(bill)
        return BillingHistory(bills, capacity=capacity)

    return _create_history
