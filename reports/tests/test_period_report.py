"""
Unit tests for the period report aggregation.
"""

from datetime import date
from decimal import Decimal

import pytest

from billing.core.types import CustomerClass, UsageSplit
from customers.directory import Directory
from reports.period_report import TOP_CONSUMER_LIMIT, build_bill_frame, generate_period_report

MARCH = date(2024, 3, 10)
FEBRUARY = date(2024, 2, 10)


@pytest.fixture
def directory_factory(rate_table):
    """
    Factory fixture for a directory from customer specs.

    Each entry is (meter_number, customer_class, [(reading, issue_date, peak, off_peak), ...]).
    """

    def _create_directory(*specs) -> Directory:
        directory = Directory()
        for meter_number, customer_class, readings in specs:
            directory.add_customer(
                f"Customer {meter_number}", "", "", "", customer_class, meter_number, FEBRUARY
            )
            for reading, issue_date, peak, off_peak in readings:
                directory.generate_bill(
                    meter_number,
                    Decimal(reading),
                    UsageSplit(Decimal(peak), Decimal(off_peak)),
                    issue_date,
                    rate_table,
                )
        return directory

    return _create_directory


@pytest.fixture
def populated(directory_factory):
    """
    Three customers with March bills of 100, 150 and 50 units.

    M1 also has a February bill, M3 is inactive.
    """
    directory = directory_factory(
        ("M1", CustomerClass.RESIDENTIAL, [("80", FEBRUARY, "0", "0"), ("180", MARCH, "30", "70")]),
        ("M2", CustomerClass.COMMERCIAL, [("150", MARCH, "50", "100")]),
        ("M3", CustomerClass.RESIDENTIAL, [("50", MARCH, "0", "0")]),
    )
    directory.update_customer("M3", active=False)
    return directory


def test_empty_directory_gives_zero_report():
    document = generate_period_report(Directory(), 3, 2024)

    assert document.customers.total == 0
    assert document.customers.active_pct == 0
    assert all(c.count == 0 and c.percentage == 0 for c in document.customers.by_class)
    assert document.billing.generated == 0
    assert document.billing.paid_pct == 0
    assert document.billing.total_billed == 0
    assert document.billing.collected_pct == 0
    assert all(c.usage_pct == 0 and c.amount_pct == 0 for c in document.class_breakdown)
    assert document.time_of_use.peak_pct == 0
    assert document.top_consumers == ()
    assert document.payment_methods == ()


def test_invalid_month():
    with pytest.raises(ValueError, match="Month must be between 1 and 12"):
        generate_period_report(Directory(), 13, 2024)
    with pytest.raises(ValueError):
        generate_period_report(Directory(), 0, 2024)


def test_bill_frame_columns(populated):
    frame = build_bill_frame(populated)

    assert len(frame) == 4
    assert list(frame["position"]) == [0, 0, 1, 2]
    assert list(frame["issue_month"]) == [2, 3, 3, 3]
    assert not frame["paid"].any()
    assert list(frame["payment_month"]) == [0, 0, 0, 0]


def test_customer_summary(populated):
    summary = generate_period_report(populated, 3, 2024).customers

    assert summary.total == 3
    assert summary.active == 2
    assert summary.inactive == 1
    counts = {c.customer_class: c.count for c in summary.by_class}
    assert counts == {
        CustomerClass.RESIDENTIAL: 2,
        CustomerClass.COMMERCIAL: 1,
        CustomerClass.INDUSTRIAL: 0,
    }


def test_billing_summary_counts_only_period_bills(populated):
    populated.record_payment("M2", 0, "Cash", MARCH)

    billing = generate_period_report(populated, 3, 2024).billing

    m1, m2, m3 = (populated.find_by_meter(m).history.latest() for m in ("M1", "M2", "M3"))
    assert billing.generated == 3
    assert billing.paid == 1
    assert billing.unpaid == 2
    assert billing.total_billed == m1.amount + m2.amount + m3.amount
    assert billing.collected == m2.amount
    assert billing.outstanding == m1.amount + m3.amount
    total_pct = billing.collected_pct + billing.outstanding_pct
    assert total_pct.quantize(Decimal("0.01")) == Decimal("100.00")
    assert billing.total_usage == Decimal("300")


def test_class_breakdown_and_time_of_use(populated):
    document = generate_period_report(populated, 3, 2024)

    breakdown = {c.customer_class: c for c in document.class_breakdown}
    assert breakdown[CustomerClass.RESIDENTIAL].usage == Decimal("150")
    assert breakdown[CustomerClass.RESIDENTIAL].usage_pct == Decimal("50")
    assert breakdown[CustomerClass.COMMERCIAL].usage == Decimal("150")
    assert breakdown[CustomerClass.INDUSTRIAL].amount == 0

    tou = document.time_of_use
    assert tou.peak_units == Decimal("80")
    assert tou.off_peak_units == Decimal("170")
    assert tou.peak_pct.quantize(Decimal("0.01")) == Decimal("26.67")


def test_other_period_only_sees_its_bills(populated):
    document = generate_period_report(populated, 2, 2024)

    assert document.billing.generated == 1
    assert document.billing.total_usage == Decimal("80")
    assert [c.meter_number for c in document.top_consumers] == ["M1"]


def test_top_consumers_ranked_by_usage(populated):
    top = generate_period_report(populated, 3, 2024).top_consumers

    assert [(c.rank, c.meter_number, c.usage) for c in top] == [
        (1, "M2", Decimal("150")),
        (2, "M1", Decimal("100")),
        (3, "M3", Decimal("50")),
    ]
    assert top[0].customer_id == 1002
    assert top[0].amount == populated.find_by_meter("M2").history.latest().amount


def test_top_consumers_limited_and_stable(directory_factory):
    """Seven customers; ties keep directory order and zero usage is left out."""
    directory = directory_factory(
        ("A", CustomerClass.RESIDENTIAL, [("10", MARCH, "0", "0")]),
        ("B", CustomerClass.RESIDENTIAL, [("30", MARCH, "0", "0")]),
        ("C", CustomerClass.RESIDENTIAL, [("10", MARCH, "0", "0")]),
        ("D", CustomerClass.RESIDENTIAL, [("0", MARCH, "0", "0")]),
        ("E", CustomerClass.RESIDENTIAL, [("30", MARCH, "0", "0")]),
        ("F", CustomerClass.RESIDENTIAL, [("10", MARCH, "0", "0")]),
        ("G", CustomerClass.RESIDENTIAL, [("20", MARCH, "0", "0")]),
    )

    top = generate_period_report(directory, 3, 2024).top_consumers

    assert len(top) == TOP_CONSUMER_LIMIT
    assert [c.meter_number for c in top] == ["B", "E", "G", "A", "C"]


def test_top_consumers_fewer_than_limit(directory_factory):
    directory = directory_factory(
        ("A", CustomerClass.RESIDENTIAL, [("0", MARCH, "0", "0")]),
        ("B", CustomerClass.RESIDENTIAL, [("5", MARCH, "0", "0")]),
    )

    top = generate_period_report(directory, 3, 2024).top_consumers

    assert [c.meter_number for c in top] == ["B"]


def test_payment_methods_use_payment_date(populated):
    """A February bill paid in March counts towards March's payment methods."""
    populated.record_payment("M1", 0, "Bank Transfer", MARCH)
    populated.record_payment("M2", 0, "Cash", MARCH)
    populated.record_payment("M3", 0, "Bank Transfer", MARCH)
    populated.record_payment("M1", 1, "Cash", date(2024, 4, 2))

    document = generate_period_report(populated, 3, 2024)

    feb_bill, m1 = populated.find_by_meter("M1").history.all()
    m2 = populated.find_by_meter("M2").history.latest()
    m3 = populated.find_by_meter("M3").history.latest()
    methods = [(m.method, m.count, m.amount) for m in document.payment_methods]
    assert methods == [
        ("Bank Transfer", 2, feb_bill.amount + m3.amount),
        ("Cash", 1, m2.amount),
    ]
    # Percentages are relative to the paid bills issued in the period
    collected = document.billing.collected
    assert collected == m1.amount + m2.amount + m3.amount
    assert document.payment_methods[1].percentage == m2.amount / collected * 100
