"""
Unit tests for bill comparison, projection and usage alerts.
"""

from decimal import Decimal

import pytest

from billing.core.analytics import (
    DEFAULT_PEAK_RATIO,
    UsageLevel,
    average_usage_delta,
    compare_latest_two,
    project_next,
    usage_alert,
)
from billing.core.calculator import compute_amount
from billing.core.history import BillingHistory
from billing.core.types import CustomerClass, UsageSplit
from billing.exceptions import InsufficientDataError

# compare_latest_two()


def test_compare_latest_two(history_factory):
    """100 -> 130 units and $200 -> $240."""
    history = history_factory(("100", "200"), ("130", "240"))

    result = compare_latest_two(history)

    assert result.usage_diff == Decimal("30")
    assert result.usage_diff_pct == Decimal("30")
    assert result.amount_diff == Decimal("40")
    assert result.amount_diff_pct == Decimal("20")
    assert result.high_usage_advisory
    assert result.current.bill_id == 2
    assert result.previous.bill_id == 1


def test_compare_uses_latest_two_only(history_factory):
    history = history_factory(("500", "900"), ("100", "200"), ("110", "210"))

    result = compare_latest_two(history)

    assert result.usage_diff == Decimal("10")
    assert result.usage_diff_pct == Decimal("10")
    assert not result.high_usage_advisory


def test_compare_with_zero_previous_usage(history_factory):
    history = history_factory(("0", "52.50"), ("100", "420"))

    result = compare_latest_two(history)

    assert result.usage_diff_pct is None
    assert not result.high_usage_advisory
    assert result.amount_diff_pct == Decimal("700")


def test_compare_needs_two_bills(history_factory):
    with pytest.raises(InsufficientDataError) as exc_info:
        compare_latest_two(history_factory(("100", "200")))

    assert exc_info.value.required == 2
    assert exc_info.value.available == 1


# project_next()


def test_average_usage_delta(bill_factory):
    bills = [bill_factory(usage=u) for u in ("100", "120", "110", "150")]

    assert average_usage_delta(bills) == Decimal("50") / 3
    assert average_usage_delta(bills[:1]) == Decimal("0")


def test_project_next_follows_trend(history_factory, rate_table):
    history = history_factory(("100", "200"), ("120", "240"), peak="30", off_peak="90")

    result = project_next(history, CustomerClass.RESIDENTIAL, rate_table)

    assert result.average_delta == Decimal("20")
    assert result.projected_usage == Decimal("140")
    assert result.peak_ratio == Decimal("0.25")
    assert result.projected_split == UsageSplit(Decimal("35"), Decimal("105"))
    assert result.projected_amount == compute_amount(
        rate_table, CustomerClass.RESIDENTIAL, Decimal("140"), result.projected_split
    )


def test_project_single_bill_repeats_it(history_factory, rate_table):
    history = history_factory(("80", "300"))

    result = project_next(history, CustomerClass.COMMERCIAL, rate_table)

    assert result.projected_usage == Decimal("80")
    assert result.latest.bill_id == 1


def test_project_zero_usage_uses_default_ratio(history_factory, rate_table):
    history = history_factory(("0", "52.50"))

    result = project_next(history, CustomerClass.RESIDENTIAL, rate_table)

    assert result.peak_ratio == DEFAULT_PEAK_RATIO
    assert result.projected_usage == Decimal("0")


def test_projected_usage_is_floored_at_zero(history_factory, rate_table):
    history = history_factory(("100", "420"), ("10", "88"))

    result = project_next(history, CustomerClass.RESIDENTIAL, rate_table)

    assert result.average_delta == Decimal("-90")
    assert result.projected_usage == Decimal("0")


def test_peak_ratio_is_capped(history_factory, rate_table):
    history = history_factory(("10", "100"), peak="50")

    result = project_next(history, CustomerClass.RESIDENTIAL, rate_table)

    assert result.peak_ratio == Decimal("1")
    assert result.projected_split.off_peak_units == Decimal("0")


def test_project_needs_a_bill(rate_table):
    with pytest.raises(InsufficientDataError) as exc_info:
        project_next(BillingHistory(), CustomerClass.RESIDENTIAL, rate_table)

    assert exc_info.value.required == 1
    assert exc_info.value.available == 0


# usage_alert()


def test_high_usage_alert(history_factory):
    """Average 100, latest 125."""
    history = history_factory(("75", "0"), ("100", "0"), ("125", "0"))

    alert = usage_alert(history)

    assert alert.level is UsageLevel.HIGH
    assert alert.average_usage == Decimal("100")
    assert alert.magnitude_pct == Decimal("25")
    assert alert.monthly_change_pct == Decimal("25")


def test_low_usage_alert(history_factory):
    history = history_factory(("100", "0"), ("100", "0"), ("70", "0"))

    alert = usage_alert(history)

    assert alert.level is UsageLevel.LOW
    assert alert.magnitude_pct.quantize(Decimal("0.01")) == Decimal("22.22")
    assert alert.monthly_change_pct == Decimal("-30")


def test_normal_usage_alert(history_factory):
    history = history_factory(("100", "0"), ("110", "0"))

    alert = usage_alert(history)

    assert alert.level is UsageLevel.NORMAL
    assert alert.magnitude_pct == Decimal("0")


def test_single_bill_has_no_monthly_change(history_factory):
    alert = usage_alert(history_factory(("100", "0")))

    assert alert.level is UsageLevel.NORMAL
    assert alert.monthly_change_pct is None


def test_peak_share_advisory(history_factory):
    alert = usage_alert(history_factory(("100", "0"), peak="50", off_peak="50"))

    assert alert.peak_share_pct == Decimal("50")
    assert alert.shift_to_off_peak_advisory


def test_peak_share_below_threshold(history_factory):
    alert = usage_alert(history_factory(("100", "0"), peak="40", off_peak="60"))

    assert alert.peak_share_pct == Decimal("40")
    assert not alert.shift_to_off_peak_advisory


def test_zero_latest_usage_has_no_peak_share(history_factory):
    alert = usage_alert(history_factory(("0", "0")))

    assert alert.peak_share_pct is None
    assert not alert.shift_to_off_peak_advisory


def test_alert_needs_a_bill():
    with pytest.raises(InsufficientDataError):
        usage_alert(BillingHistory())
