"""
Analytics over a customer's billing history.

Comparison with the previous bill, next-bill projection and usage alerts.
All functions are read-only.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from billing.exceptions import InsufficientDataError

from .calculator import compute_amount
from .history import BillingHistory
from .rates import RateTable
from .types import Bill, CustomerClass, UsageSplit
from .util import HUNDRED, percent_change, percentage

# Usage increase over the previous bill that triggers an advisory
HIGH_USAGE_INCREASE_PCT = Decimal("20")

# Peak fraction assumed when the latest bill has no usage to derive one from
DEFAULT_PEAK_RATIO = Decimal("0.3")

HIGH_USAGE_FACTOR = Decimal("1.2")
LOW_USAGE_FACTOR = Decimal("0.8")

# Peak share of usage above which shifting to off-peak hours is advised
PEAK_SHARE_ADVISORY_PCT = Decimal("40")


class UsageLevel(str, Enum):
    """Latest usage relative to the customer's average."""

    HIGH = "high"
    LOW = "low"
    NORMAL = "normal"


@dataclass(frozen=True)
class BillComparison:
    """Difference between the latest bill and the one before it."""

    current: Bill
    previous: Bill
    usage_diff: Decimal
    usage_diff_pct: Optional[Decimal]  # None when previous usage is 0
    amount_diff: Decimal
    amount_diff_pct: Optional[Decimal]  # None when previous amount is 0

    @property
    def high_usage_advisory(self) -> bool:
        return self.usage_diff_pct is not None and self.usage_diff_pct > HIGH_USAGE_INCREASE_PCT


@dataclass(frozen=True)
class BillProjection:
    """Estimate of the next bill."""

    latest: Bill
    average_delta: Decimal  # Mean month-over-month usage change
    peak_ratio: Decimal
    projected_usage: Decimal
    projected_split: UsageSplit
    projected_amount: Decimal


@dataclass(frozen=True)
class UsageAlert:
    """Classification of the latest bill's usage against the average."""

    level: UsageLevel
    magnitude_pct: Decimal  # Distance from the average; 0 when NORMAL
    latest_usage: Decimal
    average_usage: Decimal
    monthly_change_pct: Optional[Decimal]
    peak_share_pct: Optional[Decimal]  # None when latest usage is 0

    @property
    def shift_to_off_peak_advisory(self) -> bool:
        return self.peak_share_pct is not None and self.peak_share_pct > PEAK_SHARE_ADVISORY_PCT


def _require_bills(history: BillingHistory, required: int, purpose: str) -> list[Bill]:
    bills = history.all()
    if len(bills) < required:
        raise InsufficientDataError(
            f"Not enough bills for {purpose} (need {required}, have {len(bills)})",
            required=required,
            available=len(bills),
        )
    return bills


def compare_latest_two(history: BillingHistory) -> BillComparison:
    """
    Compare the latest bill with the previous one.

    Percentages are relative to the previous bill.

    Raises:
        InsufficientDataError: If fewer than two bills exist
    """
    bills = _require_bills(history, 2, "comparison")
    previous, current = bills[-2], bills[-1]

    usage_diff = current.total_usage - previous.total_usage
    amount_diff = current.amount - previous.amount

    return BillComparison(
        current=current,
        previous=previous,
        usage_diff=usage_diff,
        usage_diff_pct=percent_change(current.total_usage, previous.total_usage),
        amount_diff=amount_diff,
        amount_diff_pct=percent_change(current.amount, previous.amount),
    )


def average_usage_delta(bills: list[Bill]) -> Decimal:
    """Mean of successive usage differences; 0 for a single bill."""
    if len(bills) < 2:
        return Decimal("0")
    total_increase = sum(
        (later.total_usage - earlier.total_usage for earlier, later in zip(bills, bills[1:])),
        start=Decimal("0"),
    )
    return total_increase / (len(bills) - 1)


def project_next(
    history: BillingHistory,
    customer_class: CustomerClass,
    rate_table: RateTable,
) -> BillProjection:
    """
    Project the next bill from the usage trend.

    The projected usage is the latest usage plus the average month-over-month
    change, floored at 0. The latest bill's peak fraction is kept for the
    projected time-of-use split.

    Raises:
        InsufficientDataError: If the history is empty
    """
    bills = _require_bills(history, 1, "projection")
    latest = bills[-1]

    average_delta = average_usage_delta(bills)
    projected_usage = max(latest.total_usage + average_delta, Decimal("0"))

    if latest.total_usage > 0:
        # The split is not reconciled against total usage, so cap the ratio
        peak_ratio = min(latest.usage_split.peak_units / latest.total_usage, Decimal("1"))
    else:
        peak_ratio = DEFAULT_PEAK_RATIO

    projected_split = UsageSplit(
        peak_units=projected_usage * peak_ratio,
        off_peak_units=projected_usage * (1 - peak_ratio),
    )
    projected_amount = compute_amount(
        rate_table, customer_class, projected_usage, projected_split
    )

    return BillProjection(
        latest=latest,
        average_delta=average_delta,
        peak_ratio=peak_ratio,
        projected_usage=projected_usage,
        projected_split=projected_split,
        projected_amount=projected_amount,
    )


def usage_alert(history: BillingHistory) -> UsageAlert:
    """
    Classify the latest bill's usage against the average of all bills.

    HIGH above 120% of the average, LOW below 80%, NORMAL otherwise.

    Raises:
        InsufficientDataError: If the history is empty
    """
    bills = _require_bills(history, 1, "usage analysis")
    latest = bills[-1]

    total_usage = sum((b.total_usage for b in bills), start=Decimal("0"))
    average = total_usage / len(bills)
    latest_usage = latest.total_usage

    if latest_usage > average * HIGH_USAGE_FACTOR:
        level = UsageLevel.HIGH
        magnitude = (latest_usage / average - 1) * HUNDRED
    elif latest_usage < average * LOW_USAGE_FACTOR:
        level = UsageLevel.LOW
        magnitude = (1 - latest_usage / average) * HUNDRED
    else:
        level = UsageLevel.NORMAL
        magnitude = Decimal("0")

    monthly_change = None
    if len(bills) > 1:
        monthly_change = percent_change(latest_usage, bills[-2].total_usage)

    peak_share = None
    if latest_usage > 0:
        peak_share = percentage(latest.usage_split.peak_units, latest_usage)

    return UsageAlert(
        level=level,
        magnitude_pct=magnitude,
        latest_usage=latest_usage,
        average_usage=average,
        monthly_change_pct=monthly_change,
        peak_share_pct=peak_share,
    )
