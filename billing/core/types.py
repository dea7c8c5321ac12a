"""
Define lightweight dataclasses to use for bill calculations.

Adapters to convert between Django ORM and these classes are in customers.adapters.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class CustomerClass(str, Enum):
    """Which rate schedule a customer is billed under."""

    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        """(value, label) pairs for Django model and form fields."""
        return [(member.value, member.label) for member in cls]


class BillStatus(str, Enum):
    """Payment state of a bill. PAID is terminal."""

    UNPAID = "unpaid"
    PAID = "paid"


@dataclass(frozen=True, slots=True)
class RateSchedule:
    """
    Pricing parameters for one customer class.

    Tier thresholds are fixed at 100 and 300 units (see billing.core.calculator).
    All rates are per unit; tax_rate is a fraction applied to the full pre-tax amount.

    Validation:
        - every value must be >= 0
    """

    customer_class: CustomerClass
    base_charge: Decimal
    tier1_rate: Decimal
    tier2_rate: Decimal
    tier3_rate: Decimal
    peak_rate: Decimal
    off_peak_rate: Decimal
    tax_rate: Decimal

    def __post_init__(self) -> None:
        """Reject negative prices."""
        for name in (
            "base_charge",
            "tier1_rate",
            "tier2_rate",
            "tier3_rate",
            "peak_rate",
            "off_peak_rate",
            "tax_rate",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0 for {self.customer_class.label}")


@dataclass(frozen=True, slots=True)
class UsageSplit:
    """
    Time-of-use decomposition of a bill's usage.

    Peak hours are 2pm-8pm, off-peak hours 8pm-2pm. The two components are
    independent inputs and are not required to sum to the bill's total usage.
    """

    peak_units: Decimal = Decimal("0")
    off_peak_units: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if self.peak_units < 0 or self.off_peak_units < 0:
            raise ValueError("Time-of-use units must be >= 0")

    @property
    def total_units(self) -> Decimal:
        return self.peak_units + self.off_peak_units


@dataclass(slots=True)
class Bill:
    """
    One generated bill.

    Created only by BillingHistory.generate_bill and mutated at most once
    afterwards, when a payment is recorded.
    """

    bill_id: int
    issue_date: date
    due_date: date
    meter_start: Decimal
    meter_end: Decimal
    total_usage: Decimal
    usage_split: UsageSplit
    amount: Decimal
    paid: bool = False
    payment_date: Optional[date] = None
    payment_method: str = ""

    @property
    def status(self) -> BillStatus:
        return BillStatus.PAID if self.paid else BillStatus.UNPAID
