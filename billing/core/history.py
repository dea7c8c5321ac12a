"""
Per-customer rolling billing history.

Holds at most `capacity` bills, oldest first. Generating a bill when the
history is full evicts the oldest one before appending.
"""

from collections.abc import Iterable, Iterator
from datetime import date
from decimal import Decimal
from typing import Optional

from billing.exceptions import AlreadyPaidError, InvalidMeterReadingError

from .calculator import compute_amount
from .clock import add_days
from .rates import RateTable
from .types import Bill, CustomerClass, UsageSplit
from .util import quantize_money

DEFAULT_HISTORY_CAPACITY = 12
BILL_DUE_DAYS = 15


class BillingHistory:
    """Fixed-capacity, chronologically ordered log of a customer's bills."""

    def __init__(
        self,
        bills: Iterable[Bill] = (),
        capacity: int = DEFAULT_HISTORY_CAPACITY,
    ):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._capacity = capacity
        # Keep only the newest bills when restoring more than fit
        self._bills: list[Bill] = list(bills)[-capacity:]

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._bills)

    def __iter__(self) -> Iterator[Bill]:
        return iter(self._bills)

    def __getitem__(self, index: int) -> Bill:
        return self._bills[index]

    def all(self) -> list[Bill]:
        """Bills in chronological order, oldest first."""
        return list(self._bills)

    def latest(self) -> Optional[Bill]:
        return self._bills[-1] if self._bills else None

    @property
    def is_full(self) -> bool:
        return len(self._bills) >= self._capacity

    @property
    def next_index(self) -> int:
        """Slot the next generated bill will occupy, after any eviction."""
        return self._capacity - 1 if self.is_full else len(self._bills)

    @property
    def previous_reading(self) -> Decimal:
        latest = self.latest()
        return latest.meter_end if latest else Decimal("0")

    def generate_bill(
        self,
        bill_id: int,
        customer_class: CustomerClass,
        meter_end: Decimal,
        usage_split: UsageSplit,
        today: date,
        rate_table: RateTable,
    ) -> Bill:
        """
        Create the next bill from a meter reading and append it.

        The previous bill's closing reading becomes this bill's opening
        reading (0 for the first bill). Nothing is changed if validation
        or the amount calculation fails.

        Args:
            bill_id: Identifier assigned by the caller
            customer_class: Selects the rate schedule
            meter_end: Current meter reading
            usage_split: Peak/off-peak units for the period
            today: Issue date; the bill is due BILL_DUE_DAYS later
            rate_table: Rate schedules used to price the bill

        Returns:
            The new Bill

        Raises:
            InvalidMeterReadingError: If meter_end is below the previous reading
        """
        meter_start = self.previous_reading
        if meter_end < meter_start:
            raise InvalidMeterReadingError(meter_end, meter_start)

        total_usage = meter_end - meter_start
        amount = compute_amount(rate_table, customer_class, total_usage, usage_split)

        bill = Bill(
            bill_id=bill_id,
            issue_date=today,
            due_date=add_days(today, BILL_DUE_DAYS),
            meter_start=meter_start,
            meter_end=meter_end,
            total_usage=total_usage,
            usage_split=usage_split,
            amount=quantize_money(amount),
        )

        if self.is_full:
            del self._bills[0]
        self._bills.append(bill)
        return bill

    def record_payment(self, bill_index: int, method: str, today: date) -> Bill:
        """
        Mark a bill as paid.

        Range checking of bill_index is the caller's job.

        Raises:
            AlreadyPaidError: If the bill is already paid; the bill is left unchanged
        """
        bill = self._bills[bill_index]
        if bill.paid:
            raise AlreadyPaidError(bill.bill_id)

        bill.paid = True
        bill.payment_date = today
        bill.payment_method = method
        return bill
