"""
Billing service layer.

Owns the in-memory customer directory, runs every console operation against
it through the billing core, and persists the directory after each mutation.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from billing.conf import billing_setting
from billing.core.analytics import (
    BillComparison,
    BillProjection,
    UsageAlert,
    compare_latest_two,
    project_next,
    usage_alert,
)
from billing.core.clock import Clock, SystemClock
from billing.core.rates import RateTable
from billing.core.types import Bill, CustomerClass, UsageSplit
from billing.exceptions import BillingServiceError
from customers.directory import Customer, Directory, SearchField
from reports.period_report import ReportDocument, generate_period_report
from reports.text_report import write_report

logger = logging.getLogger(__name__)

Persist = Callable[[Directory], None]


def _log_failures(method):
    """Log recoverable errors raised by a service operation, then re-raise."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except BillingServiceError as e:
            logger.warning("%s failed: %s", method.__name__, e)
            raise

    return wrapper


@dataclass
class CustomerView:
    """A customer together with its most recent bill."""

    customer: Customer
    latest_bill: Optional[Bill]


class BillingService:
    """
    Operations behind the billing console.

    Args:
        directory: Directory to operate on
        rate_table: Rate schedules used for bill amounts and projections
        clock: Source of today's date (defaults to SystemClock)
        persist: Called with the directory after every mutation; None skips persistence
    """

    def __init__(
        self,
        directory: Directory,
        rate_table: RateTable,
        clock: Optional[Clock] = None,
        persist: Optional[Persist] = None,
    ):
        self.directory = directory
        self.rate_table = rate_table
        self.clock = clock or SystemClock()
        self.persist = persist

    @classmethod
    def from_settings(cls, clock: Optional[Clock] = None) -> BillingService:
        """Build a service over the stored directory and the configured rate table."""
        from customers.adapters import load_directory, save_directory
        from tariffs.rate_table import get_rate_table

        return cls(
            directory=load_directory(),
            rate_table=get_rate_table(),
            clock=clock,
            persist=save_directory,
        )

    @contextmanager
    def _persisting(self) -> Iterator[None]:
        """Persist the change made inside the block; undo it in memory if persisting fails."""
        if self.persist is None:
            yield
            return
        before = self.directory.to_snapshot()
        yield
        try:
            self.persist(self.directory)
        except Exception:
            logger.exception("Persisting the directory failed; changes rolled back")
            self.directory.restore(before)
            raise

    # Customers

    @_log_failures
    def add_customer(
        self,
        name: str,
        address: str,
        phone: str,
        email: str,
        customer_class: CustomerClass,
        meter_number: str,
    ) -> Customer:
        with self._persisting():
            customer = self.directory.add_customer(
                name=name,
                address=address,
                phone=phone,
                email=email,
                customer_class=customer_class,
                meter_number=meter_number,
                today=self.clock.today(),
            )
        logger.info(
            "Added customer %d (%s) on meter %s",
            customer.customer_id,
            customer.customer_class.value,
            customer.meter_number,
        )
        return customer

    @_log_failures
    def get_customer(self, meter_number: str) -> CustomerView:
        customer = self.directory.find_by_meter(meter_number)
        return CustomerView(customer=customer, latest_bill=customer.history.latest())

    @_log_failures
    def get_customer_by_id(self, customer_id: int) -> Customer:
        return self.directory.get(customer_id)

    @_log_failures
    def update_customer(self, meter_number: str, /, **changes: Any) -> Customer:
        with self._persisting():
            customer = self.directory.update_customer(meter_number, **changes)
        logger.info("Updated %s for meter %s", ", ".join(sorted(changes)), meter_number)
        return customer

    @_log_failures
    def toggle_active(self, meter_number: str) -> Customer:
        customer = self.directory.find_by_meter(meter_number)
        return self.update_customer(meter_number, active=not customer.active)

    def list_customers(self) -> list[Customer]:
        return list(self.directory)

    def search_customers(self, search_field: SearchField, term: str | int) -> list[Customer]:
        return self.directory.search(search_field, term)

    # Bills

    @_log_failures
    def generate_bill(
        self,
        meter_number: str,
        meter_end: Decimal,
        peak_units: Decimal = Decimal("0"),
        off_peak_units: Decimal = Decimal("0"),
    ) -> Bill:
        """
        Generate the next bill for a customer.

        Raises:
            CustomerNotFoundError: If no customer has the meter number
            InvalidMeterReadingError: If meter_end is below the previous reading
            ValueError: If a time-of-use component is negative
        """
        split = UsageSplit(peak_units=peak_units, off_peak_units=off_peak_units)
        with self._persisting():
            bill = self.directory.generate_bill(
                meter_number, meter_end, split, self.clock.today(), self.rate_table
            )
        logger.info(
            "Generated bill %d for meter %s: %s units, $%s",
            bill.bill_id,
            meter_number,
            bill.total_usage,
            bill.amount,
        )
        return bill

    @_log_failures
    def latest_bill(self, meter_number: str) -> Optional[Bill]:
        return self.directory.find_by_meter(meter_number).history.latest()

    @_log_failures
    def payment_history(self, meter_number: str) -> list[Bill]:
        return self.directory.find_by_meter(meter_number).history.all()

    @_log_failures
    def record_payment(self, meter_number: str, bill_index: int, method: str) -> Bill:
        """
        Mark one bill in a customer's history as paid today.

        Raises:
            CustomerNotFoundError: If no customer has the meter number
            BillNotFoundError: If bill_index is outside the history
            AlreadyPaidError: If the bill is already paid
        """
        with self._persisting():
            bill = self.directory.record_payment(
                meter_number, bill_index, method, self.clock.today()
            )
        logger.info("Recorded %s payment for bill %d (meter %s)", method, bill.bill_id, meter_number)
        return bill

    # Analytics

    @_log_failures
    def compare_bills(self, meter_number: str) -> BillComparison:
        return compare_latest_two(self.directory.find_by_meter(meter_number).history)

    @_log_failures
    def project_next_bill(self, meter_number: str) -> BillProjection:
        customer = self.directory.find_by_meter(meter_number)
        return project_next(customer.history, customer.customer_class, self.rate_table)

    @_log_failures
    def usage_alert(self, meter_number: str) -> UsageAlert:
        return usage_alert(self.directory.find_by_meter(meter_number).history)

    # Reporting

    def period_report(self, month: Optional[int] = None, year: Optional[int] = None) -> ReportDocument:
        """Report for month/year, defaulting to the current month."""
        today = self.clock.today()
        return generate_period_report(
            self.directory,
            month or today.month,
            year or today.year,
            generated_on=today,
        )

    def write_period_report(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        report_dir: Optional[Path] = None,
    ) -> Path:
        """Generate the period report and write it under REPORT_DIR."""
        document = self.period_report(month, year)
        target = Path(report_dir or billing_setting("REPORT_DIR"))
        return write_report(document, target, self.clock.today())
