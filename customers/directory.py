"""
Customer directory: the root aggregate of the billing engine.

Each Customer owns one BillingHistory. The directory assigns customer ids,
enforces capacity and meter-number uniqueness, and serializes its full
state as a versioned snapshot of plain values.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from billing.core.history import DEFAULT_HISTORY_CAPACITY, BillingHistory
from billing.core.rates import RateTable
from billing.core.types import Bill, CustomerClass, UsageSplit
from billing.exceptions import (
    BillNotFoundError,
    CapacityExceededError,
    CustomerNotFoundError,
    DuplicateMeterNumberError,
    SnapshotFormatError,
)

DEFAULT_DIRECTORY_CAPACITY = 100
DEFAULT_CUSTOMER_ID_BASE = 1001
SNAPSHOT_VERSION = 1

UPDATABLE_FIELDS = frozenset({"name", "address", "phone", "email", "customer_class", "active"})


class BillIdScheme(str, Enum):
    """How bill ids are assigned at generation time."""

    SEQUENTIAL = "sequential"
    POSITIONAL = "positional"


class SearchField(str, Enum):
    NAME = "name"
    METER_NUMBER = "meter_number"
    CUSTOMER_ID = "customer_id"
    PHONE = "phone"


@dataclass
class Customer:
    """A metered customer and its billing history."""

    customer_id: int
    name: str
    address: str
    phone: str
    email: str
    customer_class: CustomerClass
    meter_number: str
    connection_date: date
    active: bool = True
    history: BillingHistory = field(default_factory=BillingHistory)


class Directory:
    """
    Ordered, capacity-bounded collection of customers.

    Customer ids are id_base + position and are stable because customers are
    never removed.
    """

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        capacity: int = DEFAULT_DIRECTORY_CAPACITY,
        history_capacity: int = DEFAULT_HISTORY_CAPACITY,
        id_base: int = DEFAULT_CUSTOMER_ID_BASE,
        bill_id_scheme: BillIdScheme = BillIdScheme.SEQUENTIAL,
        next_bill_id: int = 1,
    ):
        self.capacity = capacity
        self.history_capacity = history_capacity
        self.id_base = id_base
        self.bill_id_scheme = BillIdScheme(bill_id_scheme)
        self.next_bill_id = next_bill_id
        self._customers: list[Customer] = []
        for customer in customers:
            if customer.meter_number in self._meter_numbers():
                raise DuplicateMeterNumberError(customer.meter_number)
            self._customers.append(customer)

    def __len__(self) -> int:
        return len(self._customers)

    def __iter__(self) -> Iterator[Customer]:
        return iter(self._customers)

    @property
    def customers(self) -> tuple[Customer, ...]:
        return tuple(self._customers)

    @property
    def is_full(self) -> bool:
        return len(self._customers) >= self.capacity

    def _meter_numbers(self) -> set[str]:
        return {c.meter_number for c in self._customers}

    # Lookup

    def find_by_meter(self, meter_number: str) -> Customer:
        for customer in self._customers:
            if customer.meter_number == meter_number:
                return customer
        raise CustomerNotFoundError(meter_number)

    def get(self, customer_id: int) -> Customer:
        for customer in self._customers:
            if customer.customer_id == customer_id:
                return customer
        raise CustomerNotFoundError(customer_id)

    def search(self, search_field: SearchField, term: str | int) -> list[Customer]:
        """
        Find customers by substring of name, meter number or phone, or by exact id.

        String matches are case-sensitive. Results keep directory order.
        """
        search_field = SearchField(search_field)
        if search_field is SearchField.CUSTOMER_ID:
            return [c for c in self._customers if c.customer_id == int(term)]

        term = str(term)
        return [c for c in self._customers if term in getattr(c, search_field.value)]

    # Mutations

    def add_customer(
        self,
        name: str,
        address: str,
        phone: str,
        email: str,
        customer_class: CustomerClass,
        meter_number: str,
        today: date,
    ) -> Customer:
        """
        Register a new active customer with an empty history.

        Raises:
            CapacityExceededError: If the directory is full
            DuplicateMeterNumberError: If the meter number is already registered
        """
        if self.is_full:
            raise CapacityExceededError(self.capacity)
        if meter_number in self._meter_numbers():
            raise DuplicateMeterNumberError(meter_number)

        customer = Customer(
            customer_id=self.id_base + len(self._customers),
            name=name,
            address=address,
            phone=phone,
            email=email,
            customer_class=CustomerClass(customer_class),
            meter_number=meter_number,
            connection_date=today,
            active=True,
            history=BillingHistory(capacity=self.history_capacity),
        )
        self._customers.append(customer)
        return customer

    def update_customer(self, meter_number: str, /, **changes: Any) -> Customer:
        """
        Change profile fields of a customer.

        Allowed fields: name, address, phone, email, customer_class, active.

        Raises:
            CustomerNotFoundError: If no customer has the meter number
            ValueError: If an unknown field is given
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        customer = self.find_by_meter(meter_number)
        if "customer_class" in changes:
            changes["customer_class"] = CustomerClass(changes["customer_class"])
        for name, value in changes.items():
            setattr(customer, name, value)
        return customer

    def _assign_bill_id(self, customer: Customer) -> int:
        if self.bill_id_scheme is BillIdScheme.POSITIONAL:
            return customer.customer_id * 100 + customer.history.next_index + 1
        return self.next_bill_id

    def generate_bill(
        self,
        meter_number: str,
        meter_end: Decimal,
        usage_split: UsageSplit,
        today: date,
        rate_table: RateTable,
    ) -> Bill:
        """
        Generate the next bill for a customer.

        Raises:
            CustomerNotFoundError: If no customer has the meter number
            InvalidMeterReadingError: If the reading is below the previous one
        """
        customer = self.find_by_meter(meter_number)
        bill = customer.history.generate_bill(
            bill_id=self._assign_bill_id(customer),
            customer_class=customer.customer_class,
            meter_end=meter_end,
            usage_split=usage_split,
            today=today,
            rate_table=rate_table,
        )
        if self.bill_id_scheme is BillIdScheme.SEQUENTIAL:
            self.next_bill_id += 1
        return bill

    def record_payment(
        self, meter_number: str, bill_index: int, method: str, today: date
    ) -> Bill:
        """
        Record payment of one bill in a customer's history.

        Raises:
            CustomerNotFoundError: If no customer has the meter number
            BillNotFoundError: If bill_index is outside the history
            AlreadyPaidError: If the bill is already paid
        """
        customer = self.find_by_meter(meter_number)
        bill_count = len(customer.history)
        if not 0 <= bill_index < bill_count:
            raise BillNotFoundError(meter_number, bill_index, bill_count)
        return customer.history.record_payment(bill_index, method, today)

    # Snapshot

    def to_snapshot(self) -> dict[str, Any]:
        """Full directory state as plain, serializable values."""
        return {
            "version": SNAPSHOT_VERSION,
            "next_bill_id": self.next_bill_id,
            "customers": [_customer_to_dict(c) for c in self._customers],
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any], **config: Any) -> Directory:
        """
        Rebuild a directory from to_snapshot() output.

        Args:
            data: Snapshot dictionary
            **config: capacity, history_capacity, id_base, bill_id_scheme

        Raises:
            SnapshotFormatError: If the version is unsupported or a field is malformed
        """
        if not isinstance(data, dict):
            raise SnapshotFormatError("Snapshot must be a dictionary")
        version = data.get("version")
        if version != SNAPSHOT_VERSION:
            raise SnapshotFormatError(
                f"Unsupported snapshot version: {version} (expected {SNAPSHOT_VERSION})"
            )

        history_capacity = config.get("history_capacity", DEFAULT_HISTORY_CAPACITY)
        try:
            customers = [
                _customer_from_dict(entry, history_capacity)
                for entry in data.get("customers", [])
            ]
            next_bill_id = int(data.get("next_bill_id", 1))
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise SnapshotFormatError(f"Malformed snapshot: {e!r}")

        return cls(customers, next_bill_id=next_bill_id, **config)

    def restore(self, data: dict[str, Any]) -> None:
        """Replace customers and the bill counter with a snapshot's, keeping this configuration."""
        restored = Directory.from_snapshot(
            data,
            capacity=self.capacity,
            history_capacity=self.history_capacity,
            id_base=self.id_base,
            bill_id_scheme=self.bill_id_scheme,
        )
        self._customers = restored._customers
        self.next_bill_id = restored.next_bill_id


def _date_or_none(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _bill_to_dict(bill: Bill) -> dict[str, Any]:
    return {
        "bill_id": bill.bill_id,
        "issue_date": bill.issue_date.isoformat(),
        "due_date": bill.due_date.isoformat(),
        "meter_start": str(bill.meter_start),
        "meter_end": str(bill.meter_end),
        "total_usage": str(bill.total_usage),
        "peak_units": str(bill.usage_split.peak_units),
        "off_peak_units": str(bill.usage_split.off_peak_units),
        "amount": str(bill.amount),
        "paid": bill.paid,
        "payment_date": bill.payment_date.isoformat() if bill.payment_date else None,
        "payment_method": bill.payment_method,
    }


def _bill_from_dict(data: dict[str, Any]) -> Bill:
    return Bill(
        bill_id=int(data["bill_id"]),
        issue_date=_date_or_none(data["issue_date"]),
        due_date=_date_or_none(data["due_date"]),
        meter_start=Decimal(str(data["meter_start"])),
        meter_end=Decimal(str(data["meter_end"])),
        total_usage=Decimal(str(data["total_usage"])),
        usage_split=UsageSplit(
            peak_units=Decimal(str(data["peak_units"])),
            off_peak_units=Decimal(str(data["off_peak_units"])),
        ),
        amount=Decimal(str(data["amount"])),
        paid=bool(data.get("paid", False)),
        payment_date=_date_or_none(data.get("payment_date")),
        payment_method=data.get("payment_method") or "",
    )


def _customer_to_dict(customer: Customer) -> dict[str, Any]:
    return {
        "customer_id": customer.customer_id,
        "name": customer.name,
        "address": customer.address,
        "phone": customer.phone,
        "email": customer.email,
        "customer_class": customer.customer_class.value,
        "meter_number": customer.meter_number,
        "connection_date": customer.connection_date.isoformat(),
        "active": customer.active,
        "bills": [_bill_to_dict(b) for b in customer.history],
    }


def _customer_from_dict(data: dict[str, Any], history_capacity: int) -> Customer:
    return Customer(
        customer_id=int(data["customer_id"]),
        name=data["name"],
        address=data.get("address", ""),
        phone=data.get("phone", ""),
        email=data.get("email", ""),
        customer_class=CustomerClass(data["customer_class"]),
        meter_number=str(data["meter_number"]),
        connection_date=_date_or_none(data["connection_date"]),
        active=bool(data.get("active", True)),
        history=BillingHistory(
            (_bill_from_dict(b) for b in data.get("bills", [])),
            capacity=history_capacity,
        ),
    )
