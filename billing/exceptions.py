"""Custom exceptions for billing services."""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured


class BillingServiceError(Exception):
    """Base exception for recoverable billing errors."""

    pass


class NotFoundError(BillingServiceError):
    """Raised when a requested record does not exist."""

    pass


class CustomerNotFoundError(NotFoundError):
    """Raised when no customer matches a meter number or customer id."""

    def __init__(self, key: str | int):
        self.key = key
        super().__init__(f"Customer not found: {key}")


class BillNotFoundError(NotFoundError):
    """Raised when a bill index is outside a customer's history."""

    def __init__(self, meter_number: str, bill_index: int, bill_count: int):
        self.meter_number = meter_number
        self.bill_index = bill_index
        self.bill_count = bill_count
        if bill_count == 0:
            message = f"No bills found for meter {meter_number}"
        else:
            message = (
                f"Invalid bill index {bill_index} for meter {meter_number} "
                f"(expected 0-{bill_count - 1})"
            )
        super().__init__(message)


class InsufficientDataError(BillingServiceError):
    """Raised when an analysis needs more bills than the history holds."""

    def __init__(self, message: str, required: int, available: int):
        super().__init__(message)
        self.required = required
        self.available = available


class AlreadyPaidError(BillingServiceError):
    """Raised when recording a payment on a bill that is already paid."""

    def __init__(self, bill_id: int):
        self.bill_id = bill_id
        super().__init__(f"Bill {bill_id} is already paid")


class CapacityExceededError(BillingServiceError):
    """Raised when the customer directory is full."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Maximum number of customers reached ({capacity})")


class DuplicateMeterNumberError(BillingServiceError):
    """Raised when a meter number is already assigned to another customer."""

    def __init__(self, meter_number: str):
        self.meter_number = meter_number
        super().__init__(f"Meter number {meter_number} is already registered")


class InvalidMeterReadingError(BillingServiceError):
    """Raised when a meter reading is lower than the previous bill's reading."""

    def __init__(self, meter_end: Decimal, previous_reading: Decimal):
        self.meter_end = meter_end
        self.previous_reading = previous_reading
        super().__init__(
            f"Current meter reading {meter_end} is lower than "
            f"the previous reading {previous_reading}"
        )


class SnapshotFormatError(BillingServiceError):
    """Raised when a directory snapshot cannot be read."""

    pass


class RateConfigurationError(ImproperlyConfigured):
    """Raised when the rate table is missing or malformed. Not recoverable."""

    pass
