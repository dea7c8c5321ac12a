"""
Adapters for converting between Django ORM models and the billing core.

The store is treated as one snapshot: save_directory rewrites every row
inside a single transaction and load_directory rebuilds the whole
Directory, so no partial state is ever written.
"""

import logging
from typing import Any

from django.db import transaction
from django.db.models import Max

from billing.conf import billing_setting
from billing.core.history import BillingHistory
from billing.core.types import Bill, CustomerClass, UsageSplit
from billing.models import Bill as BillModel
from customers.directory import BillIdScheme, Customer, Directory
from customers.models import Customer as CustomerModel

logger = logging.getLogger(__name__)


def directory_config() -> dict[str, Any]:
    """Directory constructor arguments taken from the ELECTRIC_BILLING settings."""
    return {
        "capacity": billing_setting("MAX_CUSTOMERS"),
        "history_capacity": billing_setting("MAX_BILL_HISTORY"),
        "id_base": billing_setting("CUSTOMER_ID_BASE"),
        "bill_id_scheme": BillIdScheme(billing_setting("BILL_ID_SCHEME")),
    }


def bill_to_dto(bill: BillModel) -> Bill:
    """
    Convert Django Bill model to Bill dataclass.

    Args:
        bill: Django Bill model instance

    Returns:
        Bill dataclass
    """
    return Bill(
        bill_id=bill.bill_id,
        issue_date=bill.issue_date,
        due_date=bill.due_date,
        meter_start=bill.meter_start,
        meter_end=bill.meter_end,
        total_usage=bill.total_usage,
        usage_split=UsageSplit(
            peak_units=bill.peak_units,
            off_peak_units=bill.off_peak_units,
        ),
        amount=bill.amount,
        paid=bill.is_paid,
        payment_date=bill.payment_date,
        payment_method=bill.payment_method,
    )


def customer_to_dto(customer: CustomerModel, history_capacity: int) -> Customer:
    """
    Convert Django Customer model (with prefetched bills) to Customer dataclass.

    Args:
        customer: Django Customer model instance
        history_capacity: Capacity of the rebuilt billing history

    Returns:
        Customer dataclass owning its BillingHistory
    """
    bills = sorted(customer.bills.all(), key=lambda b: b.position)
    return Customer(
        customer_id=customer.customer_id,
        name=customer.name,
        address=customer.address,
        phone=customer.phone,
        email=customer.email,
        customer_class=CustomerClass(customer.customer_class),
        meter_number=customer.meter_number,
        connection_date=customer.connection_date,
        active=customer.is_active,
        history=BillingHistory(
            (bill_to_dto(b) for b in bills), capacity=history_capacity
        ),
    )


def customer_to_model(customer: Customer, position: int) -> CustomerModel:
    return CustomerModel(
        customer_id=customer.customer_id,
        position=position,
        name=customer.name,
        address=customer.address,
        phone=customer.phone,
        email=customer.email,
        customer_class=customer.customer_class.value,
        meter_number=customer.meter_number,
        connection_date=customer.connection_date,
        is_active=customer.active,
    )


def bill_to_model(bill: Bill, customer: CustomerModel, position: int) -> BillModel:
    return BillModel(
        customer=customer,
        bill_id=bill.bill_id,
        position=position,
        issue_date=bill.issue_date,
        due_date=bill.due_date,
        meter_start=bill.meter_start,
        meter_end=bill.meter_end,
        total_usage=bill.total_usage,
        peak_units=bill.usage_split.peak_units,
        off_peak_units=bill.usage_split.off_peak_units,
        amount=bill.amount,
        is_paid=bill.paid,
        payment_date=bill.payment_date,
        payment_method=bill.payment_method,
    )


def load_directory(**overrides: Any) -> Directory:
    """
    Rebuild the directory from the database.

    The sequential bill id counter resumes after the highest stored bill id.

    Args:
        **overrides: Directory arguments replacing the configured ones

    Returns:
        Directory holding every stored customer and bill
    """
    config = {**directory_config(), **overrides}
    queryset = CustomerModel.objects.prefetch_related("bills").order_by("position")
    customers = [customer_to_dto(c, config["history_capacity"]) for c in queryset]

    max_bill_id = BillModel.objects.aggregate(max_id=Max("bill_id"))["max_id"] or 0
    directory = Directory(customers, next_bill_id=max_bill_id + 1, **config)

    logger.info("Loaded %d customers from the database", len(directory))
    return directory


def save_directory(directory: Directory) -> None:
    """
    Replace the stored customers and bills with the directory's state.

    Runs in one transaction so a failure leaves the previous state intact.
    """
    bill_count = 0
    with transaction.atomic():
        BillModel.objects.all().delete()
        CustomerModel.objects.all().delete()

        bill_rows: list[BillModel] = []
        for position, customer in enumerate(directory):
            customer_row = customer_to_model(customer, position)
            customer_row.save()
            bill_rows.extend(
                bill_to_model(bill, customer_row, index)
                for index, bill in enumerate(customer.history)
            )
        BillModel.objects.bulk_create(bill_rows)
        bill_count = len(bill_rows)

    logger.info("Saved %d customers and %d bills", len(directory), bill_count)
