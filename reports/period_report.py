"""
Period report aggregation.

Builds a DataFrame of every bill in the directory and summarizes the bills
issued (and the payments made) in one calendar month. Pure: the directory
is only read.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

import pandas as pd

from billing.core.types import CustomerClass
from billing.core.util import percentage
from customers.directory import Directory

TOP_CONSUMER_LIMIT = 5

BILL_COLUMNS = [
    "position",
    "customer_class",
    "total_usage",
    "amount",
    "peak_units",
    "off_peak_units",
    "issue_year",
    "issue_month",
    "paid",
    "payment_year",
    "payment_month",
    "payment_method",
]

BILL_DTYPES = {
    "position": "int64",
    "issue_year": "int64",
    "issue_month": "int64",
    "paid": "bool",
    "payment_year": "int64",
    "payment_month": "int64",
}


@dataclass(frozen=True)
class ClassCount:
    customer_class: CustomerClass
    count: int
    percentage: Decimal


@dataclass(frozen=True)
class CustomerSummary:
    total: int
    active: int
    active_pct: Decimal
    inactive: int
    inactive_pct: Decimal
    by_class: tuple[ClassCount, ...]


@dataclass(frozen=True)
class BillingSummary:
    """Bills issued in the period."""

    generated: int
    paid: int
    paid_pct: Decimal
    unpaid: int
    unpaid_pct: Decimal
    total_billed: Decimal
    collected: Decimal
    collected_pct: Decimal
    outstanding: Decimal
    outstanding_pct: Decimal
    total_usage: Decimal


@dataclass(frozen=True)
class ClassBreakdown:
    customer_class: CustomerClass
    usage: Decimal
    usage_pct: Decimal  # Of the period's total usage
    amount: Decimal
    amount_pct: Decimal  # Of the period's total billed amount


@dataclass(frozen=True)
class TimeOfUseSummary:
    peak_units: Decimal
    peak_pct: Decimal
    off_peak_units: Decimal
    off_peak_pct: Decimal


@dataclass(frozen=True)
class TopConsumer:
    rank: int
    customer_id: int
    name: str
    meter_number: str
    usage: Decimal
    amount: Decimal


@dataclass(frozen=True)
class PaymentMethodSummary:
    """Payments made in the period with one method."""

    method: str
    count: int
    amount: Decimal
    percentage: Decimal  # Of the collected total


@dataclass(frozen=True)
class ReportDocument:
    period_month: int
    period_year: int
    generated_on: Optional[date]
    customers: CustomerSummary
    billing: BillingSummary
    class_breakdown: tuple[ClassBreakdown, ...]
    time_of_use: TimeOfUseSummary
    top_consumers: tuple[TopConsumer, ...]
    payment_methods: tuple[PaymentMethodSummary, ...]


def _decimal_sum(values: pd.Series) -> Decimal:
    """Sum a Series of Decimals; an empty Series sums to Decimal 0."""
    total = values.sum()
    if not isinstance(total, Decimal):
        total = Decimal(str(total))
    return total


def build_bill_frame(directory: Directory) -> pd.DataFrame:
    """
    Flatten every customer's history into one DataFrame.

    Rows keep directory order, then history order. Payment year/month are 0
    for unpaid bills.
    """
    rows = []
    for position, customer in enumerate(directory):
        for bill in customer.history:
            rows.append(
                {
                    "position": position,
                    "customer_class": customer.customer_class.value,
                    "total_usage": bill.total_usage,
                    "amount": bill.amount,
                    "peak_units": bill.usage_split.peak_units,
                    "off_peak_units": bill.usage_split.off_peak_units,
                    "issue_year": bill.issue_date.year,
                    "issue_month": bill.issue_date.month,
                    "paid": bill.paid,
                    "payment_year": bill.payment_date.year if bill.payment_date else 0,
                    "payment_month": bill.payment_date.month if bill.payment_date else 0,
                    "payment_method": bill.payment_method,
                }
            )
    return pd.DataFrame(rows, columns=BILL_COLUMNS).astype(BILL_DTYPES)


def _summarize_customers(directory: Directory) -> CustomerSummary:
    total = len(directory)
    active = sum(1 for c in directory if c.active)
    inactive = total - active

    by_class = []
    for customer_class in CustomerClass:
        count = sum(1 for c in directory if c.customer_class is customer_class)
        by_class.append(ClassCount(customer_class, count, percentage(count, total)))

    return CustomerSummary(
        total=total,
        active=active,
        active_pct=percentage(active, total),
        inactive=inactive,
        inactive_pct=percentage(inactive, total),
        by_class=tuple(by_class),
    )


def _summarize_billing(in_period: pd.DataFrame) -> BillingSummary:
    generated = len(in_period)
    paid_mask = in_period["paid"]
    paid = int(paid_mask.sum())
    unpaid = generated - paid

    total_billed = _decimal_sum(in_period["amount"])
    collected = _decimal_sum(in_period.loc[paid_mask, "amount"])
    outstanding = _decimal_sum(in_period.loc[~paid_mask, "amount"])

    return BillingSummary(
        generated=generated,
        paid=paid,
        paid_pct=percentage(paid, generated),
        unpaid=unpaid,
        unpaid_pct=percentage(unpaid, generated),
        total_billed=total_billed,
        collected=collected,
        collected_pct=percentage(collected, total_billed),
        outstanding=outstanding,
        outstanding_pct=percentage(outstanding, total_billed),
        total_usage=_decimal_sum(in_period["total_usage"]),
    )


def _break_down_by_class(
    in_period: pd.DataFrame, billing: BillingSummary
) -> tuple[ClassBreakdown, ...]:
    breakdown = []
    for customer_class in CustomerClass:
        class_bills = in_period[in_period["customer_class"] == customer_class.value]
        usage = _decimal_sum(class_bills["total_usage"])
        amount = _decimal_sum(class_bills["amount"])
        breakdown.append(
            ClassBreakdown(
                customer_class=customer_class,
                usage=usage,
                usage_pct=percentage(usage, billing.total_usage),
                amount=amount,
                amount_pct=percentage(amount, billing.total_billed),
            )
        )
    return tuple(breakdown)


def _summarize_time_of_use(in_period: pd.DataFrame, total_usage: Decimal) -> TimeOfUseSummary:
    peak = _decimal_sum(in_period["peak_units"])
    off_peak = _decimal_sum(in_period["off_peak_units"])
    return TimeOfUseSummary(
        peak_units=peak,
        peak_pct=percentage(peak, total_usage),
        off_peak_units=off_peak,
        off_peak_pct=percentage(off_peak, total_usage),
    )


def _rank_top_consumers(directory: Directory, in_period: pd.DataFrame) -> tuple[TopConsumer, ...]:
    """
    Customers with the most in-period usage, highest first.

    Customers without usage in the period are left out. Ties keep directory order.
    """
    if in_period.empty:
        return ()

    per_customer = in_period.groupby("position", sort=True).agg(
        usage=("total_usage", _decimal_sum),
        amount=("amount", _decimal_sum),
    )

    candidates = [
        (int(position), row["usage"], row["amount"])
        for position, row in per_customer.iterrows()
        if row["usage"] > 0
    ]
    # sorted() is stable, also with reverse=True
    ranked = sorted(candidates, key=lambda item: item[1], reverse=True)[:TOP_CONSUMER_LIMIT]

    customers = directory.customers
    return tuple(
        TopConsumer(
            rank=rank,
            customer_id=customers[position].customer_id,
            name=customers[position].name,
            meter_number=customers[position].meter_number,
            usage=usage,
            amount=amount,
        )
        for rank, (position, usage, amount) in enumerate(ranked, start=1)
    )


def _summarize_payment_methods(
    bills: pd.DataFrame, month: int, year: int, collected: Decimal
) -> tuple[PaymentMethodSummary, ...]:
    """Payments dated in the period, grouped by method in first-seen order."""
    paid_in_period = bills[
        bills["paid"] & (bills["payment_year"] == year) & (bills["payment_month"] == month)
    ]
    if paid_in_period.empty:
        return ()

    grouped = paid_in_period.groupby("payment_method", sort=False).agg(
        count=("amount", "count"),
        amount=("amount", _decimal_sum),
    )
    return tuple(
        PaymentMethodSummary(
            method=str(method),
            count=int(row["count"]),
            amount=row["amount"],
            percentage=percentage(row["amount"], collected),
        )
        for method, row in grouped.iterrows()
    )


def generate_period_report(
    directory: Directory,
    month: int,
    year: int,
    generated_on: Optional[date] = None,
) -> ReportDocument:
    """
    Summarize customers, bills and payments for one calendar month.

    Args:
        directory: Customers and their billing histories
        month: Period month (1-12)
        year: Period year
        generated_on: Date stamped on the report

    Returns:
        ReportDocument; every percentage with a zero denominator is 0

    Raises:
        ValueError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12 (got {month})")

    bills = build_bill_frame(directory)
    in_period = bills[(bills["issue_year"] == year) & (bills["issue_month"] == month)]

    billing = _summarize_billing(in_period)

    return ReportDocument(
        period_month=month,
        period_year=year,
        generated_on=generated_on,
        customers=_summarize_customers(directory),
        billing=billing,
        class_breakdown=_break_down_by_class(in_period, billing),
        time_of_use=_summarize_time_of_use(in_period, billing.total_usage),
        top_consumers=_rank_top_consumers(directory, in_period),
        payment_methods=_summarize_payment_methods(bills, month, year, billing.collected),
    )
