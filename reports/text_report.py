"""
Plain-text rendering of a ReportDocument and the report file sink.
"""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path

from reports.period_report import ReportDocument

logger = logging.getLogger(__name__)

RULE = "=" * 47
TABLE_RULE = "-" * 70


def _pct(value: Decimal) -> str:
    return f"{value:.1f}%"


def _money(value: Decimal) -> str:
    return f"${value:.2f}"


def _units(value: Decimal) -> str:
    return f"{value:.2f} units"


def _header(document: ReportDocument) -> list[str]:
    lines = [RULE, "ELECTRIC BILLING SYSTEM REPORT".center(len(RULE)).rstrip()]
    if document.generated_on is not None:
        lines.append(document.generated_on.strftime("%d/%m/%Y").center(len(RULE)).rstrip())
    lines.extend([RULE, ""])
    return lines


def _customer_section(document: ReportDocument) -> list[str]:
    summary = document.customers
    lines = [
        "CUSTOMER SUMMARY",
        "-----------------",
        f"Total Customers: {summary.total}",
        f"Active Customers: {summary.active} ({_pct(summary.active_pct)})",
        f"Inactive Customers: {summary.inactive} ({_pct(summary.inactive_pct)})",
        "Customer Types:",
    ]
    for entry in summary.by_class:
        lines.append(
            f"  - {entry.customer_class.label}: {entry.count} ({_pct(entry.percentage)})"
        )
    lines.append("")
    return lines


def _billing_section(document: ReportDocument) -> list[str]:
    billing = document.billing
    return [
        f"BILLING SUMMARY FOR {document.period_month:02d}/{document.period_year}",
        "------------------------",
        f"Bills Generated: {billing.generated}",
        f"Bills Paid: {billing.paid} ({_pct(billing.paid_pct)})",
        f"Bills Unpaid: {billing.unpaid} ({_pct(billing.unpaid_pct)})",
        f"Total Billed Amount: {_money(billing.total_billed)}",
        f"Total Collected Amount: {_money(billing.collected)} ({_pct(billing.collected_pct)})",
        f"Total Outstanding Amount: {_money(billing.outstanding)} "
        f"({_pct(billing.outstanding_pct)})",
        f"Total Energy Usage: {_units(billing.total_usage)}",
        "",
    ]


def _class_section(document: ReportDocument) -> list[str]:
    lines = ["USAGE BY CUSTOMER TYPE", "---------------------"]
    for entry in document.class_breakdown:
        lines.extend(
            [
                f"{entry.customer_class.label}:",
                f"  - Usage: {_units(entry.usage)} ({_pct(entry.usage_pct)})",
                f"  - Amount: {_money(entry.amount)} ({_pct(entry.amount_pct)})",
            ]
        )
    lines.append("")
    return lines


def _time_of_use_section(document: ReportDocument) -> list[str]:
    tou = document.time_of_use
    return [
        "TIME OF USE ANALYSIS",
        "-------------------",
        f"Peak Hours Usage (2pm-8pm): {_units(tou.peak_units)} ({_pct(tou.peak_pct)})",
        f"Off-Peak Hours Usage (8pm-2pm): {_units(tou.off_peak_units)} "
        f"({_pct(tou.off_peak_pct)})",
        "",
    ]


def _top_consumer_section(document: ReportDocument) -> list[str]:
    lines = [
        "TOP 5 CONSUMERS",
        "-------------",
        f"{'Rank':<5} {'Customer Name':<20} {'Meter Number':<15} "
        f"{'Usage (units)':<15} {'Amount ($)':<15}".rstrip(),
        TABLE_RULE,
    ]
    for consumer in document.top_consumers:
        lines.append(
            f"{consumer.rank:<5} {consumer.name:<20} {consumer.meter_number:<15} "
            f"{consumer.usage:<15.2f} {consumer.amount:<15.2f}".rstrip()
        )
    lines.append("")
    return lines


def _payment_method_section(document: ReportDocument) -> list[str]:
    lines = [
        "PAYMENT METHODS ANALYSIS",
        "-----------------------",
        f"{'Payment Method':<20} {'Count':<10} {'Amount ($)':<15} {'Percentage':<10}".rstrip(),
        "-" * 54,
    ]
    for entry in document.payment_methods:
        lines.append(
            f"{entry.method:<20} {entry.count:<10} {entry.amount:<15.2f} "
            f"{_pct(entry.percentage)}"
        )
    lines.append("")
    return lines


def render_report(document: ReportDocument) -> str:
    """
    Render the report as text, one section per aggregate.

    Args:
        document: Report produced by generate_period_report

    Returns:
        Report text ending with a newline
    """
    lines = (
        _header(document)
        + _customer_section(document)
        + _billing_section(document)
        + _class_section(document)
        + _time_of_use_section(document)
        + _top_consumer_section(document)
        + _payment_method_section(document)
        + [RULE, "END OF REPORT".center(len(RULE)).rstrip(), RULE]
    )
    return "\n".join(lines) + "\n"


def report_filename(on: date) -> str:
    return f"report_{on:%d}_{on:%m}_{on.year}.txt"


def write_report(document: ReportDocument, directory: Path, on: date) -> Path:
    """
    Write the rendered report to directory/report_DD_MM_YYYY.txt.

    An existing report for the same day is overwritten.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(on)
    path.write_text(render_report(document), encoding="utf-8")
    logger.info("Wrote report for %02d/%d to %s", document.period_month, document.period_year, path)
    return path
