"""
Text rendering for the billing console.

Every function returns a list of lines; the shell decides where they go.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from billing.core.analytics import BillComparison, BillProjection, UsageAlert, UsageLevel
from billing.core.types import Bill
from customers.directory import Customer

TABLE_RULE = "-" * 63

SAVING_TIPS = [
    "Tips to reduce consumption:",
    "1. Turn off lights when not in use",
    "2. Use energy-efficient appliances",
    "3. Reduce air conditioning usage",
    "4. Check for electrical leakages",
]

PROJECTION_TIPS = [
    "Energy-Saving Tips:",
    "1. Switch to LED bulbs to save up to 80% on lighting costs",
    "2. Use smart power strips to eliminate phantom power usage",
    "3. Adjust your thermostat by 1-2 degrees to save up to 10% on heating/cooling",
    "4. Shift energy-intensive activities to off-peak hours (8pm-2pm)",
]

HIGH_USAGE_CAUSES = [
    "Possible causes of high consumption:",
    "1. Weather changes (heating/cooling)",
    "2. New appliances or electronic devices",
    "3. Increased occupancy",
    "4. Faulty appliances or electrical leakages",
]

HIGH_USAGE_ACTIONS = [
    "Recommended actions:",
    "1. Schedule an energy audit",
    "2. Check for appliances left on standby",
    "3. Inspect for electrical leakages",
    "4. Consider smart home energy monitoring",
]

OFF_PEAK_ACTIVITIES = [
    "TIP: You can save money by shifting usage to off-peak hours (8pm-2pm).",
    "Activities to consider shifting:",
    "- Laundry",
    "- Dishwashing",
    "- Electric vehicle charging",
    "- Heavy machinery operation",
]


def format_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else "-"


def format_money(value: Decimal) -> str:
    return f"${value:.2f}"


def format_units(value: Decimal) -> str:
    return f"{value:.2f} units"


def format_pct(value: Optional[Decimal]) -> str:
    return "undefined" if value is None else f"{value:.2f}%"


def customer_details(customer: Customer) -> list[str]:
    return [
        "------ Customer Details ------",
        f"ID: {customer.customer_id}",
        f"Name: {customer.name}",
        f"Address: {customer.address}",
        f"Phone: {customer.phone}",
        f"Email: {customer.email}",
        f"Meter Number: {customer.meter_number}",
        f"Customer Type: {customer.customer_class.label}",
        f"Connection Date: {format_date(customer.connection_date)}",
        f"Active Status: {'Active' if customer.active else 'Inactive'}",
        f"Number of Bills: {len(customer.history)}",
        "-----------------------------",
    ]


def bill_details(customer: Customer, bill: Bill) -> list[str]:
    lines = [
        "========== ELECTRIC BILL ==========",
        f"Bill ID: {bill.bill_id}",
        f"Date: {format_date(bill.issue_date)}",
        f"Due Date: {format_date(bill.due_date)}",
        f"Customer ID: {customer.customer_id}",
        f"Name: {customer.name}",
        f"Address: {customer.address}",
        f"Meter Number: {customer.meter_number}",
        f"Customer Type: {customer.customer_class.label}",
        "-------------------------------",
        f"Previous Reading: {format_units(bill.meter_start)}",
        f"Current Reading: {format_units(bill.meter_end)}",
        f"Total Consumption: {format_units(bill.total_usage)}",
        "-------------------------------",
        f"Peak Hours Usage (2pm-8pm): {format_units(bill.usage_split.peak_units)}",
        f"Off-Peak Hours Usage (8pm-2pm): {format_units(bill.usage_split.off_peak_units)}",
        "-------------------------------",
        f"Total Amount Due: {format_money(bill.amount)}",
        f"Payment Status: {bill.status.value.capitalize()}",
    ]
    if bill.paid:
        lines.append(f"Payment Date: {format_date(bill.payment_date)}")
        lines.append(f"Payment Method: {bill.payment_method}")
    lines.append("===============================")
    return lines


def payment_history(customer: Customer, bills: list[Bill]) -> list[str]:
    lines = [f"===== Payment History for {customer.name} ====="]
    if not bills:
        lines.append("No payment history found!")
        return lines
    for index, bill in enumerate(bills):
        lines.append(
            f"[{index}] Bill ID: {bill.bill_id}, Date: {format_date(bill.issue_date)}, "
            f"Amount: {format_money(bill.amount)}, Status: {bill.status.value.capitalize()}"
        )
        if bill.paid:
            lines.append(
                f"  Payment Date: {format_date(bill.payment_date)}, Method: {bill.payment_method}"
            )
    lines.append("===================================")
    return lines


def customer_table(customers: list[Customer]) -> list[str]:
    lines = [f"{'ID':<5} {'Name':<20} {'Meter Number':<15} {'Type':<15} {'Status':<10}", TABLE_RULE]
    for c in customers:
        status = "Active" if c.active else "Inactive"
        lines.append(
            f"{c.customer_id:<5} {c.name:<20} {c.meter_number:<15} "
            f"{c.customer_class.label:<15} {status:<10}".rstrip()
        )
    lines.append(TABLE_RULE)
    return lines


def comparison(result: BillComparison) -> list[str]:
    current, previous = result.current, result.previous
    lines = [
        "===== Bill Comparison =====",
        f"Current Bill ({format_date(current.issue_date)}): "
        f"{format_money(current.amount)}, {format_units(current.total_usage)}",
        f"Previous Bill ({format_date(previous.issue_date)}): "
        f"{format_money(previous.amount)}, {format_units(previous.total_usage)}",
        "---------------------------",
        f"Usage Difference: {format_units(result.usage_diff)} ({format_pct(result.usage_diff_pct)})",
        f"Amount Difference: {format_money(result.amount_diff)} "
        f"({format_pct(result.amount_diff_pct)})",
        "===========================",
    ]
    if result.high_usage_advisory:
        lines.append("")
        lines.append("ALERT: Your usage has increased by more than 20% compared to last month!")
        lines.extend(SAVING_TIPS)
    return lines


def projection(result: BillProjection) -> list[str]:
    return [
        "===== Next Month's Bill Projection =====",
        f"Projected Usage: {format_units(result.projected_usage)}",
        f"Projected Amount: {format_money(result.projected_amount)}",
        "---------------------------------------",
        f"Last Month's Usage: {format_units(result.latest.total_usage)}",
        f"Last Month's Amount: {format_money(result.latest.amount)}",
        "=======================================",
        "",
        *PROJECTION_TIPS,
    ]


def usage_alert(customer: Customer, alert: UsageAlert) -> list[str]:
    lines = [
        "===== Energy Usage Analysis =====",
        f"Customer: {customer.name}",
        f"Meter Number: {customer.meter_number}",
        f"Last Month's Usage: {format_units(alert.latest_usage)}",
        f"Average Monthly Usage: {format_units(alert.average_usage)}",
    ]
    if len(customer.history) > 1:
        lines.append(f"Monthly Change: {format_pct(alert.monthly_change_pct)}")
    lines.append("-------------------------------")

    if alert.level is UsageLevel.HIGH:
        lines.append(f"ALERT: Your usage is {alert.magnitude_pct:.2f}% above your average!")
        lines.extend(["", *HIGH_USAGE_CAUSES, "", *HIGH_USAGE_ACTIONS])
    elif alert.level is UsageLevel.LOW:
        lines.append(
            f"NOTICE: Your usage is {alert.magnitude_pct:.2f}% below your average. Good job!"
        )
    else:
        lines.append("Your usage is within normal range.")

    lines.append("")
    lines.append(f"Peak Hours Usage: {format_pct(alert.peak_share_pct)} of total")
    if alert.shift_to_off_peak_advisory:
        lines.extend(OFF_PEAK_ACTIVITIES)
    lines.append("===============================")
    return lines
