"""
Core bill amount calculation.

Tiered energy pricing plus time-of-use charges, taxed on the combined amount.
"""

from decimal import Decimal

from .rates import RateTable
from .types import CustomerClass, RateSchedule, UsageSplit

# Upper bound (inclusive) of each priced tier, in units
TIER1_LIMIT = Decimal("100")
TIER2_LIMIT = Decimal("300")


def tiered_charge(schedule: RateSchedule, total_usage: Decimal) -> Decimal:
    """
    Base charge plus tiered energy charge for the given usage.

    Tiers: 0-100 units at tier1, 101-300 at tier2, 301+ at tier3.
    """
    if total_usage < 0:
        raise ValueError(f"Usage must be >= 0 (got {total_usage})")

    amount = schedule.base_charge
    if total_usage <= TIER1_LIMIT:
        amount += total_usage * schedule.tier1_rate
    elif total_usage <= TIER2_LIMIT:
        amount += TIER1_LIMIT * schedule.tier1_rate
        amount += (total_usage - TIER1_LIMIT) * schedule.tier2_rate
    else:
        amount += TIER1_LIMIT * schedule.tier1_rate
        amount += (TIER2_LIMIT - TIER1_LIMIT) * schedule.tier2_rate
        amount += (total_usage - TIER2_LIMIT) * schedule.tier3_rate
    return amount


def time_of_use_charge(schedule: RateSchedule, usage_split: UsageSplit) -> Decimal:
    """Peak and off-peak surcharge."""
    return (
        usage_split.peak_units * schedule.peak_rate
        + usage_split.off_peak_units * schedule.off_peak_rate
    )


def pre_tax_amount(
    schedule: RateSchedule, total_usage: Decimal, usage_split: UsageSplit
) -> Decimal:
    return tiered_charge(schedule, total_usage) + time_of_use_charge(schedule, usage_split)


def compute_amount(
    rate_table: RateTable,
    customer_class: CustomerClass,
    total_usage: Decimal,
    usage_split: UsageSplit,
) -> Decimal:
    """
    Calculate the amount due for one billing period.

    Args:
        rate_table: Rate schedules by customer class
        customer_class: Class whose schedule applies
        total_usage: Units consumed in the period (>= 0)
        usage_split: Peak/off-peak units, priced independently of total_usage

    Returns:
        Unrounded amount including tax

    Raises:
        ValueError: If total_usage is negative
    """
    schedule = rate_table.lookup(customer_class)
    amount = pre_tax_amount(schedule, total_usage, usage_split)
    return amount + amount * schedule.tax_rate
