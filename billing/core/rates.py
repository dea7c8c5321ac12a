"""
Rate table lookup.

Loading the table from YAML lives in tariffs.rate_table; this module only
holds the immutable mapping from customer class to rate schedule.
"""

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from billing.exceptions import RateConfigurationError

from .types import CustomerClass, RateSchedule


class RateTable:
    """Exactly one RateSchedule per CustomerClass."""

    def __init__(self, schedules: Iterable[RateSchedule]):
        by_class: dict[CustomerClass, RateSchedule] = {}
        for schedule in schedules:
            if schedule.customer_class in by_class:
                raise RateConfigurationError(
                    f"Duplicate rate schedule for {schedule.customer_class.label}"
                )
            by_class[schedule.customer_class] = schedule

        missing = [c.label for c in CustomerClass if c not in by_class]
        if missing:
            raise RateConfigurationError(
                f"Rate table is missing schedules for: {', '.join(missing)}"
            )

        self._schedules = MappingProxyType(by_class)

    def lookup(self, customer_class: CustomerClass) -> RateSchedule:
        return self._schedules[CustomerClass(customer_class)]

    def __iter__(self) -> Iterator[RateSchedule]:
        return iter(self._schedules[c] for c in CustomerClass)

    def __len__(self) -> int:
        return len(self._schedules)
