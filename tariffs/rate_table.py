"""
YAML loading for the rate table.

The bundled rates.yaml holds the default schedules; the RATE_TABLE_PATH
setting points at a replacement file.

YAML Format:
    rate_schedules:
      - customer_class: residential
        base_charge: 50.00
        tier1_rate: 3.50
        tier2_rate: 7.00
        tier3_rate: 10.00
        peak_rate: 12.00
        off_peak_rate: 5.00
        tax_rate: 0.05
"""

import logging
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from billing.conf import billing_setting
from billing.core.rates import RateTable
from billing.core.types import CustomerClass, RateSchedule
from billing.exceptions import RateConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RATE_TABLE_PATH = Path(__file__).resolve().parent / "rates.yaml"

RATE_FIELDS = (
    "base_charge",
    "tier1_rate",
    "tier2_rate",
    "tier3_rate",
    "peak_rate",
    "off_peak_rate",
    "tax_rate",
)


class RateTableYAMLLoader:
    """Build a RateTable from YAML content, failing loudly on any defect."""

    def __init__(self, yaml_content: str, source: str = "<string>"):
        """
        Initialize loader with YAML content.

        Args:
            yaml_content: YAML string to parse
            source: Name of the file the content came from, for error messages
        """
        self.yaml_content = yaml_content
        self.source = source

    def load(self) -> RateTable:
        """
        Parse and validate the rate schedules.

        Returns:
            RateTable with one schedule per customer class

        Raises:
            RateConfigurationError: If the YAML is malformed or incomplete
        """
        data = self._parse_yaml()
        self._validate_schema(data)
        schedules = [
            self._build_schedule(index, schedule_data)
            for index, schedule_data in enumerate(data["rate_schedules"])
        ]
        return RateTable(schedules)

    def _parse_yaml(self) -> Any:
        """Parse YAML content with error handling."""
        try:
            data = yaml.safe_load(self.yaml_content)
        except yaml.YAMLError as e:
            raise RateConfigurationError(f"Invalid YAML syntax in {self.source}: {e}")
        if data is None:
            raise RateConfigurationError(f"Empty rate table file: {self.source}")
        return data

    def _validate_schema(self, data: Any):
        """Validate top-level YAML structure."""
        if not isinstance(data, dict):
            raise RateConfigurationError(
                f"{self.source} must contain a dictionary at top level"
            )
        if "rate_schedules" not in data:
            raise RateConfigurationError(
                f"Missing required top-level key in {self.source}: rate_schedules"
            )
        if not isinstance(data["rate_schedules"], list):
            raise RateConfigurationError(f"rate_schedules must be a list in {self.source}")

    def _build_schedule(self, index: int, schedule_data: Any) -> RateSchedule:
        """Convert one YAML entry into a RateSchedule."""
        label = f"{self.source} rate_schedules[{index}]"
        if not isinstance(schedule_data, dict):
            raise RateConfigurationError(f"{label} must be a dictionary")

        missing = [f for f in ("customer_class", *RATE_FIELDS) if f not in schedule_data]
        if missing:
            raise RateConfigurationError(
                f"{label} missing required fields: {', '.join(missing)}"
            )

        try:
            customer_class = CustomerClass(schedule_data["customer_class"])
        except ValueError:
            raise RateConfigurationError(
                f"{label} has unknown customer_class '{schedule_data['customer_class']}'"
            )

        values = {name: self._parse_decimal(label, name, schedule_data[name]) for name in RATE_FIELDS}
        try:
            return RateSchedule(customer_class=customer_class, **values)
        except ValueError as e:
            raise RateConfigurationError(f"{label}: {e}")

    def _parse_decimal(self, label: str, name: str, value: Any) -> Decimal:
        if isinstance(value, bool):
            raise RateConfigurationError(f"{label} {name} must be a number")
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise RateConfigurationError(f"{label} {name} must be a number (got '{value}')")


@lru_cache(maxsize=None)
def load_rate_table(path: Path) -> RateTable:
    """Load and cache the rate table stored at path."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise RateConfigurationError(f"Cannot read rate table {path}: {e}")

    rate_table = RateTableYAMLLoader(content, source=str(path)).load()
    logger.info("Loaded rate table from %s", path)
    return rate_table


def get_rate_table() -> RateTable:
    """Rate table named by the RATE_TABLE_PATH setting, or the bundled default."""
    configured = billing_setting("RATE_TABLE_PATH")
    path = Path(configured) if configured else DEFAULT_RATE_TABLE_PATH
    return load_rate_table(path.resolve())
