"""
YAML import/export service for directory snapshots.

A snapshot file carries the complete directory (customers and their billing
histories) and replaces the stored state wholesale when imported.

YAML Format:
    version: 1
    next_bill_id: 3
    customers:
      - customer_id: 1001
        name: "Ada Lovelace"
        address: "12 Analytical Way"
        phone: "555-0101"
        email: "ada@example.com"
        customer_class: residential
        meter_number: "MTR-001"
        connection_date: "2024-01-05"
        active: true
        bills:
          - bill_id: 1
            issue_date: "2024-02-01"
            due_date: "2024-02-16"
            meter_start: "0"
            meter_end: "120.000"
            total_usage: "120.000"
            peak_units: "40.000"
            off_peak_units: "80.000"
            amount: "1491.00"
            paid: false
            payment_date: null
            payment_method: ""
"""

import logging
from typing import Any

import yaml

from billing.exceptions import SnapshotFormatError
from customers.directory import Directory

logger = logging.getLogger(__name__)


class DirectoryYAMLExporter:
    """Export a directory snapshot to YAML format."""

    def __init__(self, directory: Directory):
        """
        Initialize exporter with the directory to export.

        Args:
            directory: Directory whose full state is written
        """
        self.directory = directory

    def export_to_yaml(self) -> str:
        """
        Export the directory to a YAML string.

        Returns:
            YAML string representation of the snapshot
        """
        data = self.directory.to_snapshot()
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


class DirectoryYAMLImporter:
    """Import a directory snapshot from YAML format with validation."""

    def __init__(self, yaml_content: str):
        """
        Initialize importer with YAML content.

        Args:
            yaml_content: YAML string to parse
        """
        self.yaml_content = yaml_content

    def import_directory(self, **config: Any) -> Directory:
        """
        Parse the snapshot and build a Directory from it.

        Args:
            **config: Directory arguments (capacity, history_capacity, id_base, bill_id_scheme)

        Returns:
            The rebuilt Directory

        Raises:
            SnapshotFormatError: If the YAML is invalid or the snapshot is malformed
        """
        data = self._parse_yaml()
        self._validate_schema(data)
        directory = Directory.from_snapshot(data, **config)
        logger.info("Imported snapshot with %d customers", len(directory))
        return directory

    def _parse_yaml(self) -> Any:
        """Parse YAML content with error handling."""
        try:
            data = yaml.safe_load(self.yaml_content)
        except yaml.YAMLError as e:
            raise SnapshotFormatError(f"Invalid YAML syntax: {str(e)}")
        if data is None:
            raise SnapshotFormatError("Empty YAML file")
        return data

    def _validate_schema(self, data: Any):
        """Validate top-level YAML structure."""
        if not isinstance(data, dict):
            raise SnapshotFormatError("YAML must contain a dictionary at top level")

        if "version" not in data:
            raise SnapshotFormatError("Missing required top-level key: version")

        if "customers" not in data:
            raise SnapshotFormatError("Missing required top-level key: customers")

        if not isinstance(data["customers"], list):
            raise SnapshotFormatError("customers must be a list")

        for index, entry in enumerate(data["customers"]):
            if not isinstance(entry, dict):
                raise SnapshotFormatError(f"customers[{index}] must be a dictionary")
            if not isinstance(entry.get("bills", []), list):
                raise SnapshotFormatError(f"customers[{index}].bills must be a list")
