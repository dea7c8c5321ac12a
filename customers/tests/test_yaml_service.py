"""
Unit tests for the directory snapshot YAML service and its management commands.

Tests validation, error handling, and roundtrip functionality.
"""

import tempfile
from datetime import date
from decimal import Decimal
from io import StringIO
from pathlib import Path

import pytest
import yaml
from django.core.management import CommandError, call_command
from django.test import TestCase

from billing.core.types import CustomerClass, UsageSplit
from billing.exceptions import SnapshotFormatError
from customers.adapters import load_directory, save_directory
from customers.directory import Directory
from customers.yaml_service import DirectoryYAMLExporter, DirectoryYAMLImporter

TODAY = date(2024, 3, 10)


@pytest.fixture
def directory(rate_table):
    d = Directory()
    d.add_customer(
        "Ada Lovelace", "12 Analytical Way", "555-0101", "ada@example.com",
        CustomerClass.RESIDENTIAL, "MTR-001", TODAY,
    )
    d.generate_bill(
        "MTR-001", Decimal("120"), UsageSplit(Decimal("40"), Decimal("80")), TODAY, rate_table
    )
    return d


def test_export_writes_plain_yaml(directory):
    content = DirectoryYAMLExporter(directory).export_to_yaml()

    data = yaml.safe_load(content)
    assert data["version"] == 1
    assert data["next_bill_id"] == 2
    customer = data["customers"][0]
    assert customer["meter_number"] == "MTR-001"
    assert customer["customer_class"] == "residential"
    assert customer["bills"][0]["amount"] == "1491.00"
    assert customer["bills"][0]["issue_date"] == "2024-03-10"


def test_roundtrip(directory):
    content = DirectoryYAMLExporter(directory).export_to_yaml()

    imported = DirectoryYAMLImporter(content).import_directory()

    assert imported.to_snapshot() == directory.to_snapshot()


def test_import_applies_config(directory):
    content = DirectoryYAMLExporter(directory).export_to_yaml()

    imported = DirectoryYAMLImporter(content).import_directory(capacity=1)

    assert imported.is_full


@pytest.mark.parametrize(
    "content, message",
    [
        ("customers: [unclosed", "Invalid YAML syntax"),
        ("", "Empty YAML file"),
        ("- just\n- a list\n", "dictionary at top level"),
        ("customers: []\n", "Missing required top-level key: version"),
        ("version: 1\n", "Missing required top-level key: customers"),
        ("version: 1\ncustomers: nope\n", "customers must be a list"),
        ("version: 1\ncustomers:\n  - 42\n", r"customers\[0\] must be a dictionary"),
        ("version: 2\ncustomers: []\n", "Unsupported snapshot version"),
    ],
)
def test_import_rejects_invalid_content(content, message):
    with pytest.raises(SnapshotFormatError, match=message):
        DirectoryYAMLImporter(content).import_directory()


class SnapshotCommandTests(TestCase):
    """Test the export_directory and import_directory management commands."""

    def setUp(self):
        directory = Directory()
        directory.add_customer(
            "Grace Hopper", "1 Navy Rd", "555-0202", "", CustomerClass.COMMERCIAL, "MTR-002", TODAY
        )
        save_directory(directory)

    def test_export_then_import(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "snapshot.yaml"
            out = StringIO()
            call_command("export_directory", str(path), stdout=out)
            self.assertIn("Exported 1 customers", out.getvalue())

            save_directory(Directory())
            self.assertEqual(len(load_directory()), 0)

            call_command("import_directory", str(path), stdout=StringIO())

        directory = load_directory()
        self.assertEqual(directory.customers[0].name, "Grace Hopper")

    def test_import_missing_file(self):
        with self.assertRaises(CommandError):
            call_command("import_directory", "/nonexistent/snapshot.yaml", stdout=StringIO())

    def test_invalid_snapshot_leaves_database_unchanged(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "broken.yaml"
            path.write_text("version: 7\ncustomers: []\n")
            with self.assertRaises(CommandError):
                call_command("import_directory", str(path), stdout=StringIO())

        self.assertEqual(load_directory().customers[0].meter_number, "MTR-002")
