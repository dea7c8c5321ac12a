from datetime import date
from decimal import Decimal

from billing.core.types import CustomerClass, UsageSplit
from customers.directory import Directory
from reports.period_report import generate_period_report
from reports.text_report import render_report, report_filename, write_report

ON = date(2024, 3, 5)


def sample_document(rate_table):
    directory = Directory()
    directory.add_customer("Ada Lovelace", "", "", "", CustomerClass.RESIDENTIAL, "MTR-001", ON)
    directory.generate_bill("MTR-001", Decimal("100"), UsageSplit(), ON, rate_table)
    directory.record_payment("MTR-001", 0, "Cash", ON)
    return generate_period_report(directory, 3, 2024, generated_on=ON)


def test_render_empty_report():
    text = render_report(generate_period_report(Directory(), 3, 2024))

    assert "ELECTRIC BILLING SYSTEM REPORT" in text
    assert "Total Customers: 0" in text
    assert "Active Customers: 0 (0.0%)" in text
    assert "BILLING SUMMARY FOR 03/2024" in text
    assert "Total Billed Amount: $0.00" in text
    assert "Peak Hours Usage (2pm-8pm): 0.00 units (0.0%)" in text
    assert text.rstrip().endswith("=" * 47)
    assert "END OF REPORT" in text


def test_render_sections(rate_table):
    text = render_report(sample_document(rate_table))

    assert "05/03/2024" in text
    assert "  - Residential: 1 (100.0%)" in text
    assert "Bills Paid: 1 (100.0%)" in text
    assert "Total Collected Amount: $420.00 (100.0%)" in text
    assert "Residential:\n  - Usage: 100.00 units (100.0%)" in text
    assert "1     Ada Lovelace         MTR-001         100.00          420.00" in text
    assert "Cash                 1          420.00          100.0%" in text


def test_report_filename():
    assert report_filename(date(2024, 1, 7)) == "report_07_01_2024.txt"


def test_write_report(rate_table, tmp_path):
    document = sample_document(rate_table)
    target = tmp_path / "out"

    path = write_report(document, target, ON)

    assert path == target / "report_05_03_2024.txt"
    assert path.read_text(encoding="utf-8") == render_report(document)
