from decimal import Decimal

from billing.forms import MeterReadingForm, PaymentForm, ReportPeriodForm


def test_meter_reading_form_valid():
    form = MeterReadingForm(
        {"meter_end": "150.25", "peak_units": "40", "off_peak_units": "110.25"}
    )

    assert form.is_valid(), form.errors
    assert form.cleaned_data == {
        "meter_end": Decimal("150.25"),
        "peak_units": Decimal("40"),
        "off_peak_units": Decimal("110.25"),
    }


def test_meter_reading_form_blank_split_is_zero():
    form = MeterReadingForm({"meter_end": "10", "peak_units": "", "off_peak_units": ""})

    assert form.is_valid(), form.errors
    assert form.cleaned_data["peak_units"] == Decimal("0")
    assert form.cleaned_data["off_peak_units"] == Decimal("0")


def test_meter_reading_form_requires_reading():
    form = MeterReadingForm({"meter_end": "", "peak_units": "1", "off_peak_units": "1"})

    assert not form.is_valid()
    assert "meter_end" in form.errors


def test_meter_reading_form_rejects_negative_units():
    form = MeterReadingForm({"meter_end": "10", "peak_units": "-1", "off_peak_units": "0"})

    assert not form.is_valid()
    assert "peak_units" in form.errors


def test_meter_reading_form_rejects_extra_precision():
    form = MeterReadingForm({"meter_end": "10.1234"})

    assert not form.is_valid()
    assert "meter_end" in form.errors


def test_meter_reading_form_rejects_text():
    form = MeterReadingForm({"meter_end": "lots"})

    assert not form.is_valid()


def test_payment_form_valid():
    form = PaymentForm({"bill_index": "2", "payment_method": "Bank Transfer"})

    assert form.is_valid(), form.errors
    assert form.cleaned_data == {"bill_index": 2, "payment_method": "Bank Transfer"}


def test_payment_form_rejects_negative_index():
    form = PaymentForm({"bill_index": "-1", "payment_method": "Cash"})

    assert not form.is_valid()
    assert "bill_index" in form.errors


def test_payment_form_limits_method_length():
    form = PaymentForm({"bill_index": "0", "payment_method": "x" * 21})

    assert not form.is_valid()
    assert "payment_method" in form.errors


def test_report_period_form():
    assert ReportPeriodForm({"month": "12", "year": "2024"}).is_valid()
    assert not ReportPeriodForm({"month": "0", "year": "2024"}).is_valid()
    assert not ReportPeriodForm({"month": "13", "year": "2024"}).is_valid()
