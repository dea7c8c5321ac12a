"""Forms for billing input."""

from decimal import Decimal

from django import forms


def _units_field(label: str, help_text: str, required: bool = True) -> forms.DecimalField:
    return forms.DecimalField(
        label=label,
        min_value=Decimal("0"),
        max_digits=12,
        decimal_places=3,
        required=required,
        help_text=help_text,
    )


class MeterReadingForm(forms.Form):
    """Form for the readings that generate a bill."""

    meter_end = _units_field("Current Meter Reading", "Closing meter reading in units")
    peak_units = _units_field(
        "Peak Hours Usage", "Units used from 2pm to 8pm", required=False
    )
    off_peak_units = _units_field(
        "Off-Peak Hours Usage", "Units used from 8pm to 2pm", required=False
    )

    def clean(self):
        cleaned_data = super().clean()
        # Blank time-of-use entries count as no usage
        for name in ("peak_units", "off_peak_units"):
            if name in cleaned_data and cleaned_data[name] is None:
                cleaned_data[name] = Decimal("0")
        return cleaned_data


class PaymentForm(forms.Form):
    """Form for recording the payment of one bill."""

    bill_index = forms.IntegerField(
        label="Bill Index",
        min_value=0,
        help_text="Position of the bill in the history (0 = oldest)",
    )
    payment_method = forms.CharField(
        label="Payment Method",
        max_length=20,
        help_text="e.g. Cash, Credit Card, Bank Transfer",
    )


class ReportPeriodForm(forms.Form):
    """Form for selecting the month a report covers."""

    month = forms.IntegerField(label="Month", min_value=1, max_value=12)
    year = forms.IntegerField(label="Year", min_value=1900, max_value=9999)
