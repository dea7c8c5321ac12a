"""
Forms for customer management.
"""

from django import forms

from billing.core.types import CustomerClass


class CustomerForm(forms.Form):
    """Form for registering a customer."""

    name = forms.CharField(label="Name", max_length=50)
    address = forms.CharField(label="Address", max_length=100, required=False)
    phone = forms.CharField(label="Phone", max_length=15, required=False)
    email = forms.EmailField(label="Email", max_length=50, required=False)
    customer_class = forms.ChoiceField(
        label="Customer Type",
        choices=CustomerClass.choices(),
        initial=CustomerClass.RESIDENTIAL.value,
    )
    meter_number = forms.CharField(
        label="Meter Number",
        max_length=20,
        help_text="Unique meter number used to look the customer up",
    )

    def clean_customer_class(self):
        return CustomerClass(self.cleaned_data["customer_class"])


def clean_customer_field(name: str, value: str):
    """
    Validate one customer field with the CustomerForm rules.

    Used by the update menu, which edits a single field at a time.

    Returns:
        The cleaned value

    Raises:
        forms.ValidationError: If the value is not valid for the field
    """
    form = CustomerForm()
    if name not in form.fields:
        raise KeyError(f"Unknown customer field: {name}")
    value = form.fields[name].clean(value)
    if name == "customer_class":
        value = CustomerClass(value)
    return value
