"""
Interactive menu for the billing console.

BillingShell reads one command at a time from stdin, validates raw input
with Django forms, calls BillingService and prints the result. Recoverable
billing errors are reported and the menu is shown again.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO

from django import forms

from billing.exceptions import BillingServiceError
from billing.forms import MeterReadingForm, PaymentForm, ReportPeriodForm
from billing.services import BillingService
from console import formatting
from customers.directory import SearchField
from customers.forms import CustomerForm, clean_customer_field

logger = logging.getLogger(__name__)

MENU = [
    "========== ELECTRIC BILLING SYSTEM ==========",
    "1. Add New Customer",
    "2. View Customer Details",
    "3. Generate New Bill",
    "4. View Latest Bill",
    "5. Record Payment",
    "6. View Payment History",
    "7. Compare With Previous Bill",
    "8. Project Next Month's Bill",
    "9. Generate Energy Usage Alert",
    "10. Update Customer Information",
    "11. Show All Customers",
    "12. Search Customer",
    "13. Generate Monthly Report",
    "0. Exit",
    "============================================",
]

CLASS_CODE_HINT = "(0-Residential, 1-Commercial, 2-Industrial)"
CLASS_CODES = {"0": "residential", "1": "commercial", "2": "industrial"}

UPDATE_MENU = [
    "===== Update Customer Information =====",
    "1. Update Name",
    "2. Update Address",
    "3. Update Phone",
    "4. Update Email",
    "5. Update Customer Type",
    "6. Change Active Status",
    "0. Back to Main Menu",
]

# choice -> (field, label)
UPDATE_FIELDS = {
    "1": ("name", "Name"),
    "2": ("address", "Address"),
    "3": ("phone", "Phone"),
    "4": ("email", "Email"),
}

SEARCH_MENU = [
    "===== Search Customer =====",
    "1. Search by Name",
    "2. Search by Meter Number",
    "3. Search by Customer ID",
    "4. Search by Phone",
]

# choice -> (field, prompt)
SEARCH_MODES = {
    "1": (SearchField.NAME, "Enter customer name: "),
    "2": (SearchField.METER_NUMBER, "Enter meter number: "),
    "3": (SearchField.CUSTOMER_ID, "Enter customer ID: "),
    "4": (SearchField.PHONE, "Enter phone number: "),
}


class EndOfInput(Exception):
    """Raised when stdin is exhausted."""

    pass


def _form_errors(form: forms.Form) -> list[str]:
    return [
        f"{form.fields[name].label if name in form.fields else name}: {message}"
        for name, messages in form.errors.items()
        for message in messages
    ]


class BillingShell:
    """
    Menu loop over a BillingService.

    Args:
        service: Service that runs every command
        stdin: Stream commands are read from (defaults to sys.stdin)
        stdout: Stream output is written to (defaults to sys.stdout)
    """

    def __init__(
        self,
        service: BillingService,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.service = service
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.commands: dict[str, Callable[[], None]] = {
            "1": self.add_customer,
            "2": self.view_customer,
            "3": self.generate_bill,
            "4": self.view_latest_bill,
            "5": self.record_payment,
            "6": self.view_payment_history,
            "7": self.compare_bills,
            "8": self.project_next_bill,
            "9": self.usage_alert,
            "10": self.update_customer,
            "11": self.list_customers,
            "12": self.search_customers,
            "13": self.generate_report,
        }

    # I/O

    def write(self, *lines: str) -> None:
        for line in lines:
            self.stdout.write(f"{line}\n")

    def ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EndOfInput()
        return line.rstrip("\r\n")

    def ask_meter(self) -> str:
        return self.ask("Enter meter number: ").strip()

    def _bound_form(self, form_class: type[forms.Form], data: dict[str, str]):
        """Validate data; print errors and return None when invalid."""
        form = form_class(data)
        if form.is_valid():
            return form.cleaned_data
        self.write("Invalid input:", *(f"  {e}" for e in _form_errors(form)))
        return None

    # Loop

    def run(self) -> None:
        """Show the menu and run commands until 0 or end of input."""
        while True:
            self.write("", *MENU)
            try:
                choice = self.ask("Enter your choice: ").strip()
            except EndOfInput:
                break

            if choice == "0":
                self.write("Thank you for using Electric Billing System. Goodbye!")
                break

            command = self.commands.get(choice)
            if command is None:
                self.write("Invalid choice! Please try again.")
                continue

            logger.debug("Running console command %s", choice)
            try:
                command()
            except EndOfInput:
                break
            except BillingServiceError as e:
                self.write(f"Error: {e}")

    # Commands

    def add_customer(self) -> None:
        data = {
            "name": self.ask("Enter customer name: "),
            "address": self.ask("Enter address: "),
            "phone": self.ask("Enter phone number: "),
            "email": self.ask("Enter email: "),
        }
        code = self.ask(f"Enter customer type {CLASS_CODE_HINT}: ").strip()
        data["customer_class"] = CLASS_CODES.get(code, code)
        data["meter_number"] = self.ask_meter()

        cleaned = self._bound_form(CustomerForm, data)
        if cleaned is None:
            return
        customer = self.service.add_customer(**cleaned)
        self.write(f"Customer added successfully! Customer ID: {customer.customer_id}")

    def view_customer(self) -> None:
        view = self.service.get_customer(self.ask_meter())
        self.write(*formatting.customer_details(view.customer))
        if view.latest_bill is not None:
            self.write("", "Latest Bill:", *formatting.bill_details(view.customer, view.latest_bill))

    def generate_bill(self) -> None:
        meter_number = self.ask_meter()
        view = self.service.get_customer(meter_number)
        previous = view.customer.history.previous_reading
        self.write(f"Previous meter reading: {formatting.format_units(previous)}")

        data = {
            "meter_end": self.ask("Enter current meter reading: "),
            "peak_units": self.ask("Enter peak hours usage (2pm-8pm): "),
            "off_peak_units": self.ask("Enter off-peak hours usage (8pm-2pm): "),
        }
        cleaned = self._bound_form(MeterReadingForm, data)
        if cleaned is None:
            return
        bill = self.service.generate_bill(meter_number, **cleaned)
        self.write("Bill generated successfully!", *formatting.bill_details(view.customer, bill))

    def view_latest_bill(self) -> None:
        view = self.service.get_customer(self.ask_meter())
        if view.latest_bill is None:
            self.write("No bills found for this customer!")
            return
        self.write(*formatting.bill_details(view.customer, view.latest_bill))

    def record_payment(self) -> None:
        meter_number = self.ask_meter()
        bills = self.service.payment_history(meter_number)
        if not bills:
            self.write("No bills found for this customer!")
            return

        data = {
            "bill_index": self.ask(f"Enter bill index (0-{len(bills) - 1}): "),
            "payment_method": self.ask("Enter payment method (Cash/Credit Card/Bank Transfer): "),
        }
        cleaned = self._bound_form(PaymentForm, data)
        if cleaned is None:
            return
        self.service.record_payment(meter_number, cleaned["bill_index"], cleaned["payment_method"])
        self.write("Payment recorded successfully!")

    def view_payment_history(self) -> None:
        meter_number = self.ask_meter()
        view = self.service.get_customer(meter_number)
        bills = self.service.payment_history(meter_number)
        self.write(*formatting.payment_history(view.customer, bills))

    def compare_bills(self) -> None:
        self.write(*formatting.comparison(self.service.compare_bills(self.ask_meter())))

    def project_next_bill(self) -> None:
        self.write(*formatting.projection(self.service.project_next_bill(self.ask_meter())))

    def usage_alert(self) -> None:
        meter_number = self.ask_meter()
        alert = self.service.usage_alert(meter_number)
        customer = self.service.get_customer(meter_number).customer
        self.write(*formatting.usage_alert(customer, alert))

    def update_customer(self) -> None:
        meter_number = self.ask_meter()
        customer = self.service.get_customer(meter_number).customer

        self.write("", *UPDATE_MENU)
        choice = self.ask("Enter your choice: ").strip()

        if choice == "0":
            return
        if choice in UPDATE_FIELDS:
            field, label = UPDATE_FIELDS[choice]
            self.write(f"Current {label}: {getattr(customer, field)}")
            raw = self.ask(f"Enter new {label.lower()}: ")
            self._update_field(meter_number, field, raw, label)
        elif choice == "5":
            self.write(f"Current Customer Type: {customer.customer_class.label}")
            code = self.ask(f"Enter new customer type {CLASS_CODE_HINT}: ").strip()
            self._update_field(
                meter_number, "customer_class", CLASS_CODES.get(code, code), "Customer type"
            )
        elif choice == "6":
            current = "Active" if customer.active else "Inactive"
            target = "Inactive" if customer.active else "Active"
            self.write(f"Current Status: {current}")
            if self.ask(f"Change status to {target}? (1-Yes, 0-No): ").strip() == "1":
                self.service.toggle_active(meter_number)
                self.write("Status updated successfully!")
        else:
            self.write("Invalid choice!")

    def _update_field(self, meter_number: str, field: str, raw: str, label: str) -> None:
        try:
            value = clean_customer_field(field, raw)
        except forms.ValidationError as e:
            self.write("Invalid input:", *(f"  {label}: {m}" for m in e.messages))
            return
        self.service.update_customer(meter_number, **{field: value})
        self.write(f"{label} updated successfully!")

    def list_customers(self) -> None:
        customers = self.service.list_customers()
        if not customers:
            self.write("No customers found!")
            return
        self.write("===== All Customers =====", *formatting.customer_table(customers))
        self.write(f"Total Customers: {len(customers)}")

    def search_customers(self) -> None:
        if not self.service.list_customers():
            self.write("No customers found!")
            return

        self.write("", *SEARCH_MENU)
        choice = self.ask("Enter your choice: ").strip()
        if choice not in SEARCH_MODES:
            self.write("Invalid choice!")
            return

        search_field, prompt = SEARCH_MODES[choice]
        term = self.ask(prompt)
        if search_field is SearchField.CUSTOMER_ID:
            try:
                term = int(term.strip())
            except ValueError:
                self.write("Invalid input: customer ID must be a number")
                return

        results = self.service.search_customers(search_field, term)
        self.write("--- Search Results ---", *formatting.customer_table(results))
        self.write(f"Total Results: {len(results)}")
        if not results:
            return

        if self.ask("Do you want to view details of any customer? (1-Yes, 0-No): ").strip() != "1":
            return
        raw_id = self.ask("Enter Customer ID: ").strip()
        if not raw_id.isdigit():
            self.write("Invalid input: customer ID must be a number")
            return
        customer = self.service.get_customer_by_id(int(raw_id))
        self.write(*formatting.customer_details(customer))

    def generate_report(self) -> None:
        today = self.service.clock.today()
        month = self.ask(f"Enter report month (1-12) [{today.month}]: ").strip() or str(today.month)
        year = self.ask(f"Enter report year [{today.year}]: ").strip() or str(today.year)

        cleaned = self._bound_form(ReportPeriodForm, {"month": month, "year": year})
        if cleaned is None:
            return
        path = self.service.write_period_report(cleaned["month"], cleaned["year"])
        self.write(f"Report generated successfully! Saved as {path}")
