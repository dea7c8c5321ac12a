from django.db import models

from billing.core.types import CustomerClass


class Customer(models.Model):
    """
    Stored customer profile.

    Rows are rewritten wholesale from the in-memory directory by
    customers.adapters.save_directory; position keeps directory order.
    """

    customer_id = models.PositiveIntegerField(
        unique=True, help_text="Customer id assigned by the directory"
    )
    position = models.PositiveIntegerField(help_text="Order of the customer in the directory")
    name = models.CharField(max_length=50, help_text="Name of the customer")
    address = models.CharField(max_length=100, blank=True, help_text="Service address")
    phone = models.CharField(max_length=15, blank=True, help_text="Contact phone number")
    email = models.CharField(max_length=50, blank=True, help_text="Contact email address")
    customer_class = models.CharField(
        max_length=20,
        choices=CustomerClass.choices(),
        default=CustomerClass.RESIDENTIAL.value,
        help_text="Rate schedule the customer is billed under",
    )
    meter_number = models.CharField(
        max_length=20, unique=True, help_text="Meter number, the customer's lookup key"
    )
    connection_date = models.DateField(help_text="Date the customer was connected")
    is_active = models.BooleanField(default=True, help_text="Whether the connection is active")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["position"]

    def __str__(self):
        return f"{self.name} ({self.meter_number})"
