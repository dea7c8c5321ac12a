from django.db import models


class Bill(models.Model):
    """
    Stored bill belonging to a customer's rolling history.

    position is the bill's slot in the history, 0 being the oldest.
    """

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.CASCADE,
        related_name="bills",
        help_text="Customer",
    )
    bill_id = models.PositiveIntegerField(help_text="Bill id assigned at generation")
    position = models.PositiveIntegerField(help_text="Slot in the billing history (0 = oldest)")
    issue_date = models.DateField(help_text="Date the bill was generated")
    due_date = models.DateField(help_text="Payment due date")
    meter_start = models.DecimalField(
        max_digits=12, decimal_places=3, help_text="Opening meter reading"
    )
    meter_end = models.DecimalField(
        max_digits=12, decimal_places=3, help_text="Closing meter reading"
    )
    total_usage = models.DecimalField(
        max_digits=12, decimal_places=3, help_text="Units consumed in the period"
    )
    peak_units = models.DecimalField(
        max_digits=12, decimal_places=3, help_text="Units used in peak hours (2pm-8pm)"
    )
    off_peak_units = models.DecimalField(
        max_digits=12, decimal_places=3, help_text="Units used in off-peak hours (8pm-2pm)"
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2, help_text="Amount due in USD")
    is_paid = models.BooleanField(default=False)
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=20, blank=True)

    class Meta:
        ordering = ["customer", "position"]
        unique_together = [["customer", "position"]]

    def __str__(self):
        status = "paid" if self.is_paid else "unpaid"
        return f"Bill {self.bill_id} - {self.customer.name} (${self.amount}, {status})"
