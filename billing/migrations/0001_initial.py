import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("customers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Bill",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("bill_id", models.PositiveIntegerField(help_text="Bill id assigned at generation")),
                (
                    "position",
                    models.PositiveIntegerField(help_text="Slot in the billing history (0 = oldest)"),
                ),
                ("issue_date", models.DateField(help_text="Date the bill was generated")),
                ("due_date", models.DateField(help_text="Payment due date")),
                (
                    "meter_start",
                    models.DecimalField(
                        decimal_places=3, help_text="Opening meter reading", max_digits=12
                    ),
                ),
                (
                    "meter_end",
                    models.DecimalField(
                        decimal_places=3, help_text="Closing meter reading", max_digits=12
                    ),
                ),
                (
                    "total_usage",
                    models.DecimalField(
                        decimal_places=3, help_text="Units consumed in the period", max_digits=12
                    ),
                ),
                (
                    "peak_units",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Units used in peak hours (2pm-8pm)",
                        max_digits=12,
                    ),
                ),
                (
                    "off_peak_units",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Units used in off-peak hours (8pm-2pm)",
                        max_digits=12,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(decimal_places=2, help_text="Amount due in USD", max_digits=14),
                ),
                ("is_paid", models.BooleanField(default=False)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("payment_method", models.CharField(blank=True, max_length=20)),
                (
                    "customer",
                    models.ForeignKey(
                        help_text="Customer",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bills",
                        to="customers.customer",
                    ),
                ),
            ],
            options={
                "ordering": ["customer", "position"],
                "unique_together": {("customer", "position")},
            },
        ),
    ]
