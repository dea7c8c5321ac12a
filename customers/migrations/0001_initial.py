from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Customer",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "customer_id",
                    models.PositiveIntegerField(
                        help_text="Customer id assigned by the directory", unique=True
                    ),
                ),
                (
                    "position",
                    models.PositiveIntegerField(help_text="Order of the customer in the directory"),
                ),
                ("name", models.CharField(help_text="Name of the customer", max_length=50)),
                (
                    "address",
                    models.CharField(blank=True, help_text="Service address", max_length=100),
                ),
                (
                    "phone",
                    models.CharField(blank=True, help_text="Contact phone number", max_length=15),
                ),
                (
                    "email",
                    models.CharField(blank=True, help_text="Contact email address", max_length=50),
                ),
                (
                    "customer_class",
                    models.CharField(
                        choices=[
                            ("residential", "Residential"),
                            ("commercial", "Commercial"),
                            ("industrial", "Industrial"),
                        ],
                        default="residential",
                        help_text="Rate schedule the customer is billed under",
                        max_length=20,
                    ),
                ),
                (
                    "meter_number",
                    models.CharField(
                        help_text="Meter number, the customer's lookup key",
                        max_length=20,
                        unique=True,
                    ),
                ),
                ("connection_date", models.DateField(help_text="Date the customer was connected")),
                (
                    "is_active",
                    models.BooleanField(default=True, help_text="Whether the connection is active"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["position"],
            },
        ),
    ]
