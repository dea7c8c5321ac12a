import time
from datetime import date
from decimal import Decimal

from django.db import IntegrityError
from django.test import TestCase

from billing.models import Bill
from customers.models import Customer


class CustomerModelTests(TestCase):
    def create_customer(self, **kwargs):
        values = {
            "customer_id": 1001,
            "position": 0,
            "name": "Acme Corp",
            "meter_number": "MTR-001",
            "connection_date": date(2024, 1, 5),
        }
        values.update(kwargs)
        return Customer.objects.create(**values)

    def test_create_and_str(self):
        """Test creating a customer and its string representation."""
        customer = self.create_customer()
        self.assertIsNotNone(customer.pk)
        self.assertEqual(str(customer), "Acme Corp (MTR-001)")
        self.assertTrue(customer.is_active)
        self.assertEqual(customer.customer_class, "residential")

    def test_meter_number_is_unique(self):
        self.create_customer()

        with self.assertRaises(IntegrityError):
            self.create_customer(customer_id=1002, position=1)

    def test_auto_timestamps(self):
        """Test that created_at and updated_at are set automatically."""
        customer = self.create_customer()
        created_at = customer.created_at
        updated_at = customer.updated_at

        time.sleep(0.01)
        customer.name = "Acme Corporation"
        customer.save()
        customer.refresh_from_db()

        self.assertEqual(customer.created_at, created_at)
        self.assertGreater(customer.updated_at, updated_at)

    def test_bills_are_deleted_with_customer(self):
        customer = self.create_customer()
        bill = Bill.objects.create(
            customer=customer,
            bill_id=1,
            position=0,
            issue_date=date(2024, 2, 1),
            due_date=date(2024, 2, 16),
            meter_start=Decimal("0"),
            meter_end=Decimal("120"),
            total_usage=Decimal("120"),
            peak_units=Decimal("40"),
            off_peak_units=Decimal("80"),
            amount=Decimal("1491.00"),
        )
        self.assertEqual(str(bill), "Bill 1 - Acme Corp ($1491.00, unpaid)")

        customer.delete()

        self.assertEqual(Bill.objects.count(), 0)
