from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from billing.services import BillingService


class Command(BaseCommand):
    help = "Write the monthly billing report (defaults to the current month)"

    def add_arguments(self, parser):
        parser.add_argument("--month", type=int, help="Report month (1-12)")
        parser.add_argument("--year", type=int, help="Report year")
        parser.add_argument(
            "--output-dir", type=Path, help="Directory for the report file (defaults to REPORT_DIR)"
        )

    def handle(self, *args, **options):
        month = options.get("month")
        if month is not None and not 1 <= month <= 12:
            raise CommandError(f"Month must be between 1 and 12 (got {month})")

        service = BillingService.from_settings()
        path = service.write_period_report(
            month=month,
            year=options.get("year"),
            report_dir=options.get("output_dir"),
        )
        self.stdout.write(self.style.SUCCESS(f"Report generated successfully! Saved as {path}"))
