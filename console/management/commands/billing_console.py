import sys

from django.core.management.base import BaseCommand

from billing.services import BillingService
from console.shell import BillingShell


class Command(BaseCommand):
    help = "Run the interactive electric billing console"
    stealth_options = ("stdin",)

    def handle(self, *args, **options):
        service = BillingService.from_settings()
        shell = BillingShell(
            service,
            stdin=options.get("stdin") or sys.stdin,
            stdout=options.get("stdout") or sys.stdout,
        )
        shell.run()
