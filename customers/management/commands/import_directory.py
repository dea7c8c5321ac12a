from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from billing.exceptions import BillingServiceError
from customers.adapters import directory_config, save_directory
from customers.yaml_service import DirectoryYAMLImporter


class Command(BaseCommand):
    help = "Replace all stored customers and bills with a YAML snapshot"

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="Snapshot file to read")

    def handle(self, *args, **options):
        path = options["path"]
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")

        try:
            directory = DirectoryYAMLImporter(content).import_directory(**directory_config())
        except BillingServiceError as e:
            raise CommandError(f"Import failed: {e}")

        save_directory(directory)
        self.stdout.write(
            self.style.SUCCESS(f"Imported {len(directory)} customers from {path}")
        )
