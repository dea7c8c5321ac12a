from pathlib import Path

from django.core.management.base import BaseCommand

from customers.adapters import load_directory
from customers.yaml_service import DirectoryYAMLExporter


class Command(BaseCommand):
    help = "Export all customers and their billing histories to a YAML snapshot"

    def add_arguments(self, parser):
        parser.add_argument("path", type=Path, help="Snapshot file to write")

    def handle(self, *args, **options):
        directory = load_directory()
        content = DirectoryYAMLExporter(directory).export_to_yaml()
        path = options["path"]
        path.write_text(content, encoding="utf-8")
        self.stdout.write(
            self.style.SUCCESS(f"Exported {len(directory)} customers to {path}")
        )
