from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from tams import reports
from tams.exports import ASSET_REGISTER_HEADERS, write_csv


class Command(BaseCommand):
    help = "Export the active asset register, with current condition and urgency, to CSV."

    def add_arguments(self, parser):
        parser.add_argument(
            "--path",
            default="asset_register.csv",
            help="Output CSV file (default: asset_register.csv).",
        )

    def handle(self, *args, **options):
        target = Path(options["path"]).expanduser().resolve()
        if target.is_dir():
            raise CommandError(f"{target} is a directory; pass a file path.")
        target.parent.mkdir(parents=True, exist_ok=True)

        with target.open("w", newline="", encoding="utf-8") as handle:
            count = write_csv(ASSET_REGISTER_HEADERS, reports.asset_register_rows(), handle)

        self.stdout.write(self.style.SUCCESS(f"Exported {count} assets to {target}."))
