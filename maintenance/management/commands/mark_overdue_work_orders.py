from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from maintenance.services import mark_overdue_work_orders


class Command(BaseCommand):
    help = "Flag scheduled work orders whose due date has passed as Overdue."

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            dest="as_of",
            help="Evaluate as of this date (YYYY-MM-DD). Defaults to today.",
        )

    def handle(self, *args, **options):
        as_of = None
        if options.get("as_of"):
            try:
                as_of = parse_date(options["as_of"])
            except ValueError:
                as_of = None
            if as_of is None:
                raise CommandError(f"Invalid date: {options['as_of']}")

        updated = mark_overdue_work_orders(as_of)
        self.stdout.write(self.style.SUCCESS(f"Marked {updated} work orders as overdue."))
