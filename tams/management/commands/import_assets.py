from __future__ import annotations

import csv
import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.dateparse import parse_date

from tams.models import Asset
from tams.validators import reference_code_validator, validate_coordinates, validate_installation_date

logger = logging.getLogger(__name__)


@dataclass
class ImportCounts:
    created: int = 0
    updated: int = 0
    skipped: int = 0

    def add(self, bucket: str, amount: int = 1) -> None:
        setattr(self, bucket, getattr(self, bucket) + amount)


TEXT_FIELDS = ("name", "road_name", "road_number", "region", "depot", "ward", "owner")


def _normalize_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", value.lower())


ASSET_TYPE_MAP = {_normalize_key(value): value for value in Asset.AssetType.values}
ASSET_TYPE_MAP.update({"sign": Asset.AssetType.SIGNAGE, "rrm": Asset.AssetType.RAISED_ROAD_MARKER})
STATUS_MAP = {_normalize_key(value): value for value in Asset.Status.values}


def _normalize_text(value: object) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value).strip())


def _parse_decimal(value: object) -> Decimal | None:
    text = _normalize_text(value).replace(",", "")
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"'{text}' is not a number")


def _parse_date(value: object) -> date | None:
    text = _normalize_text(value)
    if not text:
        return None
    parsed = parse_date(text)
    if parsed is None:
        raise ValueError(f"'{text}' is not a YYYY-MM-DD date")
    return parsed


def _read_csv(path: Path) -> list[dict[str, str]]:
    with path.open(newline="", encoding="utf-8-sig") as handle:
        return list(csv.DictReader(handle))


def parse_asset_row(row: dict[str, str]) -> dict[str, object]:
    """Validate one CSV row and return the Asset field values it carries."""

    reference = _normalize_text(row.get("reference_code"))
    if not reference:
        raise ValueError("missing reference_code")
    try:
        reference_code_validator(reference)
    except ValidationError:
        raise ValueError(f"invalid reference_code '{reference}'")

    asset_type = ASSET_TYPE_MAP.get(_normalize_key(_normalize_text(row.get("asset_type"))))
    if asset_type is None:
        raise ValueError(f"unknown asset_type '{_normalize_text(row.get('asset_type'))}'")

    values: dict[str, object] = {"reference_code": reference, "asset_type": asset_type}
    for field in TEXT_FIELDS:
        values[field] = _normalize_text(row.get(field))

    status = _normalize_text(row.get("status"))
    if status:
        if _normalize_key(status) not in STATUS_MAP:
            raise ValueError(f"unknown status '{status}'")
        values["status"] = STATUS_MAP[_normalize_key(status)]

    latitude = _parse_decimal(row.get("latitude"))
    longitude = _parse_decimal(row.get("longitude"))
    installation_date = _parse_date(row.get("installation_date"))
    try:
        validate_coordinates(latitude, longitude)
        validate_installation_date(installation_date)
    except ValidationError as exc:
        raise ValueError("; ".join(exc.messages))
    values.update(latitude=latitude, longitude=longitude, installation_date=installation_date)

    values["replacement_value"] = _parse_decimal(row.get("replacement_value"))
    life = _parse_decimal(row.get("useful_life_years"))
    values["useful_life_years"] = int(life) if life is not None else None
    return values


class Command(BaseCommand):
    help = "Create or update assets from a CSV file keyed by reference_code."

    def add_arguments(self, parser):
        parser.add_argument("csv_path", type=Path, help="CSV file with one asset per row.")
        parser.add_argument("--dry-run", action="store_true", help="Validate and report without saving.")

    def handle(self, *args, **options):
        path: Path = options["csv_path"]
        dry_run: bool = options.get("dry_run")

        if not path.exists():
            raise CommandError(f"Asset CSV not found: {path}")

        self.stdout.write("Importing assets CSV...")
        with transaction.atomic():
            counts = self._import_assets(path)
            if dry_run:
                transaction.set_rollback(True)
        self.stdout.write(self._format_counts(counts, dry_run))

    def _format_counts(self, counts: ImportCounts, dry_run: bool) -> str:
        prefix = "Dry run: " if dry_run else ""
        return (
            f"{prefix}Asset import: {counts.created} created, {counts.updated} updated, "
            f"{counts.skipped} skipped."
        )

    def _import_assets(self, path: Path) -> ImportCounts:
        counts = ImportCounts()
        existing = {asset.reference_code: asset for asset in Asset.objects.all()}

        for line_number, row in enumerate(_read_csv(path), start=2):
            try:
                values = parse_asset_row(row)
            except ValueError as exc:
                logger.warning("Skipping row %s of %s: %s", line_number, path.name, exc)
                counts.add("skipped")
                continue

            asset = existing.get(values["reference_code"])
            if asset is None:
                asset = Asset.objects.create(**values)
                existing[asset.reference_code] = asset
                counts.add("created")
                continue

            for field, value in values.items():
                setattr(asset, field, value)
            asset.is_deleted = False
            asset.save()
            counts.add("updated")
        return counts
