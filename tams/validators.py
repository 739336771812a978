from __future__ import annotations

from datetime import date

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator


reference_code_validator = RegexValidator(
    regex=r"^[A-Za-z0-9_-]+$",
    message="Reference code may only contain letters, numbers, hyphens and underscores.",
)


def validate_coordinates(latitude, longitude) -> None:
    errors = {}
    if latitude is not None and not (-90 <= latitude <= 90):
        errors["latitude"] = "Latitude must be between -90 and 90."
    if longitude is not None and not (-180 <= longitude <= 180):
        errors["longitude"] = "Longitude must be between -180 and 180."
    if (latitude is None) != (longitude is None):
        errors.setdefault("longitude", "Provide both latitude and longitude, or neither.")
    if errors:
        raise ValidationError(errors)


def validate_installation_date(value: date | None, *, today: date | None = None) -> None:
    if value is None:
        return
    today = today or date.today()
    if value > today:
        raise ValidationError({"installation_date": "Installation date cannot be in the future."})
    try:
        earliest = today.replace(year=today.year - 100)
    except ValueError:  # 29 February
        earliest = today.replace(year=today.year - 100, day=28)
    if value < earliest:
        raise ValidationError({"installation_date": "Installation date is more than 100 years ago."})


def validate_inspection_date(value: date | None, *, today: date | None = None) -> None:
    if value is None:
        raise ValidationError({"inspection_date": "Inspection date is required."})
    if value > (today or date.today()):
        raise ValidationError({"inspection_date": "Inspection date cannot be in the future."})


def validate_completion(status: str, scheduled_date: date | None, completed_date: date | None) -> None:
    errors = {}
    if completed_date and scheduled_date and completed_date < scheduled_date:
        errors["completed_date"] = "Completion date cannot be before the scheduled date."
    if status == "Completed" and completed_date is None:
        errors["completed_date"] = "Completed work orders require a completion date."
    if errors:
        raise ValidationError(errors)
