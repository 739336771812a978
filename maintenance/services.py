"""Work order scheduling, status roll-ups and cost trends."""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from tams.services.condition import UNKNOWN_LABEL, get_field, month_key, to_number

from .models import WorkOrder

logger = logging.getLogger(__name__)

OPEN_STATUSES = (WorkOrder.Status.SCHEDULED, WorkOrder.Status.IN_PROGRESS)


@dataclass(frozen=True)
class MaintenanceStatusSummary:
    scheduled: int
    in_progress: int
    completed_this_month: int
    overdue: int
    cancelled: int
    total: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthlyCost:
    month: str
    cost: float
    order_count: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _today() -> date:
    return timezone.localdate()


def _grace_days() -> int:
    return int(getattr(settings, "TAMS_OVERDUE_GRACE_DAYS", 0) or 0)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return parse_date(value[:10])
        except ValueError:
            return None
    return None


def generate_batch_reference() -> str:
    return f"WO-{timezone.now():%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


@transaction.atomic
def bulk_create_work_orders(assets: Iterable[Any], **fields: Any) -> List[WorkOrder]:
    """Create one work order per asset, all sharing a generated batch reference.

    ``fields`` are applied to every order; when no ``title`` is given one is
    derived from the maintenance type and the asset reference.
    """

    assets = list(assets)
    if not assets:
        raise ValueError("At least one asset is required to create work orders.")

    batch_reference = generate_batch_reference()
    title = fields.pop("title", "")
    maintenance_type = fields.get("maintenance_type", WorkOrder.MaintenanceType.REPAIR)

    orders = [
        WorkOrder(
            asset=asset,
            batch_reference=batch_reference,
            title=title or f"{maintenance_type} - {asset.reference_code}",
            **fields,
        )
        for asset in assets
    ]
    created = WorkOrder.objects.bulk_create(orders)
    logger.info("Created %s work orders in batch %s", len(created), batch_reference)
    return created


def effective_status(work_order: Any, today: Optional[date] = None) -> str:
    """Status as of ``today``: scheduled work past its due date reads as overdue."""

    status = get_field(work_order, "status") or WorkOrder.Status.SCHEDULED
    if status != WorkOrder.Status.SCHEDULED:
        return status
    scheduled = _as_date(get_field(work_order, "scheduled_date"))
    if scheduled is None:
        return status
    today = today or _today()
    if scheduled + timedelta(days=_grace_days()) < today:
        return WorkOrder.Status.OVERDUE
    return status


def maintenance_status_summary(orders: Iterable[Any], today: Optional[date] = None) -> MaintenanceStatusSummary:
    today = today or _today()
    counts: Dict[str, int] = defaultdict(int)
    total = 0
    for order in orders:
        total += 1
        status = effective_status(order, today)
        if status == WorkOrder.Status.COMPLETED:
            completed = _as_date(get_field(order, "completed_date"))
            if completed is None or (completed.year, completed.month) == (today.year, today.month):
                counts["completed_this_month"] += 1
            continue
        counts[status] += 1

    return MaintenanceStatusSummary(
        scheduled=counts[WorkOrder.Status.SCHEDULED],
        in_progress=counts[WorkOrder.Status.IN_PROGRESS],
        completed_this_month=counts["completed_this_month"],
        overdue=counts[WorkOrder.Status.OVERDUE],
        cancelled=counts[WorkOrder.Status.CANCELLED],
        total=total,
    )


def monthly_cost_trend(orders: Iterable[Any]) -> List[MonthlyCost]:
    """Spend per month, keyed on completion date and falling back to the scheduled date."""

    buckets: Dict[str, Dict[str, float]] = {}
    for order in orders:
        month = (
            month_key(get_field(order, "completed_date"))
            or month_key(get_field(order, "scheduled_date"))
            or UNKNOWN_LABEL
        )
        actual = to_number(get_field(order, "actual_cost"))
        cost = actual if actual is not None else to_number(get_field(order, "estimated_cost")) or 0.0
        bucket = buckets.setdefault(month, {"cost": 0.0, "count": 0})
        bucket["cost"] += cost
        bucket["count"] += 1

    # "Unknown" sorts after every YYYY-MM key.
    ordered = sorted(buckets.items(), key=lambda item: (item[0] == UNKNOWN_LABEL, item[0]))
    return [
        MonthlyCost(month=month, cost=round(bucket["cost"], 2), order_count=int(bucket["count"]))
        for month, bucket in ordered
    ]


@transaction.atomic
def mark_overdue_work_orders(today: Optional[date] = None) -> int:
    """Persist the overdue status on scheduled work orders past their due date."""

    today = today or _today()
    cutoff = today - timedelta(days=_grace_days())
    updated = WorkOrder.objects.filter(
        status=WorkOrder.Status.SCHEDULED,
        scheduled_date__lt=cutoff,
    ).update(status=WorkOrder.Status.OVERDUE, modified_at=timezone.now())
    if updated:
        logger.info("Marked %s work orders overdue as of %s", updated, today)
    return updated
