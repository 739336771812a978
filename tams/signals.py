import logging

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Asset, ComponentScore, Inspection

logger = logging.getLogger(__name__)


def _previous_parent_id(sender, instance, field: str):
    """Return the stored value of ``field`` when a save is about to change it."""

    if instance.pk is None:
        return None
    previous = sender.objects.filter(pk=instance.pk).values_list(field, flat=True).first()
    if previous is None or previous == getattr(instance, field):
        return None
    return previous


@receiver(pre_save, sender=ComponentScore)
def _remember_previous_inspection(sender, instance: ComponentScore, **kwargs):
    instance._previous_inspection_id = None if kwargs.get("raw") else _previous_parent_id(sender, instance, "inspection_id")


@receiver(pre_save, sender=Inspection)
def _remember_previous_asset(sender, instance: Inspection, **kwargs):
    instance._previous_asset_id = None if kwargs.get("raw") else _previous_parent_id(sender, instance, "asset_id")


def _recalculate(inspection_id) -> None:
    try:
        inspection = Inspection.objects.get(pk=inspection_id)
    except Inspection.DoesNotExist:
        # Cascade delete of the parent inspection.
        return
    inspection.recalculate()


def _refresh(asset: Asset) -> None:
    latest = asset.refresh_latest_condition()
    if latest is None:
        logger.warning("Asset %s has no remaining inspections; latest condition cleared", asset.reference_code)


@receiver(post_save, sender=ComponentScore)
@receiver(post_delete, sender=ComponentScore)
def _recalculate_inspection(sender, instance: ComponentScore, **kwargs):
    if kwargs.get("raw"):
        return
    previous = getattr(instance, "_previous_inspection_id", None)
    if previous is not None:
        instance._previous_inspection_id = None
        _recalculate(previous)
    _recalculate(instance.inspection_id)


@receiver(post_save, sender=Inspection)
@receiver(post_delete, sender=Inspection)
def _refresh_asset_condition(sender, instance: Inspection, **kwargs):
    if kwargs.get("raw"):
        return
    previous = getattr(instance, "_previous_asset_id", None)
    if previous is not None:
        instance._previous_asset_id = None
        old_asset = Asset.objects.filter(pk=previous).first()
        if old_asset is not None:
            _refresh(old_asset)
    _refresh(instance.asset)
