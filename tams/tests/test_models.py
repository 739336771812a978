from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings

from maintenance.models import WorkOrder
from tams.models import Asset, ComponentScore, Inspection
from tams.services.condition import ConditionBand


class AssetMixin:
    def create_asset(self, reference_code: str = "SGN-001", **kwargs) -> Asset:
        values = {"asset_type": Asset.AssetType.SIGNAGE, "region": "North", "replacement_value": Decimal("1500")}
        values.update(kwargs)
        return Asset.objects.create(reference_code=reference_code, **values)


class LatestConditionTests(AssetMixin, TestCase):
    def test_component_scores_roll_up_to_inspection_and_asset(self):
        asset = self.create_asset()
        inspection = Inspection.objects.create(asset=asset, inspection_date=date(2024, 5, 1), inspector_name="A. Mensah")
        ComponentScore.objects.create(
            inspection=inspection,
            component_name="Panel",
            degree="3",
            extent="3",
            relevancy="3",
            quantity=Decimal("4"),
            rate=Decimal("25"),
            remedial_work="Replace panel",
        )

        inspection.refresh_from_db()
        self.assertEqual(inspection.ci_health, Decimal("17"))
        self.assertEqual(inspection.ci_safety, Decimal("25"))
        self.assertEqual(inspection.ci_final, Decimal("17"))
        self.assertEqual(inspection.deru_value, Decimal("166"))
        self.assertEqual(inspection.calculated_urgency, "3")
        self.assertEqual(inspection.total_remedial_cost, Decimal("100"))
        self.assertEqual(inspection.remedial_summary, "Replace panel")

        asset.refresh_from_db()
        self.assertEqual(asset.latest_ci, Decimal("17"))
        self.assertEqual(asset.latest_urgency, "3")
        self.assertEqual(asset.latest_deru, Decimal("166"))
        self.assertEqual(asset.latest_inspection_date, date(2024, 5, 1))
        self.assertEqual(asset.condition_band, ConditionBand.POOR)
        # A numeric DERU score outranks the stored urgency label.
        self.assertEqual(asset.resolved_urgency, "4")

    def test_older_inspection_does_not_replace_latest(self):
        asset = self.create_asset()
        Inspection.objects.create(asset=asset, inspection_date=date(2024, 5, 1), ci_final=Decimal("70"))
        Inspection.objects.create(asset=asset, inspection_date=date(2023, 1, 1), ci_final=Decimal("90"))

        asset.refresh_from_db()
        self.assertEqual(asset.latest_ci, Decimal("70"))
        self.assertEqual(asset.latest_inspection_date, date(2024, 5, 1))

    def test_deleting_latest_inspection_falls_back_to_previous(self):
        asset = self.create_asset()
        Inspection.objects.create(asset=asset, inspection_date=date(2023, 1, 1), ci_final=Decimal("90"))
        latest = Inspection.objects.create(asset=asset, inspection_date=date(2024, 5, 1), ci_final=Decimal("45"))

        latest.delete()

        asset.refresh_from_db()
        self.assertEqual(asset.latest_ci, Decimal("90"))
        self.assertEqual(asset.latest_inspection_date, date(2023, 1, 1))

    def test_removing_every_inspection_clears_latest_fields(self):
        asset = self.create_asset()
        inspection = Inspection.objects.create(
            asset=asset, inspection_date=date(2024, 5, 1), ci_final=Decimal("45"), calculated_urgency="2"
        )

        with self.assertLogs("tams.signals", level="WARNING"):
            inspection.delete()

        asset.refresh_from_db()
        self.assertIsNone(asset.latest_ci)
        self.assertEqual(asset.latest_urgency, "")
        self.assertIsNone(asset.latest_inspection_date)
        self.assertEqual(asset.condition_band, ConditionBand.NOT_INSPECTED)
        self.assertIsNone(asset.resolved_urgency)

    def test_deleting_component_score_recalculates_inspection(self):
        asset = self.create_asset()
        inspection = Inspection.objects.create(asset=asset, inspection_date=date(2024, 5, 1))
        ComponentScore.objects.create(inspection=inspection, component_name="Post", degree="1", extent="1", relevancy="1")
        panel = ComponentScore.objects.create(
            inspection=inspection, component_name="Panel", degree="3", extent="3", relevancy="3"
        )

        panel.delete()

        inspection.refresh_from_db()
        self.assertEqual(inspection.ci_health, Decimal("83"))
        self.assertEqual(inspection.ci_final, Decimal("83"))
        self.assertEqual(inspection.calculated_urgency, "0")

    def test_moving_inspection_refreshes_both_assets(self):
        first = self.create_asset("SGN-A")
        second = self.create_asset("SGN-B")
        inspection = Inspection.objects.create(
            asset=first, inspection_date=date(2024, 5, 1), ci_final=Decimal("20"), calculated_urgency="4"
        )

        inspection.asset = second
        inspection.save()

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.inspections.count(), 0)
        self.assertIsNone(first.latest_ci)
        self.assertEqual(first.latest_urgency, "")
        self.assertEqual(second.latest_ci, Decimal("20"))
        self.assertEqual(second.latest_urgency, "4")

    def test_moving_inspection_keeps_older_history_on_previous_asset(self):
        first = self.create_asset("SGN-A")
        second = self.create_asset("SGN-B")
        Inspection.objects.create(asset=first, inspection_date=date(2023, 1, 1), ci_final=Decimal("90"))
        recent = Inspection.objects.create(asset=first, inspection_date=date(2024, 5, 1), ci_final=Decimal("20"))

        recent.asset = second
        recent.save()

        first.refresh_from_db()
        self.assertEqual(first.latest_ci, Decimal("90"))
        self.assertEqual(first.latest_inspection_date, date(2023, 1, 1))

    def test_moving_component_score_recalculates_both_inspections(self):
        asset = self.create_asset()
        source = Inspection.objects.create(asset=asset, inspection_date=date(2024, 5, 1))
        target = Inspection.objects.create(asset=asset, inspection_date=date(2024, 4, 1))
        panel = ComponentScore.objects.create(
            inspection=source, component_name="Panel", degree="3", extent="3", relevancy="3"
        )
        source.refresh_from_db()
        self.assertEqual(source.ci_final, Decimal("17"))

        panel.inspection = target
        panel.save()

        source.refresh_from_db()
        target.refresh_from_db()
        asset.refresh_from_db()
        self.assertEqual(source.component_scores.count(), 0)
        self.assertIsNone(source.ci_final)
        self.assertEqual(source.calculated_urgency, "")
        self.assertEqual(target.ci_final, Decimal("17"))
        self.assertIsNone(asset.latest_ci)


class ComponentScoreTests(AssetMixin, TestCase):
    def setUp(self):
        self.inspection = Inspection.objects.create(asset=self.create_asset(), inspection_date=date(2024, 1, 10))

    def test_save_computes_component_results(self):
        score = ComponentScore.objects.create(
            inspection=self.inspection,
            component_name="Post",
            degree="2",
            extent="2",
            relevancy="2",
            quantity=Decimal("3"),
            rate=Decimal("12.50"),
        )
        # 1 - (0.5*2/3 + 0.25/3 + 0.25/3) -> 50
        self.assertEqual(score.ci, 50)
        self.assertEqual(score.urgency, "1")
        self.assertEqual(score.cost, Decimal("37.5"))

    def test_unable_to_inspect_component_has_no_ci(self):
        score = ComponentScore.objects.create(inspection=self.inspection, component_name="Base", degree="U")
        self.assertIsNone(score.ci)
        self.assertEqual(score.urgency, "U")
        self.assertIsNone(score.cost)

    @override_settings(TAMS_REPAIR_THRESHOLD_CI=90)
    def test_repair_threshold_is_configurable(self):
        score = ComponentScore.objects.create(
            inspection=self.inspection,
            component_name="Post",
            degree="1",
            extent="1",
            relevancy="1",
            quantity=Decimal("2"),
            rate=Decimal("10"),
        )
        self.assertEqual(score.ci, 83)
        self.assertEqual(score.cost, Decimal("20"))

    def test_clean_requires_extent_and_relevancy_for_defects(self):
        score = ComponentScore(inspection=self.inspection, component_name="Post", degree="2")
        with self.assertRaises(ValidationError):
            score.clean()


class AssetTests(AssetMixin, TestCase):
    def test_maintenance_cost_window(self):
        asset = self.create_asset()
        today = date(2024, 6, 30)
        WorkOrder.objects.create(asset=asset, title="In window", status="Completed", completed_date=date(2024, 1, 5), estimated_cost=Decimal("40"))
        WorkOrder.objects.create(asset=asset, title="Boundary", status="Completed", completed_date=date(2023, 7, 2), actual_cost=Decimal("10"))
        WorkOrder.objects.create(asset=asset, title="Too old", status="Completed", completed_date=date(2023, 7, 1), actual_cost=Decimal("99"))
        WorkOrder.objects.create(asset=asset, title="Open", scheduled_date=date(2024, 6, 1), estimated_cost=Decimal("99"))

        self.assertEqual(asset.maintenance_cost_last_12_months(today), Decimal("50"))

    def test_depreciation_and_priority_from_asset_fields(self):
        asset = self.create_asset(installation_date=date(2020, 1, 1), useful_life_years=10, replacement_value=Decimal("10000"))
        today = date(2025, 1, 1)

        self.assertEqual(asset.depreciation(today).current_value, Decimal("4997.95"))
        self.assertIsNone(asset.replacement_priority(today))

        asset.latest_ci = Decimal("30")
        priority = asset.replacement_priority(today)
        self.assertEqual(priority.score, 43)
        self.assertEqual(priority.category, "Medium")

    def test_soft_delete_hides_asset_from_active_queryset(self):
        asset = self.create_asset()
        asset.soft_delete()

        self.assertTrue(Asset.objects.get(pk=asset.pk).is_deleted)
        self.assertFalse(Asset.objects.active().filter(pk=asset.pk).exists())

    def test_in_band_matches_classifier(self):
        cis = {"A-1": "85", "A-2": "80", "A-3": "79.99", "A-4": "40", "A-5": "39.99", "A-6": None}
        for code, ci in cis.items():
            asset = self.create_asset(code)
            Asset.objects.filter(pk=asset.pk).update(latest_ci=Decimal(ci) if ci else None)

        def codes(band):
            return set(Asset.objects.in_band(band).values_list("reference_code", flat=True))

        self.assertEqual(codes(ConditionBand.EXCELLENT), {"A-1", "A-2"})
        self.assertEqual(codes(ConditionBand.GOOD), {"A-3"})
        self.assertEqual(codes(ConditionBand.FAIR), {"A-4"})
        self.assertEqual(codes(ConditionBand.POOR), {"A-5"})
        self.assertEqual(codes(ConditionBand.NOT_INSPECTED), {"A-6"})
        self.assertEqual(codes("Unheard"), set())
        for asset in Asset.objects.all():
            self.assertIn(asset.reference_code, codes(asset.condition_band))

    def test_clean_rejects_future_installation_date(self):
        asset = Asset(
            reference_code="GRD-1",
            asset_type=Asset.AssetType.GUARDRAIL,
            installation_date=date.today() + timedelta(days=1),
        )
        with self.assertRaises(ValidationError) as ctx:
            asset.clean()
        self.assertIn("installation_date", ctx.exception.message_dict)

    def test_clean_requires_both_coordinates(self):
        asset = Asset(reference_code="GRD-2", asset_type=Asset.AssetType.GUARDRAIL, latitude=Decimal("-26.2"))
        with self.assertRaises(ValidationError) as ctx:
            asset.clean()
        self.assertIn("longitude", ctx.exception.message_dict)

    def test_full_clean_rejects_bad_reference_code(self):
        asset = Asset(reference_code="bad code!", asset_type=Asset.AssetType.FENCE)
        with self.assertRaises(ValidationError) as ctx:
            asset.full_clean()
        self.assertIn("reference_code", ctx.exception.message_dict)
