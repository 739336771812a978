import copy
from datetime import date
from decimal import Decimal

import pytest

from tams.services.condition import (
    BAND_ORDER,
    ConditionBand,
    UrgencyLevel,
    aggregate_by_asset_type,
    aggregate_by_band,
    aggregate_by_region,
    aggregate_by_urgency,
    classify_condition_index,
    condition_statistics,
    deru_to_urgency,
    inspector_performance,
    monthly_ci_trend,
    normalize_urgency,
    resolve_urgency,
    worst_urgency,
)


@pytest.mark.parametrize(
    "ci, expected",
    [
        (80, ConditionBand.EXCELLENT),
        (79.999, ConditionBand.GOOD),
        (60, ConditionBand.GOOD),
        (59.99, ConditionBand.FAIR),
        (40, ConditionBand.FAIR),
        (39.999, ConditionBand.POOR),
        (0, ConditionBand.POOR),
        (100, ConditionBand.EXCELLENT),
        (Decimal("72.50"), ConditionBand.GOOD),
        ("85", ConditionBand.EXCELLENT),
    ],
)
def test_classify_condition_index_boundaries(ci, expected):
    assert classify_condition_index(ci) == expected


@pytest.mark.parametrize("ci", [None, "", "n/a", float("nan"), object()])
def test_classify_without_usable_ci_is_not_inspected(ci):
    assert classify_condition_index(ci) == ConditionBand.NOT_INSPECTED


def test_out_of_range_values_are_clamped_before_banding():
    assert classify_condition_index(150) == ConditionBand.EXCELLENT
    assert classify_condition_index(-12) == ConditionBand.POOR


def test_bands_cover_zero_to_hundred_without_gaps():
    scored_bands = BAND_ORDER[:-1]
    previous_rank = 0
    for step in range(0, 1001):
        band = classify_condition_index(step / 10)
        assert band in scored_bands
        rank = len(scored_bands) - scored_bands.index(band)
        assert rank >= previous_rank
        previous_rank = rank


def test_explicit_urgency_score_beats_deru_value():
    record = {"urgency_score": "2", "latest_deru": 150}
    assert resolve_urgency(record) == "2"


@pytest.mark.parametrize(
    "deru, expected",
    [(120, "3"), (120.01, "4"), (80, "3"), (79.99, "2"), (40, "2"), (39.99, "1"), (20, "1"), (19.99, "0"), (0, "0")],
)
def test_deru_thresholds(deru, expected):
    assert resolve_urgency({"latest_deru": deru}) == expected
    assert deru_to_urgency(deru) == expected


@pytest.mark.parametrize("score", [-1, "abc", None, True])
def test_deru_to_urgency_rejects_unusable_scores(score):
    assert deru_to_urgency(score) is None


def test_composite_deru_code_takes_urgency_component():
    assert resolve_urgency({"latest_deru": "3-4-3-4"}) == UrgencyLevel.IMMEDIATE
    assert resolve_urgency({"latest_deru": "2-3-3-2", "latest_urgency": "4"}) == UrgencyLevel.LONG_TERM


def test_malformed_composite_falls_through_to_legacy_fields():
    assert resolve_urgency({"latest_deru": "3-4", "latest_urgency": "1"}) == UrgencyLevel.ROUTINE


def test_legacy_field_precedence():
    record = {"calculated_urgency": "1", "latest_urgency": "3", "urgency": "4"}
    assert resolve_urgency(record) == "1"
    assert resolve_urgency({"latest_urgency": "3", "urgency": "4"}) == "3"
    assert resolve_urgency({"urgency": "4"}) == "4"


def test_numeric_deru_beats_legacy_fields():
    assert resolve_urgency({"latest_deru": 10, "calculated_urgency": "4"}) == "0"


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Immediate", "4"),
        ("critical", "4"),
        ("High", "3"),
        ("Medium", "2"),
        ("Low", "1"),
        ("Minor", "0"),
        ("Routine", "0"),
        ("Record Only", "R"),
        ("R", "R"),
        (3, "3"),
        (2.0, "2"),
    ],
)
def test_legacy_labels_are_normalised(label, expected):
    assert normalize_urgency(label) == expected
    assert resolve_urgency({"urgency": label}) == expected


@pytest.mark.parametrize("value", [5, -1, 2.5, "soon", "", None])
def test_unrecognised_urgency_values(value):
    assert normalize_urgency(value) is None


def test_record_without_urgency_signal_resolves_to_none():
    assert resolve_urgency({}) is None
    assert resolve_urgency({"urgency": "whenever"}) is None
    assert resolve_urgency(None) is None


def test_resolve_urgency_reads_object_attributes():
    class Record:
        latest_urgency = "2"

    assert resolve_urgency(Record()) == "2"


def test_custom_resolution_chain():
    chain = (("priority", normalize_urgency),)
    assert resolve_urgency({"priority": "critical", "urgency": "1"}, chain=chain) == "4"


def test_worst_urgency_orders_record_only_below_monitor():
    assert worst_urgency(["R", "0"]) == "0"
    assert worst_urgency(["1", None, "High"]) == "3"
    assert worst_urgency([]) is None


def test_aggregate_by_band_on_empty_input_returns_all_bands():
    rows = aggregate_by_band([])
    assert [row.band for row in rows] == ["Excellent", "Good", "Fair", "Poor", "NotInspected"]
    assert all(row.count == 0 for row in rows)


def test_aggregate_by_band_end_to_end():
    records = [{"latest_ci": 85}, {"latest_ci": 55}, {"latest_ci": None}, {"latest_ci": 10}]
    counts = {row.band: row.count for row in aggregate_by_band(records)}
    assert counts == {"Excellent": 1, "Good": 0, "Fair": 1, "Poor": 1, "NotInspected": 1}


def test_aggregate_by_band_counts_sum_to_input_length():
    records = [{"latest_ci": value} for value in (None, 0, 39.9, 40, 59, 60, 79.9, 80, 100, 140, -3, "x")]
    rows = aggregate_by_band(records)
    assert sum(row.count for row in rows) == len(records)


def test_aggregate_by_band_supports_other_ci_field():
    rows = aggregate_by_band([{"ci_final": 90}, {"ci_final": 45}], ci_field="ci_final")
    counts = {row.band: row.count for row in rows}
    assert counts["Excellent"] == 1
    assert counts["Fair"] == 1


def test_aggregations_leave_input_untouched():
    records = [
        {"region": "North", "latest_ci": 85, "latest_deru": 30, "replacement_value": 10},
        {"region": None, "latest_ci": None, "urgency": "High"},
    ]
    snapshot = copy.deepcopy(records)
    aggregate_by_band(records)
    aggregate_by_region(records)
    aggregate_by_urgency(records)
    aggregate_by_asset_type(records)
    assert records == snapshot


def test_aggregate_by_region_compared_as_map():
    records = [
        {"region": "North", "latest_ci": 80, "replacement_value": 1000},
        {"region": "South", "latest_ci": None, "replacement_value": 200},
        {"region": "North", "latest_ci": 30, "replacement_value": "500"},
        {"region": None, "latest_ci": None},
        {"region": "  ", "latest_ci": 65, "replacement_value": None},
    ]
    summaries = {row.region: row for row in aggregate_by_region(records)}

    assert set(summaries) == {"North", "South", "Unknown"}
    north = summaries["North"]
    assert (north.asset_count, north.scored_count, north.mean_ci, north.poor_count) == (2, 2, 55.0, 1)
    assert north.replacement_value == 1500.0

    unknown = summaries["Unknown"]
    assert (unknown.asset_count, unknown.scored_count, unknown.mean_ci) == (2, 1, 65.0)
    assert unknown.replacement_value == 0.0


def test_region_without_scored_assets_reports_no_data():
    (south,) = aggregate_by_region([{"region": "South", "latest_ci": None}])
    assert south.mean_ci is None
    assert south.has_condition_data is False
    assert south.as_dict()["mean_ci"] is None


def test_aggregate_by_region_is_order_insensitive():
    records = [
        {"region": "A", "latest_ci": 20, "replacement_value": 5},
        {"region": "B", "latest_ci": 70},
        {"region": "A", "latest_ci": 90, "replacement_value": 7},
    ]
    forward = {row.region: row.as_dict() for row in aggregate_by_region(records)}
    backward = {row.region: row.as_dict() for row in aggregate_by_region(list(reversed(records)))}
    assert forward == backward


def test_aggregate_by_urgency_orders_levels_and_counts_unresolved():
    records = [{"urgency_score": 4}, {"latest_deru": 50}, {}, {"latest_urgency": "R"}, {"urgency": "4"}]
    rows = aggregate_by_urgency(records)
    assert [row.urgency for row in rows] == ["4", "3", "2", "1", "0", "R", None]
    counts = {row.urgency: row.count for row in rows}
    assert counts == {"4": 2, "3": 0, "2": 1, "1": 0, "0": 0, "R": 1, None: 1}


def test_aggregate_by_asset_type():
    records = [
        {"asset_type": "Fence", "latest_ci": 90},
        {"asset_type": "Signage", "latest_ci": 50, "latest_urgency": "3", "total_remedial_cost": 100},
        {"asset_type": "Signage", "latest_ci": None, "total_remedial_cost": Decimal("25.50")},
    ]
    rows = aggregate_by_asset_type(records)
    assert [row.asset_type for row in rows] == ["Signage", "Fence"]
    signage = rows[0]
    assert signage.total_assets == 2
    assert signage.scored_count == 1
    assert signage.mean_ci == 50.0
    assert signage.critical_count == 1
    assert signage.total_remedial_cost == 125.5
    assert rows[1].critical_count == 0


def test_monthly_ci_trend_groups_and_sorts_by_month():
    inspections = [
        {"inspection_date": "2024-01-15", "ci_final": 80},
        {"inspection_date": date(2024, 1, 20), "ci_final": 60},
        {"inspection_date": "2024-03-01", "ci_final": None},
        {"inspection_date": "2023-12-05", "ci_final": "50"},
        {"inspection_date": None, "ci_final": 99},
    ]
    trend = monthly_ci_trend(inspections)
    assert [(row.month, row.mean_ci, row.inspection_count) for row in trend] == [
        ("2023-12", 50.0, 1),
        ("2024-01", 70.0, 2),
    ]
    assert [row.month for row in monthly_ci_trend(inspections, limit=1)] == ["2024-01"]


def test_inspector_performance():
    inspections = [
        {
            "inspector_name": "A. Mensah",
            "ci_final": 70,
            "calculated_urgency": "3",
            "total_remedial_cost": 100,
            "inspection_date": date(2024, 1, 1),
        },
        {
            "inspector_name": "A. Mensah",
            "ci_final": None,
            "calculated_urgency": "R",
            "total_remedial_cost": None,
            "inspection_date": "2024-02-01",
        },
        {"inspector_name": "", "ci_final": 90, "inspection_date": "2024-03-01"},
    ]
    rows = inspector_performance(inspections)
    assert [row.inspector for row in rows] == ["A. Mensah", "Unknown"]
    top = rows[0]
    assert top.inspection_count == 2
    assert top.mean_ci == 70.0
    assert top.high_urgency_count == 1
    assert top.total_remedial_cost == 100.0
    assert top.first_inspection_date == "2024-01-01"
    assert top.last_inspection_date == "2024-02-01"


def test_condition_statistics():
    assets = [{"latest_ci": 10, "latest_urgency": "4"}, {"latest_deru": 130}, {"latest_urgency": "2"}]
    inspections = [
        {"ci_final": 50, "deru_value": 75, "total_remedial_cost": "10.5"},
        {"ci_final": None, "deru_value": None, "total_remedial_cost": None},
    ]
    stats = condition_statistics(assets, inspections)
    assert stats.as_dict() == {
        "total_assets": 3,
        "total_inspections": 2,
        "mean_ci": 50.0,
        "mean_deru": 75.0,
        "total_remedial_cost": 10.5,
        "immediate_count": 2,
    }


def test_condition_statistics_without_data():
    stats = condition_statistics([], [])
    assert stats.mean_ci is None
    assert stats.mean_deru is None
    assert stats.total_remedial_cost == 0
