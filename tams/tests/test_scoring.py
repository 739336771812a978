import pytest

from tams.services.scoring import (
    component_condition_index,
    component_cost,
    component_urgency,
    deru_value,
    score_component,
    summarize_components,
)


@pytest.mark.parametrize(
    "d, e, r, expected",
    [
        ("1", "1", "1", 83),
        ("3", "4", "4", 0),
        ("2", "3", "2", 42),
        ("1", "2", "3", 58),
        ("3", "3", "3", 17),
        ("0", "2", "2", 100),
        ("X", "1", "1", 100),
        (2, 1, 1, 67),
    ],
)
def test_component_condition_index(d, e, r, expected):
    assert component_condition_index(d, e, r) == expected


@pytest.mark.parametrize(
    "d, e, r",
    [("U", "1", "1"), ("1", "U", "1"), ("", "1", "1"), ("1", "", "1"), ("4", "1", "1"), ("1", "5", "1"), ("a", "1", "1")],
)
def test_component_condition_index_without_usable_ratings(d, e, r):
    assert component_condition_index(d, e, r) is None


@pytest.mark.parametrize(
    "d, e, r, expected",
    [
        ("U", "1", "1", "U"),
        ("X", "", "", "R"),
        ("0", "1", "1", "R"),
        ("1", "1", "4", "4"),
        ("3", "4", "3", "4"),
        ("3", "3", "3", "3"),
        ("2", "4", "3", "3"),
        ("1", "4", "2", "3"),
        ("2", "3", "3", "2"),
        ("3", "2", "2", "2"),
        ("1", "3", "2", "2"),
        ("2", "2", "2", "1"),
        ("1", "3", "3", "1"),
        ("1", "1", "3", "1"),
        ("1", "1", "1", "0"),
        ("1", "2", "2", "0"),
        ("5", "1", "1", None),
    ],
)
def test_component_urgency_decision_tree(d, e, r, expected):
    assert component_urgency(d, e, r) == expected


def test_component_cost_applies_at_or_below_threshold():
    assert component_cost(60, 2, 10, 60) == 20.0
    assert component_cost(61, 2, 10, 60) is None
    assert component_cost(None, 2, 10, 60) is None
    assert component_cost(50, None, "10", 60) == 0.0


@pytest.mark.parametrize(
    "ci, expected",
    [(39, 122.0), (40, 90.0), (59.5, 60.75), (60, 40.0), (80, 10.0), (100, 0.0), (150, 0.0), (None, None)],
)
def test_deru_value(ci, expected):
    assert deru_value(ci) == expected


def test_score_component_reads_mappings():
    scored = score_component(
        {"component_name": "Panel", "degree": "3", "extent": "3", "relevancy": "3", "quantity": 4, "rate": "25"},
        repair_threshold=60,
    )
    assert scored.ci == 17
    assert scored.urgency == "3"
    assert scored.cost == 100.0


def test_summarize_components():
    components = [
        {"component_name": "Post", "degree": "1", "extent": "1", "relevancy": "1", "quantity": 2, "rate": 10},
        {
            "component_name": "Panel",
            "degree": "3",
            "extent": "3",
            "relevancy": "3",
            "quantity": 4,
            "rate": 25,
            "remedial_work": "Replace panel",
        },
        {"component_name": "Lamp", "degree": "X"},
        {"component_name": "Foundation", "degree": "U", "extent": "1", "relevancy": "1"},
    ]
    summary = summarize_components(components, repair_threshold=60)

    assert summary.ci_health == 50
    assert summary.worst_urgency == "3"
    assert summary.ci_safety == 25
    assert summary.ci_final == 25
    assert summary.deru_value == 150.0
    assert summary.total_remedial_cost == 100.0
    assert summary.remedial_summary == "Replace panel"
    assert (summary.overall_degree, summary.overall_extent, summary.overall_relevancy) == ("3", "3", "3")
    assert summary.scored_components == 2
    assert summary.excluded_components == 2
    assert len(summary.as_dict()["components"]) == 4


def test_health_mean_rounds_half_up():
    summary = summarize_components(
        [
            {"degree": "1", "extent": "1", "relevancy": "1"},
            {"degree": "3", "extent": "1", "relevancy": "1"},
        ]
    )
    assert summary.ci_health == 67
    assert summary.ci_safety == 50
    assert summary.ci_final == 50


def test_summary_without_scorable_components():
    summary = summarize_components([{"degree": "U", "extent": "1", "relevancy": "1"}])
    assert summary.ci_health is None
    assert summary.ci_final is None
    assert summary.deru_value is None
    assert summary.worst_urgency == "R"


def test_overall_ratings_come_from_first_worst_component():
    summary = summarize_components(
        [
            {"component_name": "Post", "degree": "2", "extent": "2", "relevancy": "2"},
            {"component_name": "Panel", "degree": "3", "extent": "4", "relevancy": "3"},
            {"component_name": "Bracket", "degree": "2", "extent": "4", "relevancy": "4"},
            {"component_name": "Bolt", "degree": "1", "extent": "4", "relevancy": "4"},
        ]
    )
    assert summary.worst_urgency == "4"
    assert summary.ci_safety == 0
    assert (summary.overall_degree, summary.overall_extent, summary.overall_relevancy) == ("3", "4", "3")
