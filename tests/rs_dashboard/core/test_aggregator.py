import math

import pytest

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import Trend
from rs_dashboard.core.record import Record


def _make_records():
    """
    France: 2000 -> 2.0, 2001 -> 3.0 (investment 10, 30)
    Spain:  2000 -> 5.0              (investment 20)
    Italy:  2001 -> missing          (investment 40)
    """
    return [
        Record(country="France", year=2001, fatal_pc_km=3.0, croad_inv_km=30.0),
        Record(country="Spain", year=2000, fatal_pc_km=5.0, croad_inv_km=20.0),
        Record(country="France", year=2000, fatal_pc_km=2.0, croad_inv_km=10.0),
        Record(country="Italy", year=2001, fatal_pc_km=None, croad_inv_km=40.0),
    ]


def test_group_mean_by_year_sorted_without_duplicates():
    rows = aggregator.group_mean_by_year(_make_records(), "fatal_pc_km")

    years = [row["year"] for row in rows]
    assert years == [2000, 2001]
    assert len(set(years)) == len(years)

    # 2000: (5 + 2) / 2; 2001: only France, Italy is absent
    assert rows[0]["fatal_pc_km"] == pytest.approx(3.5)
    assert rows[1]["fatal_pc_km"] == pytest.approx(3.0)


def test_group_mean_by_year_year_without_values_is_none():
    records = [Record(country="A", year=1999), Record(country="A", year=2000, fatal_pc_km=1.0)]

    rows = aggregator.group_mean_by_year(records, "fatal_pc_km")

    assert rows == [{"year": 1999, "fatal_pc_km": None}, {"year": 2000, "fatal_pc_km": 1.0}]


def test_group_mean_by_year_empty_input():
    assert aggregator.group_mean_by_year([], "fatal_pc_km") == []


def test_group_mean_by_year_needs_a_key():
    with pytest.raises(ValueError):
        aggregator.group_mean_by_year(_make_records())


def test_group_mean_by_country_rounds():
    records = [
        Record(country="B", year=2000, fatal_pc_km=1.0),
        Record(country="B", year=2001, fatal_pc_km=2.0),
        Record(country="B", year=2002, fatal_pc_km=2.0),
        Record(country="A", year=2000, fatal_pc_km=4.0),
    ]

    rows = aggregator.group_mean_by_country(records, "fatal_pc_km", decimals=2)

    assert [row["country"] for row in rows] == ["A", "B"]
    assert rows[1]["fatal_pc_km"] == 1.67


def test_pivot_averages_duplicates_and_omits_missing_cells():
    records = _make_records() + [Record(country="Spain", year=2000, fatal_pc_km=7.0)]

    table = aggregator.pivot(records, "fatal_pc_km")

    assert table["Spain"] == {2000: 6.0}
    assert table["France"] == {2000: 2.0, 2001: 3.0}
    # Italy has rows but no values
    assert table["Italy"] == {}


def test_backfill_rows_adds_every_expected_key():
    table = {"A": {2000: 1.0}}

    filled = aggregator.backfill_rows(table, ["A", "B", "C"])

    assert filled == {"A": {2000: 1.0}, "B": {}, "C": {}}
    # Input untouched
    assert table == {"A": {2000: 1.0}}


def test_pivot_backfill_end_to_end():
    rows = [
        {"country": "France", "year": 2000, "fatal": 2.0},
        {"country": "France", "year": 2001, "fatal": 3.0},
        {"country": "Spain", "year": 2000, "fatal": 5.0},
    ]

    result = aggregator.backfill_rows(aggregator.pivot(rows, "fatal"), ["France", "Spain", "Italy"])

    assert result == {
        "France": {2000: 2.0, 2001: 3.0},
        "Spain": {2000: 5.0},
        "Italy": {},
    }


def test_linear_regression_exact_line():
    result = aggregator.linear_regression([(1, 2), (2, 4), (3, 6)])

    assert result.slope == pytest.approx(2.0)
    assert result.intercept == pytest.approx(0.0, abs=1e-9)
    assert [p["y"] for p in result.trend] == pytest.approx([2.0, 4.0, 6.0])


def test_linear_regression_accepts_mappings_and_skips_missing():
    result = aggregator.linear_regression(
        [{"x": 0, "y": 1}, {"x": 1, "y": 3}, {"x": None, "y": 100}, {"x": 2, "y": 5}]
    )

    assert result.slope == pytest.approx(2.0)
    assert result.intercept == pytest.approx(1.0)


@pytest.mark.parametrize("points", [[], [(1, 2)], [(3, 1), (3, 2), (3, 5)]])
def test_linear_regression_degenerate_input_is_empty(points):
    result = aggregator.linear_regression(points)

    assert result.is_empty
    assert result.trend == []


def test_regression_points_only_complete_pairs():
    points = aggregator.regression_points(_make_records(), "croad_inv_km", "fatal_pc_km")

    assert sorted(points) == [(10.0, 2.0), (20.0, 5.0), (30.0, 3.0)]


def test_median_threshold_split():
    split = aggregator.median_threshold_split(_make_records(), "croad_inv_km")

    # values 10, 20, 30, 40 -> median 25
    assert split.threshold == 25.0
    assert sorted(r.croad_inv_km for r in split.below) == [10.0, 20.0]
    assert sorted(r.croad_inv_km for r in split.above_or_equal) == [30.0, 40.0]


def test_median_threshold_split_ignores_missing_values():
    records = [Record(country="A", year=2000, croad_inv_km=1.0), Record(country="B", year=2000)]

    split = aggregator.median_threshold_split(records, "croad_inv_km")

    assert split.threshold == 1.0
    assert split.below == []
    assert len(split.above_or_equal) == 1


def test_median_threshold_split_without_values():
    split = aggregator.median_threshold_split([Record(country="A", year=2000)], "croad_inv_km")

    assert split.threshold is None
    assert split.below == [] and split.above_or_equal == []


def test_year_over_year_change():
    table = aggregator.pivot(_make_records(), "fatal_pc_km")

    assert aggregator.year_over_year_change(table, "France", 2001) is Trend.UP
    assert aggregator.year_over_year_change(table, "France", 2000) is Trend.NONE
    assert aggregator.year_over_year_change(table, "Italy", 2001) is Trend.NONE
    assert aggregator.year_over_year_change(table, "Nowhere", 2001) is Trend.NONE


@pytest.mark.parametrize(
    "current, previous, expected",
    [(2.0, 1.0, Trend.UP), (1.0, 2.0, Trend.DOWN), (1.0, 1.0, Trend.SAME), (None, 1.0, Trend.NONE)],
)
def test_compare_values(current, previous, expected):
    assert aggregator.compare_values(current, previous) is expected


def test_pivot_matrix_fills_gaps_with_none():
    rows, cols, z = aggregator.pivot_matrix({"A": {2001: 1.0}, "B": {2000: 2.0}, "C": {}})

    assert rows == ["A", "B", "C"]
    assert cols == [2000, 2001]
    assert z == [[None, 1.0], [2.0, None], [None, None]]


def test_aggregations_do_not_depend_on_row_order():
    records = _make_records()

    forward = aggregator.pivot(records, "fatal_pc_km")
    backward = aggregator.pivot(list(reversed(records)), "fatal_pc_km")

    assert forward == backward
    assert not any(math.isnan(v) for cells in forward.values() for v in cells.values())
