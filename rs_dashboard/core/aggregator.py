"""
Derived views over a record sequence.

Every function here is pure: it never mutates its input, returns the same
output for the same input regardless of row order, and represents missing
values explicitly (omitted cells or None) rather than raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .record import Record
from .record_store import RecordLike, records_to_frame, to_float

AggregateRow = Dict[str, Any]
PivotTable = Dict[Any, Dict[Any, float]]
Point = Union[Tuple[Any, Any], Mapping[str, Any]]


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------
def value_of(rec: RecordLike, key: str) -> Optional[float]:
    if isinstance(rec, Record):
        return rec.value(key)
    return to_float(rec.get(key))


def _plain(value: Any) -> Any:
    """Turn numpy scalars into plain Python keys (years stay ints)."""
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    return value


def _numeric_frame(records: Iterable[RecordLike], keys: Sequence[str]) -> pd.DataFrame:
    df = records_to_frame(records)
    for key in keys:
        if key not in df.columns:
            df[key] = np.nan
        df[key] = pd.to_numeric(df[key], errors="coerce")
    return df


def _none_if_nan(value: Any) -> Optional[float]:
    return None if pd.isna(value) else float(value)


# -------------------------------------------------------------------------
# Grouped means
# -------------------------------------------------------------------------
def group_mean_by_year(records: Iterable[RecordLike], *value_keys: str) -> List[AggregateRow]:
    """
    One row per distinct year, ascending, with the mean of each value key.
    Absent values are ignored; a year with no values for a key gets None.
    """
    if not value_keys:
        raise ValueError("group_mean_by_year needs at least one value key")

    df = _numeric_frame(records, ["year", *value_keys]).dropna(subset=["year"])
    if df.empty:
        return []

    means = df.groupby("year", sort=True)[list(value_keys)].mean()

    rows: List[AggregateRow] = []
    for year, row in means.iterrows():
        entry: AggregateRow = {"year": _plain(year)}
        for key in value_keys:
            entry[key] = _none_if_nan(row[key])
        rows.append(entry)
    return rows


def group_mean_by_country(
    records: Iterable[RecordLike],
    *value_keys: str,
    decimals: Optional[int] = None,
) -> List[AggregateRow]:
    """
    One row per country (sorted by name) with the mean of each value key,
    optionally rounded.
    """
    if not value_keys:
        raise ValueError("group_mean_by_country needs at least one value key")

    df = _numeric_frame(records, value_keys)
    if df.empty or "country" not in df.columns:
        return []
    df = df.dropna(subset=["country"])

    means = df.groupby("country", sort=True)[list(value_keys)].mean()
    if decimals is not None:
        means = means.round(decimals)

    rows: List[AggregateRow] = []
    for country, row in means.iterrows():
        entry: AggregateRow = {"country": country}
        for key in value_keys:
            entry[key] = _none_if_nan(row[key])
        rows.append(entry)
    return rows


# -------------------------------------------------------------------------
# Pivot tables
# -------------------------------------------------------------------------
def pivot(
    records: Iterable[RecordLike],
    value_key: str,
    row_key: str = "country",
    col_key: str = "year",
) -> PivotTable:
    """
    Nested mapping row -> col -> mean(value).

    Duplicate (row, col) pairs are averaged and absent cells are omitted, not
    zero-filled. A row whose values are all absent still appears, mapped to {}.
    """
    df = _numeric_frame(records, [value_key])
    if df.empty or row_key not in df.columns or col_key not in df.columns:
        return {}

    df = df.dropna(subset=[row_key])
    table: PivotTable = {_plain(row): {} for row in sorted(df[row_key].unique(), key=str)}

    present = df.dropna(subset=[col_key, value_key])
    if present.empty:
        return table

    means = present.groupby([row_key, col_key], sort=True)[value_key].mean()
    for (row, col), value in means.items():
        table[_plain(row)][_plain(col)] = float(value)
    return table


def backfill_rows(table: PivotTable, all_row_keys: Iterable[Any]) -> PivotTable:
    """
    Make sure every expected row key exists, defaulting to an empty mapping,
    so grid-shaped outputs stay rectangular.
    """
    keys = set(all_row_keys) | set(table)
    return {key: dict(table.get(key, {})) for key in sorted(keys, key=str)}


# -------------------------------------------------------------------------
# Regression
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class RegressionResult:
    slope: Optional[float] = None
    intercept: Optional[float] = None
    trend: List[Dict[str, float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.slope is None


def _xy(point: Point) -> Tuple[Optional[float], Optional[float]]:
    if isinstance(point, Mapping):
        return to_float(point.get("x")), to_float(point.get("y"))
    x, y = point
    return to_float(x), to_float(y)


def linear_regression(points: Iterable[Point]) -> RegressionResult:
    """
    Ordinary least squares fit y = slope * x + intercept.

    Points with a missing coordinate are ignored. Fewer than two usable points,
    or all x identical, give an empty result (no trend overlay).
    The trend holds the projected y for every input x, in input order.
    """
    pairs = [(x, y) for x, y in map(_xy, points) if x is not None and y is not None]
    if len(pairs) < 2:
        return RegressionResult()

    xs = np.array([p[0] for p in pairs], dtype=float)
    ys = np.array([p[1] for p in pairs], dtype=float)

    if np.all(xs == xs[0]):
        return RegressionResult()

    x_mean = xs.mean()
    y_mean = ys.mean()
    denominator = float(((xs - x_mean) ** 2).sum())
    if denominator == 0:
        return RegressionResult()

    slope = float(((xs - x_mean) * (ys - y_mean)).sum() / denominator)
    intercept = float(y_mean - slope * x_mean)

    trend = [{"x": float(x), "y": slope * float(x) + intercept} for x in xs]
    return RegressionResult(slope=slope, intercept=intercept, trend=trend)


def regression_points(records: Iterable[RecordLike], x_key: str, y_key: str) -> List[Tuple[float, float]]:
    points = []
    for rec in records:
        x, y = value_of(rec, x_key), value_of(rec, y_key)
        if x is not None and y is not None:
            points.append((x, y))
    return points


# -------------------------------------------------------------------------
# Median split
# -------------------------------------------------------------------------
@dataclass(frozen=True)
class MedianSplit:
    threshold: Optional[float]
    below: List[RecordLike]
    above_or_equal: List[RecordLike]


def median_threshold_split(records: Iterable[RecordLike], value_key: str) -> MedianSplit:
    """
    Split records around the median of value_key.
    Records with no value for the key land on neither side.
    """
    records = list(records)
    values = [v for v in (value_of(r, value_key) for r in records) if v is not None]
    if not values:
        return MedianSplit(threshold=None, below=[], above_or_equal=[])

    threshold = float(np.median(values))

    below: List[RecordLike] = []
    above: List[RecordLike] = []
    for rec in records:
        value = value_of(rec, value_key)
        if value is None:
            continue
        (below if value < threshold else above).append(rec)

    return MedianSplit(threshold=threshold, below=below, above_or_equal=above)


# -------------------------------------------------------------------------
# Year-over-year change
# -------------------------------------------------------------------------
class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"
    NONE = "none"


def compare_values(current: Optional[float], previous: Optional[float]) -> Trend:
    if current is None or previous is None:
        return Trend.NONE
    if current > previous:
        return Trend.UP
    if current < previous:
        return Trend.DOWN
    return Trend.SAME


def year_over_year_change(table: PivotTable, country: str, year: int) -> Trend:
    """
    Direction of change for one country between year-1 and year, read from a
    country -> year pivot table. A missing country or year gives Trend.NONE.
    """
    row = table.get(country, {})
    return compare_values(row.get(year), row.get(year - 1))


def pivot_matrix(table: PivotTable) -> Tuple[List[Any], List[Any], List[List[Optional[float]]]]:
    """
    Dense (rows, cols, z) form of a pivot table for grid renderers.
    Missing cells are None; columns are the sorted union of every row's keys.
    """
    rows = list(table)
    cols = sorted({col for cells in table.values() for col in cells})
    z = [[table[row].get(col) for col in cols] for row in rows]
    return rows, cols, z
