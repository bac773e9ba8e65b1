from __future__ import annotations

from typing import List

from rs_dashboard.config.model import AttributeCatalog
from rs_dashboard.core.filter_state import SHOW_ALL


def country_options(countries: List[str]) -> List[dict]:
    return [{"label": SHOW_ALL, "value": SHOW_ALL}] + [{"label": c, "value": c} for c in countries]


def axis_options(codes, attributes: AttributeCatalog) -> List[dict]:
    return [{"label": attributes.label(code), "value": code} for code in codes]


def year_marks(years: List[int]) -> dict:
    # Label every other year once the range gets long
    step = 1 if len(years) <= 12 else 2
    return {y: str(y) for i, y in enumerate(years) if i % step == 0 or y == years[-1]}
