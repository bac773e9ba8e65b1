from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional

logger = logging.getLogger(__name__)

SHOW_ALL = "Show All"


class MetricPair(str, Enum):
    """Comparisons offered by the bidirectional chart."""

    FATAL_VS_PASSENGER_KM = "fatal_pkm_vs_passenger"
    INVESTMENT_VS_ACCIDENTS = "investment_vs_accidents"


@dataclass(frozen=True)
class FilterSelection:
    """
    The user's current selection, shared by every view.

    Fields:

    - countries: selected countries, or {SHOW_ALL} meaning "no country filter".
      Never empty and never SHOW_ALL mixed with specific countries.
    - attribute: indicator shown by the choropleth
    - year: time cursor (None until the dataset is known)
    - metric_pair: comparison shown by the bidirectional chart
    - x_key / y_key: scatter plot axes
    """

    countries: FrozenSet[str] = field(default_factory=lambda: frozenset({SHOW_ALL}))
    attribute: str = "fatal_pc_km"
    year: Optional[int] = None
    metric_pair: MetricPair = MetricPair.FATAL_VS_PASSENGER_KM
    x_key: str = "cgdp"
    y_key: str = "fatal_pc_km"

    @property
    def show_all(self) -> bool:
        return SHOW_ALL in self.countries

    def includes(self, country: str) -> bool:
        return self.show_all or country in self.countries

    def to_dict(self) -> Dict[str, Any]:
        return {
            "countries": sorted(self.countries),
            "attribute": self.attribute,
            "year": self.year,
            "metric_pair": self.metric_pair.value,
            "x_key": self.x_key,
            "y_key": self.y_key,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FilterSelection:
        default = cls()
        year = data.get("year")
        return cls(
            countries=normalize_countries(data.get("countries") or [], default.countries),
            attribute=data.get("attribute", default.attribute),
            year=int(year) if year is not None else None,
            metric_pair=MetricPair(data.get("metric_pair", default.metric_pair.value)),
            x_key=data.get("x_key", default.x_key),
            y_key=data.get("y_key", default.y_key),
        )


def normalize_countries(selection: Iterable[str], current: FrozenSet[str]) -> FrozenSet[str]:
    """
    Apply the "Show All" rules to a requested selection, relative to the
    current one (this is how checkbox groups report changes):

    - SHOW_ALL newly requested -> {SHOW_ALL} (clears everything else)
    - SHOW_ALL still present alongside new countries -> SHOW_ALL dropped
    - empty -> {SHOW_ALL}
    """
    requested = frozenset(selection)

    if SHOW_ALL in requested:
        specific = requested - {SHOW_ALL}
        if not specific or SHOW_ALL not in current:
            return frozenset({SHOW_ALL})
        return specific

    if not requested:
        return frozenset({SHOW_ALL})

    return requested


Listener = Callable[[FilterSelection], None]


class FilterState:
    """
    Holder of the shared FilterSelection.

    Every setter normalises the new selection, stores it, then calls listeners
    synchronously in subscription order. There is no batching: each call that
    changes the selection notifies once. A call that leaves the selection
    unchanged does not notify.
    """

    def __init__(self, initial: Optional[FilterSelection] = None):
        self._selection = initial or FilterSelection()
        self._listeners: List[Listener] = []

    def get(self) -> FilterSelection:
        return self._selection

    def on_change(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_countries(self, selection: Iterable[str]) -> FilterSelection:
        countries = normalize_countries(selection, self._selection.countries)
        return self._apply(replace(self._selection, countries=countries))

    def set_attribute(self, code: str) -> FilterSelection:
        return self._apply(replace(self._selection, attribute=code))

    def set_year(self, year: int) -> FilterSelection:
        return self._apply(replace(self._selection, year=int(year)))

    def set_metric_pair(self, pair: MetricPair | str) -> FilterSelection:
        return self._apply(replace(self._selection, metric_pair=MetricPair(pair)))

    def set_axes(self, x_key: Optional[str] = None, y_key: Optional[str] = None) -> FilterSelection:
        return self._apply(
            replace(
                self._selection,
                x_key=x_key or self._selection.x_key,
                y_key=y_key or self._selection.y_key,
            )
        )

    def _apply(self, new: FilterSelection) -> FilterSelection:
        if new == self._selection:
            return new

        self._selection = new
        logger.debug("filter_state_changed", extra={"selection": new.to_dict()})

        for listener in list(self._listeners):
            listener(new)
        return new
