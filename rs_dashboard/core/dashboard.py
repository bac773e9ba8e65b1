from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import plotly.graph_objs as go

from rs_dashboard.config.model import AttributeCatalog

from .base_view import BaseView, ViewContext
from .coordination_bus import ATTRIBUTE_CHANGED, YEAR_CHANGED, CoordinationBus
from .filter_state import FilterSelection, FilterState
from .geo import GeoBoundaries
from .record import Record
from .view_registry import ViewRegistry

logger = logging.getLogger(__name__)


def default_registry() -> ViewRegistry:
    from rs_dashboard.views import (
        BidirectionalView,
        ChoroplethView,
        DualPerspectiveView,
        HeatmapView,
        LineChartsView,
        ScatterView,
    )

    registry = ViewRegistry()
    registry.register(HeatmapView)
    registry.register(DualPerspectiveView)
    registry.register(ScatterView)
    registry.register(BidirectionalView)
    registry.register(LineChartsView)
    registry.register(ChoroplethView)
    return registry


class Dashboard:
    """
    Owns the records, the FilterState, the CoordinationBus and one instance
    of every registered view, and wires them together.

    - a selection change that only moves the year is published on the bus
      (views recolour without recomputing)
    - any other change recomputes every view, then publishes
      attributeChanged / yearChanged if those fields moved
    """

    def __init__(
        self,
        records: Sequence[Record],
        geo: Optional[GeoBoundaries] = None,
        attributes: Optional[AttributeCatalog] = None,
        registry: Optional[ViewRegistry] = None,
        initial_selection: Optional[FilterSelection] = None,
        playback_interval_ms: int = 1000,
    ):
        self.context = ViewContext(
            records=list(records),
            attributes=attributes or AttributeCatalog.default(),
            geo=geo,
            playback_interval_ms=playback_interval_ms,
        )
        self.registry = registry or default_registry()
        self.bus = CoordinationBus()

        selection = initial_selection or FilterSelection()
        if selection.year is None:
            years = self.context.years()
            if years:
                selection = replace(selection, year=years[0])
        self.filter_state = FilterState(selection)

        self.views: Dict[str, BaseView] = {}
        for view_cls in self.registry.all_classes():
            view = self.registry.create(view_cls.id, self.context)
            view.attach(self.bus)
            self.views[view.id] = view

        # Playback goes through FilterState so the slider and every view follow
        choropleth = self.views.get("choropleth")
        if choropleth is not None and hasattr(choropleth, "year_sink"):
            choropleth.year_sink = self.filter_state.set_year

        self._previous = self.filter_state.get()
        self._unsubscribe = self.filter_state.on_change(self._on_selection_changed)

        for view in self.views.values():
            view.render(self.filter_state.get())

        logger.info(
            "Dashboard ready",
            extra={"n_records": len(self.context.records), "views": list(self.views)},
        )

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    def _on_selection_changed(self, selection: FilterSelection) -> None:
        previous, self._previous = self._previous, selection

        year_changed = selection.year != previous.year
        attribute_changed = selection.attribute != previous.attribute
        only_year = year_changed and selection == replace(previous, year=selection.year)

        if not only_year:
            for view in self.views.values():
                view.update(selection)

        if attribute_changed:
            self.bus.publish(ATTRIBUTE_CHANGED, selection.attribute)
        if year_changed:
            self.bus.publish(YEAR_CHANGED, selection.year)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def selection(self) -> FilterSelection:
        return self.filter_state.get()

    def view(self, view_id: str) -> BaseView:
        try:
            return self.views[view_id]
        except KeyError:
            raise KeyError(f"View '{view_id}' not found")

    def figure(self, view_id: str) -> go.Figure:
        return self.view(view_id).figure()

    def figures(self) -> Dict[str, go.Figure]:
        return {view_id: view.figure() for view_id, view in self.views.items()}

    def countries(self) -> List[str]:
        return self.context.countries()

    def years(self) -> List[int]:
        return self.context.years()

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------
    def play(self) -> bool:
        """:return: True if playback is running after the call"""
        choropleth = self.views.get("choropleth")
        if choropleth is None:
            return False
        choropleth.play()
        return choropleth.playing

    def tick(self) -> bool:
        """
        Advance playback by one step.

        :return: True while playback should keep ticking
        """
        choropleth = self.views.get("choropleth")
        if choropleth is None:
            return False
        choropleth.tick()
        return choropleth.playing

    def stop(self) -> None:
        choropleth = self.views.get("choropleth")
        if choropleth is not None:
            choropleth.stop()

    def teardown(self) -> None:
        self._unsubscribe()
        for view in self.views.values():
            view.teardown()
        self.bus.clear()
        logger.info("Dashboard torn down")
