from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import PivotTable, Trend
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.coordination_bus import ATTRIBUTE_CHANGED, COUNTRY_HOVERED, YEAR_CHANGED
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.geo import FEATURE_ID_KEY, resolve_country
from rs_dashboard.core.playback import PlaybackTimer

logger = logging.getLogger(__name__)

TREND_ARROWS = {
    Trend.UP: "↑",
    Trend.DOWN: "↓",
    Trend.SAME: "→",
    Trend.NONE: "∅",
}

NO_DATA_COLOR = "#cccccc"
HOVER_LINE_WIDTH = 2.0
BASE_LINE_WIDTH = 0.5


@dataclass(frozen=True)
class MapPanel:
    """Colouring of one map panel for one year."""

    attribute: str
    year: int
    # boundary name -> dataset country (None when the shape has no data)
    matches: Dict[str, Optional[str]]
    values: Dict[str, float]
    trends: Dict[str, Trend]
    zmax: float


@dataclass(frozen=True)
class ChoroplethData:
    year: Optional[int]
    panels: List[MapPanel]

    def __len__(self) -> int:
        return len(self.panels)


class ChoroplethView(BaseView):
    """
    Map of Europe coloured by one indicator for one year, with a time slider.

    Several panels can be open side by side, each showing its own indicator
    for the same year. The first panel follows the attribute in the filter
    selection. Moving the year only recolours: per-attribute pivot tables are
    cached and the boundary shapes are shared by every panel.

    Playback advances the year once per tick until the last year, then stops.
    While a `year_sink` is set (the Dashboard points it at FilterState), each
    step goes through it so every view sees the new year; otherwise the view
    recolours itself.
    """

    id = "choropleth"
    label = "Choropleth Map"
    channels = (YEAR_CHANGED, COUNTRY_HOVERED, ATTRIBUTE_CHANGED)

    def __init__(self, context):
        super().__init__(context)
        self.geo = context.geo
        self.panels: List[str] = []
        self.year: Optional[int] = None
        self.hovered_country: Optional[str] = None
        self.year_sink: Optional[Callable[[int], None]] = None
        self.timer: Optional[PlaybackTimer] = None
        self._pivots: Dict[str, PivotTable] = {}

        years = context.years()
        self.min_year: Optional[int] = years[0] if years else None
        self.max_year: Optional[int] = years[-1] if years else None
        self._countries = set(context.countries())

    # ------------------------------------------------------------------
    # Bus events
    # ------------------------------------------------------------------
    def on_event(self, channel: str, payload: Any) -> None:
        if channel == YEAR_CHANGED:
            self.update_year(payload)
        elif channel == ATTRIBUTE_CHANGED:
            self._set_primary_attribute(payload)
        elif channel == COUNTRY_HOVERED:
            if payload is None or not payload.active:
                self.hovered_country = None
            else:
                self.hovered_country = resolve_country(payload.country, self._countries)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------
    def pivot_for(self, attribute: str) -> PivotTable:
        if attribute not in self._pivots:
            self._pivots[attribute] = aggregator.pivot(self.records, attribute)
        return self._pivots[attribute]

    def compute_data(self, selection: FilterSelection) -> ChoroplethData:
        if not self.panels:
            self.panels = [selection.attribute]
        else:
            self.panels[0] = selection.attribute
        if selection.year is not None:
            self.year = selection.year
        elif self.year is None:
            self.year = self.min_year
        return self._colour()

    def _colour(self) -> ChoroplethData:
        if self.year is None or self.geo is None:
            return ChoroplethData(year=self.year, panels=[])
        return ChoroplethData(
            year=self.year,
            panels=[self._panel(attribute, self.year) for attribute in self.panels],
        )

    def _panel(self, attribute: str, year: int) -> MapPanel:
        table = self.pivot_for(attribute)
        values: Dict[str, float] = {}
        trends: Dict[str, Trend] = {}
        matches: Dict[str, Optional[str]] = {}
        for name in self.geo.names():
            country = resolve_country(name, table)
            matches[name] = country
            if country is None:
                continue
            trends[name] = aggregator.year_over_year_change(table, country, year)
            if year in table[country]:
                values[name] = table[country][year]

        return MapPanel(
            attribute=attribute,
            year=year,
            matches=matches,
            values=values,
            trends=trends,
            zmax=max(values.values()) if values else 1.0,
        )

    def _set_primary_attribute(self, code: str) -> None:
        if not self.panels:
            self.panels = [code]
        elif self.panels[0] == code:
            return
        else:
            self.panels[0] = code
        if self._rendered:
            self._data = self._colour()

    # ------------------------------------------------------------------
    # Time slider
    # ------------------------------------------------------------------
    def update_year(self, year: int) -> None:
        """Recolour every panel for a new year; nothing is recomputed."""
        if year is None:
            return
        self.year = int(year)
        if self._selection is not None:
            self._selection = replace(self._selection, year=self.year)
        if self._rendered:
            self._data = self._colour()

    def play(self) -> Optional[PlaybackTimer]:
        """
        Start playback from the current year. At the last year playback
        starts over from the first one.
        """
        if self.max_year is None:
            return None
        if self.timer is not None and self.timer.running:
            return self.timer

        start = self.year if self.year is not None else self.min_year
        if start >= self.max_year:
            start = self.min_year
            self._step(start)

        self.timer = PlaybackTimer(
            max_year=self.max_year,
            on_step=self._step,
            interval_ms=self.context.playback_interval_ms,
        )
        self.timer.start(start)
        return self.timer

    def tick(self) -> Optional[int]:
        if self.timer is None:
            return None
        return self.timer.tick()

    @property
    def playing(self) -> bool:
        return self.timer is not None and self.timer.running

    def stop(self) -> None:
        if self.timer is not None:
            self.timer.cancel()

    def _step(self, year: int) -> None:
        if self.year_sink is not None:
            self.year_sink(year)
        else:
            self.update_year(year)

    def teardown(self) -> None:
        self.stop()
        super().teardown()

    # ------------------------------------------------------------------
    # Panels
    # ------------------------------------------------------------------
    def add_panel(self, attribute: Optional[str] = None) -> int:
        """
        Open another map panel.

        :param attribute: indicator for the new panel, defaults to the
            currently selected one
        :return: number of panels
        """
        if attribute is None:
            attribute = self._selection.attribute if self._selection else self.panels[0]
        if attribute not in self.attributes:
            raise ValueError(f"Unknown attribute '{attribute}'")
        self.panels.append(attribute)
        if self._rendered:
            self._data = self._colour()
        return len(self.panels)

    def remove_panel(self, index: int) -> bool:
        """
        Close a panel. The last remaining panel cannot be removed.

        :return: True if a panel was removed
        """
        if len(self.panels) <= 1:
            logger.info("Refusing to remove the last map panel")
            return False
        if not 0 <= index < len(self.panels):
            raise IndexError(f"No map panel at index {index}")
        del self.panels[index]
        if self._rendered:
            self._data = self._colour()
        return True

    def set_panel_attribute(self, index: int, attribute: str) -> None:
        if attribute not in self.attributes:
            raise ValueError(f"Unknown attribute '{attribute}'")
        self.panels[index] = attribute
        if self._rendered:
            self._data = self._colour()

    def panel_width_percent(self) -> float:
        n = len(self.panels)
        if n <= 1:
            return 100.0
        if n == 2:
            return 50.0
        return round(100 / 3, 1)

    # ------------------------------------------------------------------
    # Figure
    # ------------------------------------------------------------------
    def _hovertext(self, panel: MapPanel) -> List[str]:
        label = self.attributes.label(panel.attribute)
        texts = []
        for name, country in panel.matches.items():
            if country is None:
                texts.append(f"<b>{name}</b><br>No data")
                continue
            value = panel.values.get(name)
            shown = f"{value:.2f}" if value is not None else "No data"
            arrow = TREND_ARROWS[panel.trends.get(name, Trend.NONE)]
            texts.append(f"<b>{name}</b><br>{label}: {shown} {arrow}")
        return texts

    def render_figure(self, data: ChoroplethData, selection: FilterSelection) -> go.Figure:
        n = len(data.panels)
        fig = make_subplots(
            rows=1,
            cols=n,
            specs=[[{"type": "choropleth"}] * n],
            subplot_titles=[self.attributes.label(p.attribute) for p in data.panels],
            horizontal_spacing=0.02,
        )

        for idx, panel in enumerate(data.panels, start=1):
            names = list(panel.matches)
            line_width = [
                HOVER_LINE_WIDTH
                if self.hovered_country is not None and panel.matches[name] == self.hovered_country
                else BASE_LINE_WIDTH
                for name in names
            ]

            # Grey base layer: every shape, including those without data
            fig.add_trace(
                go.Choropleth(
                    geojson=self.geo.geojson,
                    featureidkey=FEATURE_ID_KEY,
                    locations=names,
                    z=[0] * len(names),
                    colorscale=[[0, NO_DATA_COLOR], [1, NO_DATA_COLOR]],
                    showscale=False,
                    customdata=[panel.matches[name] or name for name in names],
                    text=self._hovertext(panel),
                    hovertemplate="%{text}<extra></extra>",
                    marker_line_color="white",
                    marker_line_width=line_width,
                    uid=f"map-{idx}-base",
                ),
                row=1,
                col=idx,
            )

            coloured = [name for name in names if name in panel.values]
            fig.add_trace(
                go.Choropleth(
                    geojson=self.geo.geojson,
                    featureidkey=FEATURE_ID_KEY,
                    locations=coloured,
                    z=[panel.values[name] for name in coloured],
                    zmin=0,
                    zmax=panel.zmax,
                    colorscale="YlOrRd",
                    showscale=n == 1,
                    customdata=[panel.matches[name] for name in coloured],
                    text=[t for name, t in zip(names, self._hovertext(panel)) if name in panel.values],
                    hovertemplate="%{text}<extra></extra>",
                    marker_line_color="white",
                    marker_line_width=[line_width[names.index(name)] for name in coloured],
                    uid=f"map-{idx}-values",
                ),
                row=1,
                col=idx,
            )

        fig.update_geos(fitbounds="locations", visible=False)
        fig.update_layout(
            title=f"Year {data.year}",
            height=600 if n == 1 else 450,
            margin=dict(l=10, r=10, t=80, b=10),
        )
        return fig
