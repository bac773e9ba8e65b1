from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

import dash
from dash import Input, Output, exceptions

from rs_dashboard.core.coordination_bus import COUNTRY_HOVERED, HIGHLIGHT, UNHIGHLIGHT, HighlightEvent
from rs_dashboard.ui.callbacks.callbacks_utils import refresh_payload, views_on
from rs_dashboard.ui.ids import IDs, graph_id, view_id_of

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def _first_point(hover: Optional[dict]) -> Optional[dict]:
    if not hover or not hover.get("points"):
        return None
    return hover["points"][0]


def hovered_year(hover: Optional[dict]) -> Optional[int]:
    point = _first_point(hover)
    if point is None or point.get("x") is None:
        return None
    try:
        return int(point["x"])
    except (TypeError, ValueError):
        return None


def hovered_scatter_country(hover: Optional[dict]) -> Optional[str]:
    point = _first_point(hover)
    customdata = point.get("customdata") if point else None
    # Trend line points carry no customdata
    if not customdata:
        return None
    return customdata[0]


def hovered_bar_country(hover: Optional[dict]) -> Optional[str]:
    point = _first_point(hover)
    return point.get("y") if point else None


def hovered_map_country(hover: Optional[dict]) -> Optional[str]:
    point = _first_point(hover)
    if point is None:
        return None
    return point.get("customdata") or point.get("location")


# view id -> reader for that graph's hoverData
COUNTRY_SOURCES: Dict[str, Callable[[Optional[dict]], Optional[str]]] = {
    "scatter": hovered_scatter_country,
    "bidirectional": hovered_bar_country,
    "choropleth": hovered_map_country,
}
YEAR_SOURCES: Dict[str, Callable[[Optional[dict]], Optional[int]]] = {
    "line_charts": hovered_year,
}


def register_sync_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    """
    Graph hover -> CoordinationBus. Hovering a year in the line charts
    highlights it everywhere; hovering a country in the scatter plot, the
    diverging bars or a map highlights that country everywhere.
    """
    dashboard = ctx.dashboard
    bus = dashboard.bus

    year_sources = [view_id for view_id in YEAR_SOURCES if view_id in dashboard.views]
    country_sources = [view_id for view_id in COUNTRY_SOURCES if view_id in dashboard.views]

    if year_sources:

        @app.callback(
            Output(IDs.Store.REFRESH, "data", allow_duplicate=True),
            *[Input(graph_id(view_id), "hoverData") for view_id in year_sources],
            prevent_initial_call=True,
        )
        def publish_year_hover(*hovers: Any):
            source_id = view_id_of(dash.ctx.triggered_id)
            if source_id not in YEAR_SOURCES:
                raise exceptions.PreventUpdate
            year = YEAR_SOURCES[source_id](hovers[year_sources.index(source_id)])

            if year is None:
                bus.publish(UNHIGHLIGHT, HighlightEvent(active=False))
            else:
                bus.publish(HIGHLIGHT, HighlightEvent(year=year))
            return refresh_payload(views_on(dashboard, HIGHLIGHT, UNHIGHLIGHT))

    if country_sources:

        @app.callback(
            Output(IDs.Store.REFRESH, "data", allow_duplicate=True),
            *[Input(graph_id(view_id), "hoverData") for view_id in country_sources],
            prevent_initial_call=True,
        )
        def publish_country_hover(*hovers: Any):
            source_id = view_id_of(dash.ctx.triggered_id)
            if source_id not in COUNTRY_SOURCES:
                raise exceptions.PreventUpdate
            country = COUNTRY_SOURCES[source_id](hovers[country_sources.index(source_id)])

            if country is None:
                bus.publish(COUNTRY_HOVERED, HighlightEvent(active=False))
            else:
                bus.publish(COUNTRY_HOVERED, HighlightEvent(country=country))
            return refresh_payload(views_on(dashboard, COUNTRY_HOVERED))
