from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import dash
import plotly.graph_objs as go
from dash import Input, Output, exceptions, html, no_update

from rs_dashboard.ui.callbacks.callbacks_utils import try_parse_selection, views_to_redraw
from rs_dashboard.ui.ids import IDs, graph_id

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper: Empty/Error Figures
# -----------------------------------------------------------------------------
def _message_figure(title: str, details: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    text = title if details is None else f"{title}<br><br>{details}"
    fig.add_annotation(
        text=text,
        showarrow=False,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    return fig


def _error_figure(details: str) -> go.Figure:
    return _message_figure("Something went wrong while rendering this view.", details)


def register_render_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    dashboard = ctx.dashboard
    view_ids = list(dashboard.views)

    # ---------------------------------------------------------
    # Refresh store -> figures of the views that changed
    # ---------------------------------------------------------
    @app.callback(
        *[Output(graph_id(view_id), "figure") for view_id in view_ids],
        Input(IDs.Store.REFRESH, "data"),
    )
    def render_views(refresh: dict[str, Any] | None):
        targets = set(views_to_redraw(refresh, view_ids))
        if not targets:
            raise exceptions.PreventUpdate

        figures = []
        for view_id in view_ids:
            if view_id not in targets:
                figures.append(no_update)
                continue
            try:
                figures.append(dashboard.figure(view_id))
            except Exception:
                logger.exception("Error rendering view", extra={"view_id": view_id})
                figures.append(
                    _error_figure(
                        "The app hit an unexpected error. "
                        "If this keeps happening, grab the logs and open an issue."
                    )
                )
        return figures if len(figures) > 1 else figures[0]

    # ---------------------------------------------------------
    # Status Bar (Pure UI reflection of State)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.STATUS_BAR, "children"),
        Input(IDs.Store.FILTER_STATE, "data"),
    )
    def update_status_bar(fs_data):
        selection = try_parse_selection(fs_data)
        if selection is None:
            return html.Span([html.Strong("Status: "), "No selection"])

        countries = sorted(selection.countries)
        country_label = ", ".join(countries[:3]) + (f" (+{len(countries) - 3})" if len(countries) > 3 else "")

        return html.Span(
            [
                html.Strong("Countries: "), country_label, " • ",
                html.Strong("Year: "), str(selection.year), " • ",
                html.Strong("Map: "), dashboard.context.attributes.label(selection.attribute),
            ]
        )
