from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from rs_dashboard.ui.layout.build_filter_panel import build_filter_panel
from rs_dashboard.ui.layout.build_map_panel import build_map_panel
from rs_dashboard.ui.layout.build_navbar import build_navbar
from rs_dashboard.ui.layout.build_plot_panel import build_plot_panel
from rs_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

# Chart heights, by view id
PLOT_HEIGHTS = {
    "heatmap": "600px",
    "dual_perspective": "520px",
    "scatter": "700px",
    "bidirectional": "650px",
    "line_charts": "400px",
}


def build_layout(ctx: AppConfig):
    if ctx.dashboard is None:
        return build_error_layout(ctx, ctx.load_error or "The dashboard could not be started.")

    navbar = build_navbar(ctx.global_config)
    dashboard = ctx.dashboard
    plot_panels = [
        build_plot_panel(view.id, view.label, height=PLOT_HEIGHTS.get(view.id, "500px"))
        for view in dashboard.views.values()
        if view.id != "choropleth"
    ]
    if "choropleth" in dashboard.views:
        plot_panels.append(build_map_panel(dashboard, ctx.global_config.playback_interval_ms))

    return dbc.Container(
        fluid=True,
        className="rs-root",
        children=[
            navbar,

            # App-level stores
            dcc.Store(id=IDs.Store.FILTER_STATE, data=dashboard.selection.to_dict()),
            dcc.Store(id=IDs.Store.REFRESH, data={"rev": 0, "views": list(dashboard.views)}),

            dbc.Row(
                [
                    dbc.Col(build_filter_panel(dashboard), md=3, className="mt-3"),
                    dbc.Col(plot_panels, md=9, className="mt-3"),
                ],
                className="gx-3",
            ),
        ],
    )


def build_error_layout(ctx: AppConfig, message: str):
    """
    Shown in place of the dashboard when the data could not be loaded.
    """
    return dbc.Container(
        fluid=True,
        className="rs-root",
        children=[
            build_navbar(ctx.global_config),
            dbc.Alert(
                [
                    html.H4("Failed to load data", className="alert-heading"),
                    html.P(message),
                    html.Hr(),
                    html.P(
                        "Check the data_source and geo_source entries in global.json, then restart the app.",
                        className="mb-0",
                    ),
                ],
                color="danger",
                className="mt-4",
            ),
        ],
    )
