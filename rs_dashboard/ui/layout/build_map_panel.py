from __future__ import annotations

from typing import List

import dash_bootstrap_components as dbc
from dash import dcc, html

from rs_dashboard.config.model import AttributeCatalog
from rs_dashboard.core.dashboard import Dashboard
from rs_dashboard.ui.helpers import year_marks
from rs_dashboard.ui.ids import IDs, map_attribute_id, map_remove_id
from rs_dashboard.ui.layout.build_plot_panel import build_plot_panel


def build_map_panel_controls(panels: List[str], attributes: AttributeCatalog, width_percent: float) -> List:
    """
    One attribute dropdown (and close button) per open map panel.
    """
    children = []
    for index, attribute in enumerate(panels):
        children.append(
            html.Div(
                [
                    dcc.Dropdown(
                        id=map_attribute_id(index),
                        options=attributes.options(),
                        value=attribute,
                        clearable=False,
                        className="flex-grow-1",
                    ),
                    dbc.Button(
                        "✕",
                        id=map_remove_id(index),
                        color="light",
                        size="sm",
                        className="ms-1",
                        disabled=len(panels) == 1,
                    ),
                ],
                className="d-flex align-items-center px-1",
                style={"width": f"{width_percent}%"},
            )
        )
    return children


def build_map_panel(dashboard: Dashboard, playback_interval_ms: int) -> dbc.Card:
    choropleth = dashboard.view("choropleth")
    years = dashboard.years()
    selection = dashboard.selection

    controls = html.Div(
        [
            html.Div(
                build_map_panel_controls(
                    choropleth.panels,
                    dashboard.context.attributes,
                    choropleth.panel_width_percent(),
                ),
                id=IDs.Control.MAP_PANEL_CONTROLS,
                className="d-flex flex-grow-1",
            ),
            dbc.Button(
                "+ Add map",
                id=IDs.Control.ADD_PANEL_BTN,
                color="secondary",
                size="sm",
                className="ms-2",
            ),
        ],
        className="d-flex align-items-center mb-2",
    )

    time_controls = html.Div(
        [
            dbc.Button("▶ Play", id=IDs.Control.PLAY_BTN, color="primary", size="sm", className="me-3"),
            html.Div(
                dcc.Slider(
                    id=IDs.Control.YEAR_SLIDER,
                    min=years[0] if years else 0,
                    max=years[-1] if years else 0,
                    step=1,
                    value=selection.year,
                    marks=year_marks(years),
                    updatemode="drag",
                ),
                className="flex-grow-1",
            ),
            dcc.Interval(
                id=IDs.Control.PLAY_INTERVAL,
                interval=playback_interval_ms,
                disabled=True,
            ),
        ],
        className="d-flex align-items-center mt-2",
    )

    return build_plot_panel(
        choropleth.id,
        choropleth.label,
        height="600px",
        footer=[controls, time_controls],
    )
