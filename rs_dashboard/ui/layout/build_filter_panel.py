from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from rs_dashboard.core.dashboard import Dashboard
from rs_dashboard.ui.helpers import axis_options, country_options
from rs_dashboard.ui.ids import IDs
from rs_dashboard.views.bidirectional_view import METRIC_PAIR_OPTIONS
from rs_dashboard.views.scatter_view import X_OPTIONS, Y_OPTIONS


def build_filter_panel(dashboard: Dashboard) -> dbc.Card:
    selection = dashboard.selection
    attributes = dashboard.context.attributes

    return dbc.Card(
        [
            dbc.CardHeader("Filters", className="fw-semibold"),
            dbc.CardBody(
                [
                    html.Label("Countries", className="form-label"),
                    dcc.Checklist(
                        id=IDs.Control.COUNTRY_CHECKLIST,
                        options=country_options(dashboard.countries()),
                        value=sorted(selection.countries),
                        inputClassName="me-1",
                        labelClassName="d-block",
                        className="rs-country-list mb-3",
                        style={"maxHeight": "320px", "overflowY": "auto"},
                    ),
                    html.Hr(),
                    html.Label("Scatter X axis", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.SCATTER_X,
                        options=axis_options(X_OPTIONS, attributes),
                        value=selection.x_key,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Label("Scatter Y axis", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.SCATTER_Y,
                        options=axis_options(Y_OPTIONS, attributes),
                        value=selection.y_key,
                        clearable=False,
                        className="mb-3",
                    ),
                    html.Label("Bidirectional comparison", className="form-label"),
                    dcc.Dropdown(
                        id=IDs.Control.METRIC_SELECT,
                        options=METRIC_PAIR_OPTIONS,
                        value=selection.metric_pair.value,
                        clearable=False,
                        className="mb-3",
                    ),
                ]
            ),
        ],
        className="rs-sidebar",
    )
