from __future__ import annotations

from typing import List, Optional

import dash_bootstrap_components as dbc
from dash import dcc, html

from rs_dashboard.ui.ids import graph_id


def build_plot_panel(view_id: str, label: str, height: str = "500px", footer: Optional[List] = None,
                     header_extra: Optional[List] = None) -> dbc.Card:
    return dbc.Card(
        [
            dbc.CardHeader(
                html.Div(
                    [html.Strong(label), *(header_extra or [])],
                    className="d-flex align-items-center",
                ),
                className="p-2",
            ),
            dbc.CardBody(
                [
                    dcc.Loading(
                        id=f"{graph_id(view_id)}-loading",
                        type="default",
                        delay_show=500,
                        children=dcc.Graph(
                            id=graph_id(view_id),
                            style={"height": height},
                            config={"responsive": True},
                            clear_on_unhover=True,
                        ),
                    ),
                    *(footer or []),
                ],
            ),
        ],
        className="rs-chartcard mb-3",
    )
