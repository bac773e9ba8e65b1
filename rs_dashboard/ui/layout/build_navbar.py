from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from rs_dashboard.config.model import GlobalConfig
from rs_dashboard.ui.ids import IDs


def build_navbar(global_config: GlobalConfig) -> dbc.Navbar:
    title = getattr(global_config, "ui_title", "European Road Safety")
    subtitle = getattr(global_config, "subtitle", "Coordinated views of road-safety indicators, 2010 onwards")

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(title, className="mb-0"),
                        html.Small(subtitle, className="text-muted", id="navbar-subtitle"),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    id=IDs.Control.STATUS_BAR,
                    className="ms-auto text-muted small",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm rs-navbar",
    )
