from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, exceptions

from rs_dashboard.core.coordination_bus import YEAR_CHANGED
from rs_dashboard.ui.callbacks.callbacks_utils import refresh_payload, views_on
from rs_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)

PLAY_LABEL = "▶ Play"
PAUSE_LABEL = "⏸ Pause"


def register_playback_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    dashboard = ctx.dashboard
    if "choropleth" not in dashboard.views:
        return

    # ---------------------------------------------------------
    # Play button toggles; the interval drives one step per tick
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.PLAY_INTERVAL, "disabled"),
        Output(IDs.Control.PLAY_BTN, "children"),
        Output(IDs.Control.YEAR_SLIDER, "value"),
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Output(IDs.Store.REFRESH, "data", allow_duplicate=True),
        Input(IDs.Control.PLAY_BTN, "n_clicks"),
        Input(IDs.Control.PLAY_INTERVAL, "n_intervals"),
        prevent_initial_call=True,
    )
    def drive_playback(_clicks, _n_intervals):
        triggered_id = dash.ctx.triggered_id
        choropleth = dashboard.view("choropleth")
        year_before = dashboard.selection.year

        if triggered_id == IDs.Control.PLAY_BTN:
            if choropleth.playing:
                dashboard.stop()
                running = False
            else:
                running = dashboard.play()
        elif triggered_id == IDs.Control.PLAY_INTERVAL:
            running = dashboard.tick()
        else:
            raise exceptions.PreventUpdate

        selection = dashboard.selection
        views = views_on(dashboard, YEAR_CHANGED) if selection.year != year_before else []
        return (
            not running,
            PAUSE_LABEL if running else PLAY_LABEL,
            selection.year,
            selection.to_dict(),
            refresh_payload(views),
        )
