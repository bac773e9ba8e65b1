from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, exceptions, no_update

from rs_dashboard.core.coordination_bus import YEAR_CHANGED
from rs_dashboard.ui.callbacks.callbacks_utils import refresh_payload, views_on
from rs_dashboard.ui.ids import IDs

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_filter_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    dashboard = ctx.dashboard

    # ---------------------------------------------------------
    # UI -> FilterState (canonical, server side)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data"),
        Output(IDs.Store.REFRESH, "data"),
        Output(IDs.Control.COUNTRY_CHECKLIST, "value"),
        Input(IDs.Control.COUNTRY_CHECKLIST, "value"),
        Input(IDs.Control.SCATTER_X, "value"),
        Input(IDs.Control.SCATTER_Y, "value"),
        Input(IDs.Control.METRIC_SELECT, "value"),
        Input(IDs.Control.YEAR_SLIDER, "value"),
        prevent_initial_call=True,
    )
    def sync_filter_state_from_ui(countries, x_key, y_key, metric_pair, year):
        triggered_id = dash.ctx.triggered_id
        filter_state = dashboard.filter_state
        before = filter_state.get()

        try:
            if triggered_id == IDs.Control.COUNTRY_CHECKLIST:
                filter_state.set_countries(countries or [])
            elif triggered_id in (IDs.Control.SCATTER_X, IDs.Control.SCATTER_Y):
                filter_state.set_axes(x_key, y_key)
            elif triggered_id == IDs.Control.METRIC_SELECT:
                filter_state.set_metric_pair(metric_pair)
            elif triggered_id == IDs.Control.YEAR_SLIDER and year is not None:
                filter_state.set_year(year)
            else:
                raise exceptions.PreventUpdate
        except ValueError:
            logger.exception("Rejected filter change", extra={"control": triggered_id})
            raise exceptions.PreventUpdate

        after = filter_state.get()

        # The checklist is always rewritten so "Show All" rules show up in the UI
        checklist = sorted(after.countries) if triggered_id == IDs.Control.COUNTRY_CHECKLIST else no_update

        if after == before:
            return no_update, no_update, checklist

        if after == replace(before, year=after.year):
            views = views_on(dashboard, YEAR_CHANGED)
        else:
            views = list(dashboard.views)

        logger.info("filter_change", extra={"control": triggered_id, "selection": after.to_dict()})
        return after.to_dict(), refresh_payload(views), checklist
