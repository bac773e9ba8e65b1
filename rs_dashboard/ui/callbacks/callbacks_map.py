from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, exceptions, no_update

from rs_dashboard.ui.callbacks.callbacks_utils import refresh_payload
from rs_dashboard.ui.ids import IDs
from rs_dashboard.ui.layout.build_map_panel import build_map_panel_controls

if TYPE_CHECKING:
    from rs_dashboard.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_map_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    dashboard = ctx.dashboard
    if "choropleth" not in dashboard.views:
        return
    choropleth = dashboard.view("choropleth")

    # ---------------------------------------------------------
    # Per-panel attribute; panel 0 drives the shared selection
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.FILTER_STATE, "data", allow_duplicate=True),
        Output(IDs.Store.REFRESH, "data", allow_duplicate=True),
        Input({"type": IDs.Pattern.MAP_ATTRIBUTE, "index": ALL}, "value"),
        prevent_initial_call=True,
    )
    def change_map_attribute(_values):
        primary_changed = False
        panels_changed = False

        for item in dash.ctx.inputs_list[0]:
            index, code = item["id"]["index"], item.get("value")
            if code is None or index >= len(choropleth.panels):
                continue
            if index == 0:
                if code != dashboard.selection.attribute:
                    dashboard.filter_state.set_attribute(code)
                    primary_changed = True
            elif choropleth.panels[index] != code:
                choropleth.set_panel_attribute(index, code)
                panels_changed = True

        if primary_changed:
            return dashboard.selection.to_dict(), refresh_payload(dashboard.views)
        if panels_changed:
            return no_update, refresh_payload([choropleth.id])
        raise exceptions.PreventUpdate

    # ---------------------------------------------------------
    # Add / close map panels
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.MAP_PANEL_CONTROLS, "children"),
        Output(IDs.Store.REFRESH, "data", allow_duplicate=True),
        Input(IDs.Control.ADD_PANEL_BTN, "n_clicks"),
        Input({"type": IDs.Pattern.MAP_REMOVE, "index": ALL}, "n_clicks"),
        prevent_initial_call=True,
    )
    def change_map_panels(_add_clicks, _remove_clicks):
        triggered_id = dash.ctx.triggered_id

        if triggered_id == IDs.Control.ADD_PANEL_BTN:
            choropleth.add_panel()
        elif isinstance(triggered_id, dict):
            # Rebuilt close buttons report n_clicks=None; only real clicks count
            if not dash.ctx.triggered[0].get("value"):
                raise exceptions.PreventUpdate
            if not choropleth.remove_panel(triggered_id["index"]):
                raise exceptions.PreventUpdate
        else:
            raise exceptions.PreventUpdate

        logger.info("map_panels_changed", extra={"panels": list(choropleth.panels)})
        controls = build_map_panel_controls(
            choropleth.panels,
            dashboard.context.attributes,
            choropleth.panel_width_percent(),
        )
        return controls, refresh_payload([choropleth.id])
