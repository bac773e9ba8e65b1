from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from rs_dashboard.config.loader import load_global_config
from rs_dashboard.core.dashboard import Dashboard, default_registry
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.loading import try_load_dashboard_data
from rs_dashboard.ui.callbacks.callbacks_filters import register_filter_callbacks
from rs_dashboard.ui.callbacks.callbacks_map import register_map_callbacks
from rs_dashboard.ui.callbacks.callbacks_playback import register_playback_callbacks
from rs_dashboard.ui.callbacks.callbacks_render import register_render_callbacks
from rs_dashboard.ui.callbacks.callbacks_sync import register_sync_callbacks
from rs_dashboard.ui.layout.build_layout import build_layout

from .config import AppConfig

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config = load_global_config(config_root)

    # 2) Load dataset + boundaries (both or nothing)
    result = try_load_dashboard_data(
        global_config.data_source,
        global_config.geo_source,
        timeout=global_config.fetch_timeout,
    )

    # 3) App Context
    ctx = AppConfig(config_root=config_root, global_config=global_config, load_error=result.error)

    if result.ok:
        ctx.dashboard = Dashboard(
            records=result.data.records,
            geo=result.data.geo,
            attributes=global_config.attributes,
            registry=default_registry(),
            initial_selection=FilterSelection(attribute=global_config.initial_attribute),
            playback_interval_ms=global_config.playback_interval_ms,
        )

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
    )
    app.title = global_config.ui_title
    app.layout = build_layout(ctx)

    if ctx.dashboard is None:
        logger.error("Starting without a dashboard", extra={"error": ctx.load_error})
        return app

    ctx.validate()

    # Register callbacks
    register_filter_callbacks(app, ctx)
    register_map_callbacks(app, ctx)
    register_playback_callbacks(app, ctx)
    register_sync_callbacks(app, ctx)
    register_render_callbacks(app, ctx)

    return app
