from __future__ import annotations

__all__ = ["IDs", "graph_id", "map_attribute_id", "map_remove_id"]


class IDs:
    class Store:
        FILTER_STATE = "filter-state"
        # {"rev": int, "views": [view ids to redraw]}
        REFRESH = "refresh"

    class Control:
        # Filters
        COUNTRY_CHECKLIST = "country-checklist"
        SCATTER_X = "scatter-x-select"
        SCATTER_Y = "scatter-y-select"
        METRIC_SELECT = "metric-pair-select"

        # Map panels + time slider
        MAP_PANEL_CONTROLS = "map-panel-controls"
        ADD_PANEL_BTN = "map-add-panel-btn"
        YEAR_SLIDER = "year-slider"
        PLAY_BTN = "play-btn"
        PLAY_INTERVAL = "play-interval"

        # Status bar
        STATUS_BAR = "status-bar"

    class Pattern:
        # pattern-matching "type" strings
        MAP_ATTRIBUTE = "map-attribute-select"
        MAP_REMOVE = "map-remove-panel"


def graph_id(view_id: str) -> str:
    return f"graph-{view_id}"


def map_attribute_id(index: int) -> dict:
    return {"type": IDs.Pattern.MAP_ATTRIBUTE, "index": index}


def map_remove_id(index: int) -> dict:
    return {"type": IDs.Pattern.MAP_REMOVE, "index": index}


def view_id_of(component_id: object) -> str:
    """Inverse of graph_id()."""
    return str(component_id).replace("graph-", "", 1)
