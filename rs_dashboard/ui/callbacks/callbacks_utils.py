from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from rs_dashboard.core.dashboard import Dashboard
from rs_dashboard.core.filter_state import FilterSelection

logger = logging.getLogger(__name__)

_revisions = itertools.count(1)


def refresh_payload(view_ids: Iterable[str]) -> Dict[str, Any]:
    """
    Data for the refresh store: a fresh revision so the store always changes,
    plus the views whose figures must be redrawn.
    """
    return {"rev": next(_revisions), "views": sorted(set(view_ids))}


def views_to_redraw(refresh: Optional[Dict[str, Any]], view_ids: Sequence[str]) -> List[str]:
    """
    Views named by a refresh payload. An empty list means nothing to redraw;
    only a missing payload (the initial call) redraws every view.
    """
    if not refresh or "views" not in refresh:
        return list(view_ids)
    requested = set(refresh["views"] or [])
    return [view_id for view_id in view_ids if view_id in requested]


def views_on(dashboard: Dashboard, *channels: str) -> List[str]:
    """Ids of the views subscribed to any of the channels."""
    return [view.id for view in dashboard.views.values() if set(view.channels) & set(channels)]


def try_parse_selection(data: object) -> Optional[FilterSelection]:
    if not isinstance(data, dict) or not data:
        return None
    try:
        return FilterSelection.from_dict(data)
    except (KeyError, TypeError, ValueError):
        logger.exception("Invalid filter-state: %r", data)
        return None
