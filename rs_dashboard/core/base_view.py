from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pandas as pd
import plotly.graph_objs as go

from rs_dashboard.config.model import AttributeCatalog

from . import record_store
from .coordination_bus import CoordinationBus
from .filter_state import FilterSelection
from .geo import GeoBoundaries
from .record import Record

logger = logging.getLogger(__name__)


@dataclass
class ViewContext:
    """
    Everything a view needs besides the current selection. Passed to every
    view constructor instead of module-level globals.
    """

    records: Sequence[Record]
    attributes: AttributeCatalog = field(default_factory=AttributeCatalog.default)
    geo: Optional[GeoBoundaries] = None
    playback_interval_ms: int = 1000

    def countries(self) -> List[str]:
        return record_store.countries(self.records)

    def years(self) -> List[int]:
        return record_store.years(self.records)


class BaseView(ABC):
    """
    Abstract base class for all chart views.

    Defines the contract that every view in the app must follow
    - expose an 'id' - used internally
    - expose a 'label' - used for UI/human-readable applications
    - implement 'compute_data' - derive the chart data for a FilterSelection
    - implement 'render_figure' - turn that data into a Plotly figure
    - list the bus 'channels' it reacts to and handle them in 'on_event'

    Lifecycle:
    - render(selection): initial draw; calling it again is a no-op
    - update(selection): recompute and redraw from scratch; traces are keyed by
      country or year so repeated updates never pile up
    - figure(): redraw from the cached data with the current presentation
      state (highlights), without recomputing
    - attach(bus) / teardown(): bus subscriptions
    """

    id: str = None
    label: str = None
    channels: Tuple[str, ...] = ()

    def __init__(self, context: ViewContext):
        self.context = context
        self.records = list(context.records)
        self.attributes = context.attributes

        self._data: Any = None
        self._selection: Optional[FilterSelection] = None
        self._rendered = False
        self._unsubscribes: List[Callable[[], None]] = []

    @abstractmethod
    def compute_data(self, selection: FilterSelection) -> Any:
        """
        Compute the data given the current FilterSelection
        :param selection: the current FilterSelection
        :return: data for render_figure
        """
        raise NotImplementedError()

    @abstractmethod
    def render_figure(self, data: Any, selection: FilterSelection) -> go.Figure:
        """
        Render the figure given the computed data
        :param data: the data provided by compute_data()
        :param selection: the current FilterSelection
        :return: the Plotly figure
        """
        raise NotImplementedError()

    def on_event(self, channel: str, payload: Any) -> None:
        """
        React to a coordination bus event by changing presentation state only.
        """
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def render(self, selection: FilterSelection) -> go.Figure:
        if not self._rendered:
            self._refresh(selection)
        return self.figure()

    def update(self, selection: FilterSelection) -> go.Figure:
        self._refresh(selection)
        return self.figure()

    def figure(self) -> go.Figure:
        if not self._rendered:
            return self.empty_figure("Loading…")
        if self.is_empty(self._data):
            return self.empty_figure("No data for the current selection")
        return self.render_figure(self._data, self._selection)

    def attach(self, bus: CoordinationBus) -> None:
        for channel in self.channels:
            self._unsubscribes.append(bus.subscribe(channel, partial(self.on_event, channel)))

    def teardown(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes.clear()

    @property
    def data(self) -> Any:
        return self._data

    @property
    def selection(self) -> Optional[FilterSelection]:
        """Selection the cached data was computed for."""
        return self._selection

    def _refresh(self, selection: FilterSelection) -> None:
        self._data = self.timed_compute(selection)
        self._selection = selection
        self._rendered = True

    def timed_compute(self, selection: FilterSelection) -> Any:
        start = time.perf_counter()
        data = self.compute_data(selection)
        logger.debug(
            "view_compute",
            extra={"view_id": self.id, "elapsed_ms": round((time.perf_counter() - start) * 1000, 2)},
        )
        return data

    # ------------------------------------------------------------------
    # Common helpers for all views
    # ------------------------------------------------------------------
    def filtered_records(self, selection: FilterSelection) -> List[Record]:
        """
        Records allowed by the country filter.

        All views should call this instead of filtering directly, so if we ever
        need to change the filtering behaviour, we do it in one place.
        """
        return [r for r in self.records if selection.includes(r.country)]

    @staticmethod
    def is_empty(data: Any) -> bool:
        if data is None:
            return True
        if isinstance(data, pd.DataFrame):
            return data.empty
        try:
            return len(data) == 0
        except TypeError:
            return False

    @staticmethod
    def empty_figure(message: str) -> go.Figure:
        """
        Standardised 'no data' figure used by all views.
        """
        fig = go.Figure()
        fig.update_layout(
            title=message,
            xaxis={"visible": False},
            yaxis={"visible": False},
        )
        return fig
