from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import AggregateRow
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.coordination_bus import COUNTRY_HOVERED
from rs_dashboard.core.filter_state import FilterSelection, MetricPair
from rs_dashboard.core.geo import resolve_country


@dataclass(frozen=True)
class MetricPairSpec:
    left_key: str
    right_key: str
    left_label: str
    right_label: str
    title: str


METRIC_PAIRS: Dict[MetricPair, MetricPairSpec] = {
    MetricPair.FATAL_VS_PASSENGER_KM: MetricPairSpec(
        left_key="fatal_pc_km",
        right_key="p_km",
        left_label="Fatalities per Km",
        right_label="Passenger Km",
        title="Fatalities per Km vs. Passenger Km",
    ),
    MetricPair.INVESTMENT_VS_ACCIDENTS: MetricPairSpec(
        left_key="accid_adj_pc_km",
        right_key="croad_inv_km",
        left_label="Accidents per Km",
        right_label="Investment per Km (€)",
        title="Investment vs. Accidents (Per Km)",
    ),
}

METRIC_PAIR_OPTIONS = [
    {"label": "Fatalities vs. Passenger Km", "value": MetricPair.FATAL_VS_PASSENGER_KM.value},
    {"label": "Investment vs. Accidents", "value": MetricPair.INVESTMENT_VS_ACCIDENTS.value},
]


@dataclass(frozen=True)
class BidirectionalData:
    spec: MetricPairSpec
    rows: List[AggregateRow]

    def __len__(self) -> int:
        return len(self.rows)


class BidirectionalView(BaseView):
    """
    Diverging bar chart: per-country means of two opposing metrics, one
    growing left and one growing right, each on its own scale.
    """

    id = "bidirectional"
    label = "Bidirectional Comparison"
    channels = (COUNTRY_HOVERED,)

    def __init__(self, context):
        super().__init__(context)
        self.hovered_country: Optional[str] = None

    def on_event(self, channel: str, payload: Any) -> None:
        if payload is None or not payload.active:
            self.hovered_country = None
            return
        known = {row["country"] for row in (self._data.rows if self._data else [])}
        self.hovered_country = resolve_country(payload.country, known)

    def compute_data(self, selection: FilterSelection) -> BidirectionalData:
        spec = METRIC_PAIRS[selection.metric_pair]
        rows = aggregator.group_mean_by_country(
            self.filtered_records(selection),
            spec.left_key,
            spec.right_key,
            decimals=2,
        )
        return BidirectionalData(spec=spec, rows=rows)

    def render_figure(self, data: BidirectionalData, selection: FilterSelection) -> go.Figure:
        spec = data.spec
        countries = [row["country"] for row in data.rows]
        if self.hovered_country is None:
            opacity = [1.0] * len(countries)
        else:
            opacity = [1.0 if c == self.hovered_country else 0.4 for c in countries]

        fig = make_subplots(
            rows=1,
            cols=2,
            shared_yaxes=True,
            horizontal_spacing=0.02,
            column_titles=(spec.left_label, spec.right_label),
        )
        fig.add_trace(
            go.Bar(
                y=countries,
                x=[row[spec.left_key] for row in data.rows],
                orientation="h",
                name=spec.left_label,
                marker=dict(color="crimson", opacity=opacity),
                hovertemplate="<b>%{y}</b><br>" + spec.left_label + ": %{x}<extra></extra>",
            ),
            row=1,
            col=1,
        )
        fig.add_trace(
            go.Bar(
                y=countries,
                x=[row[spec.right_key] for row in data.rows],
                orientation="h",
                name=spec.right_label,
                marker=dict(color="royalblue", opacity=opacity),
                hovertemplate="<b>%{y}</b><br>" + spec.right_label + ": %{x}<extra></extra>",
            ),
            row=1,
            col=2,
        )

        fig.update_xaxes(autorange="reversed", row=1, col=1)
        fig.update_yaxes(autorange="reversed", title_text="Country", row=1, col=1)
        fig.update_layout(
            title=spec.title,
            height=max(400, 22 * len(countries) + 150),
            margin=dict(l=40, r=40, t=80, b=40),
            showlegend=False,
            bargap=0.2,
        )
        return fig
