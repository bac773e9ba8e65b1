from __future__ import annotations

from typing import Any, List, Optional

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import AggregateRow
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.coordination_bus import HIGHLIGHT, UNHIGHLIGHT
from rs_dashboard.core.filter_state import FilterSelection

# (value key, line colour)
LINE_SERIES = (
    ("fatal_pc_km", "red"),
    ("accid_adj_pc_km", "purple"),
    ("croad_inv_km", "blue"),
)

DIMMED_OPACITY = 0.2


class LineChartsView(BaseView):
    """
    Small multiples of yearly trends. With no country filter each line is
    the mean over all countries ("Overall"); otherwise the mean over the
    selected countries, which for a single country is its own series.
    Hovering a year highlights that year in every chart.
    """

    id = "line_charts"
    label = "Trends Over Time"
    channels = (HIGHLIGHT, UNHIGHLIGHT)

    def __init__(self, context):
        super().__init__(context)
        self.highlighted_year: Optional[int] = None

    def on_event(self, channel: str, payload: Any) -> None:
        if channel == HIGHLIGHT:
            self.highlighted_year = getattr(payload, "year", payload)
        elif channel == UNHIGHLIGHT:
            self.highlighted_year = None

    def compute_data(self, selection: FilterSelection) -> List[AggregateRow]:
        keys = [key for key, _ in LINE_SERIES]
        return aggregator.group_mean_by_year(self.filtered_records(selection), *keys)

    def _scope_label(self, selection: FilterSelection) -> str:
        if selection.show_all:
            return "Overall"
        return ", ".join(sorted(selection.countries))

    def render_figure(self, data: List[AggregateRow], selection: FilterSelection) -> go.Figure:
        years = [row["year"] for row in data]
        if self.highlighted_year is None:
            opacity = [1.0] * len(years)
        else:
            opacity = [1.0 if y == self.highlighted_year else DIMMED_OPACITY for y in years]

        fig = make_subplots(
            rows=1,
            cols=len(LINE_SERIES),
            subplot_titles=[self.attributes.label(key) for key, _ in LINE_SERIES],
            horizontal_spacing=0.08,
        )

        for idx, (key, color) in enumerate(LINE_SERIES, start=1):
            fig.add_trace(
                go.Scatter(
                    x=years,
                    y=[row[key] for row in data],
                    mode="lines+markers",
                    name=key,
                    uid=f"line-{key}",
                    line=dict(color=color, width=2, shape="spline"),
                    marker=dict(size=8, color=color, opacity=opacity),
                    connectgaps=False,
                    hovertemplate="Year: %{x}<br>" + key + ": %{y:.2f}<extra></extra>",
                ),
                row=1,
                col=idx,
            )
            fig.update_xaxes(title_text="year", tickformat="d", row=1, col=idx)

        fig.update_layout(
            title=f"Trends over time: {self._scope_label(selection)}",
            height=380,
            showlegend=False,
            margin=dict(l=40, r=40, t=80, b=40),
        )
        return fig
