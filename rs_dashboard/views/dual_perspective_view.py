from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from rs_dashboard.core import aggregator, record_store
from rs_dashboard.core.aggregator import AggregateRow, PivotTable
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.coordination_bus import HIGHLIGHT, UNHIGHLIGHT
from rs_dashboard.core.filter_state import FilterSelection


@dataclass(frozen=True)
class DualPerspectiveData:
    time_series: List[AggregateRow]
    low_investment: PivotTable
    threshold: Optional[float]

    def __len__(self) -> int:
        return len(self.time_series)


class DualPerspectiveView(BaseView):
    """
    Two facets of road investment vs. safety, side by side.

    - left: yearly mean investment (bars) with yearly mean fatality rate on a
      second axis (line)
    - right: fatality rate of the country-years whose investment is below the
      median, with every country kept as a row even when it never falls below
    """

    id = "dual_perspective"
    label = "Investment vs. Safety"
    channels = (HIGHLIGHT, UNHIGHLIGHT)

    bar_key = "croad_inv_km"
    line_key = "fatal_pc_km"

    def __init__(self, context):
        super().__init__(context)
        self.highlighted_year: Optional[int] = None

    def on_event(self, channel: str, payload: Any) -> None:
        if channel == HIGHLIGHT:
            self.highlighted_year = getattr(payload, "year", payload)
        elif channel == UNHIGHLIGHT:
            self.highlighted_year = None

    def compute_data(self, selection: FilterSelection) -> DualPerspectiveData:
        records = self.filtered_records(selection)

        time_series = aggregator.group_mean_by_year(records, self.bar_key, self.line_key)
        split = aggregator.median_threshold_split(records, self.bar_key)
        low_investment = aggregator.backfill_rows(
            aggregator.pivot(split.below, self.line_key),
            record_store.countries(records),
        )
        return DualPerspectiveData(
            time_series=time_series,
            low_investment=low_investment,
            threshold=split.threshold,
        )

    def render_figure(self, data: DualPerspectiveData, selection: FilterSelection) -> go.Figure:
        fig = make_subplots(
            rows=1,
            cols=2,
            specs=[[{"secondary_y": True}, {}]],
            subplot_titles=(
                "Positive facet: road investment & safety over time",
                "Negative facet: insufficient investment & fatality rates",
            ),
            horizontal_spacing=0.12,
        )

        years = [row["year"] for row in data.time_series]
        if self.highlighted_year is None:
            bar_opacity = [1.0] * len(years)
        else:
            bar_opacity = [1.0 if y == self.highlighted_year else 0.3 for y in years]

        fig.add_trace(
            go.Bar(
                x=years,
                y=[row[self.bar_key] for row in data.time_series],
                name=self.attributes.label(self.bar_key),
                marker=dict(color="skyblue", opacity=bar_opacity),
            ),
            row=1,
            col=1,
            secondary_y=False,
        )
        fig.add_trace(
            go.Scatter(
                x=years,
                y=[row[self.line_key] for row in data.time_series],
                name=self.attributes.label(self.line_key),
                mode="lines+markers",
                line=dict(color="red"),
                marker=dict(size=8),
            ),
            row=1,
            col=1,
            secondary_y=True,
        )

        countries, cols, z = aggregator.pivot_matrix(data.low_investment)
        fig.add_trace(
            go.Heatmap(
                z=z,
                x=[str(c) for c in cols],
                y=countries,
                colorscale="Reds",
                hoverongaps=False,
                showscale=True,
                colorbar=dict(x=1.02),
                name="Low investment",
                hovertemplate="%{y} %{x}: %{z:.2f}<extra></extra>",
            ),
            row=1,
            col=2,
        )

        fig.update_xaxes(title_text="Year", row=1, col=1)
        fig.update_yaxes(title_text="Mean road investment (€ per km)", row=1, col=1, secondary_y=False)
        fig.update_yaxes(title_text="Mean fatality rate", row=1, col=1, secondary_y=True)
        fig.update_yaxes(autorange="reversed", row=1, col=2)
        fig.update_layout(
            height=550,
            margin=dict(l=40, r=40, t=60, b=40),
            showlegend=True,
            legend=dict(orientation="h", y=-0.15),
        )
        return fig
