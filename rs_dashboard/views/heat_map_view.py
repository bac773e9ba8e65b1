from __future__ import annotations

import plotly.graph_objects as go

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import PivotTable
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.filter_state import FilterSelection


class HeatmapView(BaseView):
    """
    Country x year grid of mean fatalities per billion passenger-km.
    """

    id = "heatmap"
    label = "Heatmap"
    value_key = "fatal_pc_km"
    title = "Road Safety Comparison Across Countries and Years"

    def compute_data(self, selection: FilterSelection) -> PivotTable:
        return aggregator.pivot(self.filtered_records(selection), self.value_key)

    def render_figure(self, data: PivotTable, selection: FilterSelection) -> go.Figure:
        countries, years, z = aggregator.pivot_matrix(data)

        fig = go.Figure(
            go.Heatmap(
                z=z,
                x=[str(y) for y in years],
                y=countries,
                colorscale="YlOrRd",
                hoverongaps=False,
                texttemplate="%{z:.1f}",
                colorbar=dict(title=self.attributes.label(self.value_key)),
                hovertemplate="%{y} %{x}: %{z:.2f}<extra></extra>",
            )
        )
        fig.update_yaxes(autorange="reversed")
        fig.update_layout(
            title=f"{self.title}<br><sup>{self.attributes.label(self.value_key)}</sup>",
            xaxis_title="Year",
            yaxis_title="Country",
            height=600,
            margin=dict(l=40, r=40, t=80, b=40),
        )
        return fig
