from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from rs_dashboard.core import aggregator
from rs_dashboard.core.aggregator import RegressionResult
from rs_dashboard.core.base_view import BaseView
from rs_dashboard.core.coordination_bus import COUNTRY_HOVERED
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.geo import resolve_country

X_OPTIONS = ("cgdp", "populat", "den_populat", "croad_inv_km")
Y_OPTIONS = ("fatal_pc_km", "accid_adj_pc_km", "croad_inv_km")

DIMMED_OPACITY = 0.3


@dataclass(frozen=True)
class ScatterData:
    points: pd.DataFrame
    regression: RegressionResult
    x_key: str
    y_key: str

    def __len__(self) -> int:
        return len(self.points)


class ScatterView(BaseView):
    """
    One indicator against another, one marker per country-year, with a
    least-squares trend line over the visible points.
    """

    id = "scatter"
    label = "Scatter Plot"
    channels = (COUNTRY_HOVERED,)

    def __init__(self, context):
        super().__init__(context)
        self.hovered_country: Optional[str] = None
        self._colors = dict(
            zip(
                context.countries(),
                px.colors.qualitative.D3 * (len(context.countries()) // 10 + 1),
            )
        )

    def on_event(self, channel: str, payload: Any) -> None:
        if channel != COUNTRY_HOVERED:
            return
        if payload is None or not payload.active:
            self.hovered_country = None
            return
        self.hovered_country = resolve_country(payload.country, set(self._colors))

    def compute_data(self, selection: FilterSelection) -> ScatterData:
        x_key, y_key = selection.x_key, selection.y_key
        records = [
            rec
            for rec in self.filtered_records(selection)
            if rec.value(x_key) is not None and rec.value(y_key) is not None
        ]

        points = pd.DataFrame(
            [{"country": r.country, "year": r.year, "x": r.value(x_key), "y": r.value(y_key)} for r in records],
            columns=["country", "year", "x", "y"],
        )
        regression = aggregator.linear_regression(aggregator.regression_points(records, x_key, y_key))
        return ScatterData(points=points, regression=regression, x_key=x_key, y_key=y_key)

    def render_figure(self, data: ScatterData, selection: FilterSelection) -> go.Figure:
        fig = go.Figure()

        for country, group in data.points.groupby("country", sort=True):
            if self.hovered_country is None or self.hovered_country == country:
                opacity = 1.0
            else:
                opacity = DIMMED_OPACITY
            fig.add_trace(
                go.Scatter(
                    x=group["x"],
                    y=group["y"],
                    mode="markers",
                    name=country,
                    uid=f"country-{country}",
                    customdata=group[["country", "year"]].to_numpy(),
                    marker=dict(size=10, color=self._colors.get(country), opacity=opacity),
                    hovertemplate=(
                        "Year: %{customdata[1]}<br>Country: %{customdata[0]}<br>"
                        f"{data.y_key}: " + "%{y}<extra></extra>"
                    ),
                )
            )

        if not data.regression.is_empty:
            trend = sorted(data.regression.trend, key=lambda p: p["x"])
            fig.add_trace(
                go.Scatter(
                    x=[p["x"] for p in trend],
                    y=[p["y"] for p in trend],
                    mode="lines",
                    name="Trend",
                    uid="regression-line",
                    line=dict(color="black", width=3),
                    hoverinfo="skip",
                )
            )

        fig.update_layout(
            title=f"{self.attributes.label(data.x_key)} vs. {self.attributes.label(data.y_key)}",
            xaxis_title=data.x_key,
            yaxis_title=data.y_key,
            legend_title="Country",
            height=700,
            margin=dict(l=40, r=40, t=60, b=40),
        )
        return fig
