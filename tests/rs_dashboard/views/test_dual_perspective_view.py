from rs_dashboard.core.base_view import ViewContext
from rs_dashboard.core.coordination_bus import HIGHLIGHT, UNHIGHLIGHT, CoordinationBus, HighlightEvent
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.record import Record
from rs_dashboard.views.dual_perspective_view import DualPerspectiveView


def _make_view():
    """
    Investment 10, 20, 30, 40 -> median 25; only France 2000 and Spain 2000
    fall below it.
    """
    records = [
        Record(country="France", year=2000, croad_inv_km=10.0, fatal_pc_km=2.0),
        Record(country="Spain", year=2000, croad_inv_km=20.0, fatal_pc_km=4.0),
        Record(country="France", year=2001, croad_inv_km=30.0, fatal_pc_km=1.0),
        Record(country="Italy", year=2001, croad_inv_km=40.0, fatal_pc_km=3.0),
    ]
    return DualPerspectiveView(ViewContext(records=records))


def test_compute_data_time_series_and_low_investment_grid():
    view = _make_view()

    data = view.compute_data(FilterSelection())

    assert [row["year"] for row in data.time_series] == [2000, 2001]
    assert data.time_series[0]["croad_inv_km"] == 15.0
    assert data.threshold == 25.0
    # Italy never falls below the median but keeps its (empty) row
    assert data.low_investment == {"France": {2000: 2.0}, "Italy": {}, "Spain": {2000: 4.0}}


def test_highlight_changes_bar_opacity_without_recomputing():
    view = _make_view()
    bus = CoordinationBus()
    view.attach(bus)
    view.update(FilterSelection())
    data = view.data

    bus.publish(HIGHLIGHT, HighlightEvent(year=2001))
    fig = view.figure()

    bars = fig.data[0]
    assert list(bars.marker.opacity) == [0.3, 1.0]
    assert view.data is data

    bus.publish(UNHIGHLIGHT, HighlightEvent(active=False))
    assert list(view.figure().data[0].marker.opacity) == [1.0, 1.0]


def test_figure_has_bar_line_and_heatmap():
    view = _make_view()

    fig = view.update(FilterSelection())

    assert [trace.type for trace in fig.data] == ["bar", "scatter", "heatmap"]
