import pytest

from rs_dashboard.core.base_view import ViewContext
from rs_dashboard.core.coordination_bus import COUNTRY_HOVERED, CoordinationBus, HighlightEvent
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.record import Record
from rs_dashboard.views.scatter_view import DIMMED_OPACITY, ScatterView


def _make_view():
    # y = 2x for every complete point; Italy has no GDP
    records = [
        Record(country="France", year=2000, cgdp=1.0, fatal_pc_km=2.0),
        Record(country="France", year=2001, cgdp=2.0, fatal_pc_km=4.0),
        Record(country="Spain", year=2000, cgdp=3.0, fatal_pc_km=6.0),
        Record(country="Italy", year=2000, fatal_pc_km=1.0),
    ]
    return ScatterView(ViewContext(records=records))


def test_compute_data_drops_incomplete_points_and_fits_trend():
    view = _make_view()

    data = view.compute_data(FilterSelection())

    assert len(data) == 3
    assert set(data.points["country"]) == {"France", "Spain"}
    assert data.regression.slope == pytest.approx(2.0)


def test_compute_data_uses_selected_axes():
    view = _make_view()

    data = view.compute_data(FilterSelection(x_key="fatal_pc_km", y_key="cgdp"))

    assert data.x_key == "fatal_pc_km"
    assert data.regression.slope == pytest.approx(0.5)


def test_figure_has_one_trace_per_country_plus_trend():
    view = _make_view()

    fig = view.update(FilterSelection())
    fig = view.update(FilterSelection())

    assert [trace.name for trace in fig.data] == ["France", "Spain", "Trend"]


def test_single_point_has_no_trend_line():
    view = _make_view()

    fig = view.update(FilterSelection(countries=frozenset({"Spain"})))

    assert [trace.name for trace in fig.data] == ["Spain"]


def test_country_hover_dims_other_countries():
    view = _make_view()
    bus = CoordinationBus()
    view.attach(bus)
    view.update(FilterSelection())

    bus.publish(COUNTRY_HOVERED, HighlightEvent(country="Spain"))
    fig = view.figure()

    opacity = {trace.name: trace.marker.opacity for trace in fig.data if trace.name != "Trend"}
    assert opacity == {"France": DIMMED_OPACITY, "Spain": 1.0}

    bus.publish(COUNTRY_HOVERED, HighlightEvent(active=False))
    assert all(t.marker.opacity == 1.0 for t in view.figure().data if t.name != "Trend")
