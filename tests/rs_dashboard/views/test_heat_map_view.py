import plotly.graph_objs as go

from rs_dashboard.core.base_view import ViewContext
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.record import Record
from rs_dashboard.views.heat_map_view import HeatmapView


def _make_view():
    records = [
        Record(country="France", year=2000, fatal_pc_km=2.0),
        Record(country="France", year=2001, fatal_pc_km=3.0),
        Record(country="Spain", year=2000, fatal_pc_km=5.0),
        Record(country="Italy", year=2001),
    ]
    return HeatmapView(ViewContext(records=records))


def test_heatmap_compute_data_pivots_by_country_and_year():
    view = _make_view()

    table = view.compute_data(FilterSelection())

    assert table == {"France": {2000: 2.0, 2001: 3.0}, "Italy": {}, "Spain": {2000: 5.0}}


def test_heatmap_compute_data_respects_country_filter():
    view = _make_view()

    table = view.compute_data(FilterSelection(countries=frozenset({"Spain"})))

    assert list(table) == ["Spain"]


def test_heatmap_render_figure_has_gaps_for_missing_cells():
    view = _make_view()

    fig = view.update(FilterSelection())

    assert isinstance(fig, go.Figure)
    assert len(fig.data) == 1
    heatmap = fig.data[0]
    assert list(heatmap.y) == ["France", "Italy", "Spain"]
    assert list(heatmap.x) == ["2000", "2001"]
    assert list(heatmap.z[1]) == [None, None]


def test_repeated_update_does_not_duplicate_traces():
    view = _make_view()

    view.update(FilterSelection())
    fig = view.update(FilterSelection())

    assert len(fig.data) == 1


def test_render_is_idempotent():
    view = _make_view()
    view.render(FilterSelection())
    first = view.data

    view.render(FilterSelection(countries=frozenset({"Spain"})))

    assert view.data is first


def test_empty_selection_shows_message():
    view = HeatmapView(ViewContext(records=[]))

    fig = view.update(FilterSelection())

    assert len(fig.data) == 0
    assert "No data" in fig.layout.title.text
