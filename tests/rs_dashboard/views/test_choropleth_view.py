import pytest

from rs_dashboard.core.aggregator import Trend
from rs_dashboard.core.base_view import ViewContext
from rs_dashboard.core.coordination_bus import COUNTRY_HOVERED, YEAR_CHANGED, CoordinationBus, HighlightEvent
from rs_dashboard.core.filter_state import FilterSelection
from rs_dashboard.core.geo import GeoBoundaries
from rs_dashboard.core.playback import PlaybackStatus
from rs_dashboard.core.record import Record
from rs_dashboard.views.choropleth_view import BASE_LINE_WIDTH, HOVER_LINE_WIDTH, ChoroplethView


def _make_view():
    """
    France and Italy match dataset countries; Malta has no data.
    Italy has no value for 2002, the last year.
    """
    records = [
        Record(country="France", year=2000, fatal_pc_km=2.0, cgdp=10.0),
        Record(country="France", year=2001, fatal_pc_km=3.0, cgdp=10.0),
        Record(country="Italy", year=2000, fatal_pc_km=4.0),
        Record(country="Italy", year=2001, fatal_pc_km=1.0),
        Record(country="Italy", year=2002),
    ]
    geo = GeoBoundaries.from_geojson(
        {
            "type": "FeatureCollection",
            "features": [
                {"type": "Feature", "properties": {"NAME": n}, "geometry": None}
                for n in ("France", "Italy", "Malta")
            ],
        }
    )
    return ChoroplethView(ViewContext(records=records, geo=geo, playback_interval_ms=10))


def test_compute_data_colours_each_shape_for_the_year():
    view = _make_view()

    data = view.compute_data(FilterSelection(year=2001))

    panel = data.panels[0]
    assert panel.attribute == "fatal_pc_km"
    assert panel.values == {"France": 3.0, "Italy": 1.0}
    assert panel.matches["Malta"] is None
    assert panel.trends == {"France": Trend.UP, "Italy": Trend.DOWN}
    assert panel.zmax == 3.0


def test_year_without_values_falls_back_to_unit_scale():
    view = _make_view()

    data = view.compute_data(FilterSelection(year=2002))

    assert data.panels[0].values == {}
    assert data.panels[0].zmax == 1.0


def test_year_changed_recolours_without_recomputing_pivots():
    view = _make_view()
    bus = CoordinationBus()
    view.attach(bus)
    view.update(FilterSelection(year=2000))
    pivot = view.pivot_for("fatal_pc_km")

    bus.publish(YEAR_CHANGED, 2001)

    assert view.year == 2001
    assert view.data.panels[0].values["France"] == 3.0
    assert view.pivot_for("fatal_pc_km") is pivot


def test_panels_add_remove_and_widths():
    view = _make_view()
    view.update(FilterSelection(year=2000))
    assert view.panel_width_percent() == 100.0

    view.add_panel("cgdp")
    assert view.panel_width_percent() == 50.0
    view.add_panel()
    assert view.panels == ["fatal_pc_km", "cgdp", "fatal_pc_km"]
    assert view.panel_width_percent() == pytest.approx(33.3)
    assert len(view.data) == 3

    assert view.remove_panel(1) is True
    assert view.panels == ["fatal_pc_km", "fatal_pc_km"]


def test_last_panel_cannot_be_removed():
    view = _make_view()
    view.update(FilterSelection(year=2000))

    assert view.remove_panel(0) is False
    assert view.panels == ["fatal_pc_km"]


def test_add_panel_rejects_unknown_attribute():
    view = _make_view()
    view.update(FilterSelection(year=2000))

    with pytest.raises(ValueError):
        view.add_panel("nope")


def test_play_stops_at_max_year():
    view = _make_view()
    view.update(FilterSelection(year=2000))

    timer = view.play()
    years = []
    while view.playing:
        years.append(view.tick())

    assert years == [2001, 2002]
    assert timer.status is PlaybackStatus.FINISHED
    assert view.year == 2002


def test_play_from_last_year_restarts_from_first():
    view = _make_view()
    view.update(FilterSelection(year=2002))

    view.play()

    assert view.year == 2000
    assert view.playing


def test_teardown_cancels_playback():
    view = _make_view()
    view.attach(CoordinationBus())
    view.update(FilterSelection(year=2000))
    timer = view.play()

    view.teardown()

    assert timer.status is PlaybackStatus.CANCELLED
    assert view.tick() is None


def test_hovered_country_gets_thicker_outline():
    view = _make_view()
    bus = CoordinationBus()
    view.attach(bus)
    view.update(FilterSelection(year=2000))

    bus.publish(COUNTRY_HOVERED, HighlightEvent(country="Italy"))
    base = view.figure().data[0]

    widths = dict(zip(base.locations, base.marker.line.width))
    assert widths == {"France": BASE_LINE_WIDTH, "Italy": HOVER_LINE_WIDTH, "Malta": BASE_LINE_WIDTH}


def test_figure_has_base_and_value_layer_per_panel():
    view = _make_view()
    view.update(FilterSelection(year=2000))
    view.add_panel("cgdp")

    fig = view.figure()

    assert len(fig.data) == 4
    assert all(trace.type == "choropleth" for trace in fig.data)
    assert "No data" in fig.data[0].text[2]
