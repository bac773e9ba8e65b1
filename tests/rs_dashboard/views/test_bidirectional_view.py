from rs_dashboard.core.base_view import ViewContext
from rs_dashboard.core.filter_state import FilterSelection, MetricPair
from rs_dashboard.core.record import Record
from rs_dashboard.views.bidirectional_view import BidirectionalView


def _make_view():
    records = [
        Record(country="France", year=2000, fatal_pc_km=1.0, p_km=10.0, accid_adj_pc_km=5.0, croad_inv_km=100.0),
        Record(country="France", year=2001, fatal_pc_km=2.0, p_km=20.0, accid_adj_pc_km=7.0, croad_inv_km=300.0),
        Record(country="Spain", year=2000, fatal_pc_km=3.333, p_km=30.0),
    ]
    return BidirectionalView(ViewContext(records=records))


def test_compute_data_means_per_country_for_default_pair():
    view = _make_view()

    data = view.compute_data(FilterSelection())

    assert data.spec.left_key == "fatal_pc_km"
    assert data.rows == [
        {"country": "France", "fatal_pc_km": 1.5, "p_km": 15.0},
        {"country": "Spain", "fatal_pc_km": 3.33, "p_km": 30.0},
    ]


def test_switching_metric_pair():
    view = _make_view()

    data = view.compute_data(FilterSelection(metric_pair=MetricPair.INVESTMENT_VS_ACCIDENTS))

    assert data.spec.title == "Investment vs. Accidents (Per Km)"
    assert data.rows[0] == {"country": "France", "accid_adj_pc_km": 6.0, "croad_inv_km": 200.0}
    # Spain has neither metric
    assert data.rows[1] == {"country": "Spain", "accid_adj_pc_km": None, "croad_inv_km": None}


def test_figure_has_two_opposing_bar_series():
    view = _make_view()

    fig = view.update(FilterSelection())

    assert len(fig.data) == 2
    assert all(trace.type == "bar" for trace in fig.data)
    assert fig.layout.xaxis.autorange == "reversed"
