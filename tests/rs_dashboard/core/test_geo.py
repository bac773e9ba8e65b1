import pytest

from rs_dashboard.core.exceptions import DataLoadError
from rs_dashboard.core.geo import GeoBoundaries, load_geojson, resolve_country


def _make_geojson(*names):
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": {"NAME": n}, "geometry": None} for n in names
        ],
    }


def test_resolve_country_exact_then_lowercase():
    known = {"France", "spain"}

    assert resolve_country("France", known) == "France"
    assert resolve_country("Spain", known) == "spain"
    assert resolve_country("Italy", known) is None


def test_boundaries_names_skip_unnamed_features():
    raw = _make_geojson("France", "Spain")
    raw["features"].append({"type": "Feature", "properties": {}, "geometry": None})

    boundaries = GeoBoundaries.from_geojson(raw)

    assert boundaries.names() == ["France", "Spain"]
    assert len(boundaries.features) == 3


@pytest.mark.parametrize("raw", [[], {"type": "Feature"}, {"type": "FeatureCollection", "features": None}])
def test_boundaries_reject_non_feature_collections(raw):
    with pytest.raises(DataLoadError):
        GeoBoundaries.from_geojson(raw)


def test_load_geojson_from_parsed_document():
    boundaries = load_geojson(_make_geojson("France"))

    assert boundaries.names() == ["France"]


def test_resolve_country_non_string_name_is_no_data():
    assert resolve_country(42, {"France"}) is None
    assert resolve_country(None, {"France"}) is None


def test_boundaries_skip_non_string_names():
    raw = _make_geojson("France", 42)
    raw["features"].append({"type": "Feature", "properties": None, "geometry": None})

    boundaries = GeoBoundaries.from_geojson(raw)

    assert boundaries.names() == ["France"]


@pytest.mark.parametrize("feature", [None, "France", 3])
def test_boundaries_reject_non_object_features(feature):
    raw = _make_geojson("France")
    raw["features"].append(feature)

    with pytest.raises(DataLoadError, match="not objects"):
        GeoBoundaries.from_geojson(raw)
