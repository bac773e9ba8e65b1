import json

import pytest
import requests

from rs_dashboard.core import sources
from rs_dashboard.core.exceptions import DataLoadError
from rs_dashboard.core.loading import load_dashboard_data, try_load_dashboard_data


def _write_sources(tmp_path, rows=None):
    data_path = tmp_path / "data.json"
    geo_path = tmp_path / "europe.geojson"
    rows = rows if rows is not None else [
        {"country": "France", "year": 2000, "fatal_pc_km": 2.0},
        {"country": "Spain", "year": 2001, "fatal_pc_km": 5.0},
    ]
    data_path.write_text(json.dumps(rows))
    geo_path.write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [{"type": "Feature", "properties": {"NAME": "France"}, "geometry": None}],
            }
        )
    )
    return data_path, geo_path


def test_load_dashboard_data_joins_both_sources(tmp_path):
    data_path, geo_path = _write_sources(tmp_path)

    data = load_dashboard_data(str(data_path), str(geo_path))

    assert [r.country for r in data.records] == ["France", "Spain"]
    assert data.geo.names() == ["France"]


def test_failing_boundary_source_gives_load_error(tmp_path):
    data_path, _ = _write_sources(tmp_path)

    result = try_load_dashboard_data(str(data_path), str(tmp_path / "missing.geojson"))

    assert not result.ok
    assert result.data is None
    assert "missing.geojson" in result.error


def test_dataset_without_usable_rows_is_a_load_error(tmp_path):
    data_path, geo_path = _write_sources(tmp_path, rows=[{"year": 2000}])

    with pytest.raises(DataLoadError):
        load_dashboard_data(str(data_path), str(geo_path))


def test_read_json_source_accepts_inline_forms():
    assert sources.read_json_source([1, 2]) == [1, 2]
    assert sources.read_json_source(b'{"a": 1}') == {"a": 1}
    assert sources.read_json_source('[{"a": 1}]') == [{"a": 1}]


def test_read_json_source_bad_json_file(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")

    with pytest.raises(DataLoadError):
        sources.read_json_source(str(path))


def test_read_json_source_url_failure_is_load_error(monkeypatch):
    def fake_get(url, timeout):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(sources.requests, "get", fake_get)

    with pytest.raises(DataLoadError, match="offline"):
        sources.read_json_source("https://example.org/data.json", timeout=1)


def test_read_json_source_url_success(monkeypatch):
    class FakeResponse:
        def raise_for_status(self):
            return None

        def json(self):
            return [{"country": "France"}]

    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        return FakeResponse()

    monkeypatch.setattr(sources.requests, "get", fake_get)

    assert sources.read_json_source("https://example.org/data.json", timeout=5) == [{"country": "France"}]
    assert calls == [("https://example.org/data.json", 5)]


def test_malformed_boundary_features_give_load_error():
    rows = [{"country": "France", "year": 2000, "fatal_pc_km": 2.0}]

    result = try_load_dashboard_data(rows, {"type": "FeatureCollection", "features": [None]})

    assert not result.ok
    assert "not objects" in result.error
