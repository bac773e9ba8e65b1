from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Container, Dict, List, Optional

from .exceptions import DataLoadError
from .sources import DEFAULT_TIMEOUT, JsonSource, read_json_source

logger = logging.getLogger(__name__)

NAME_PROPERTY = "NAME"
FEATURE_ID_KEY = f"properties.{NAME_PROPERTY}"


def resolve_country(name: Any, known: Container[str]) -> Optional[str]:
    """
    Match a boundary name to a dataset country: exact name first, then the
    lower-cased name. None means "no data" for this shape, which is also
    what a missing or non-string name gets.
    """
    if not isinstance(name, str):
        return None
    if name in known:
        return name
    lowered = name.lower()
    if lowered in known:
        return lowered
    return None


def _feature_name(feature: Dict[str, Any]) -> Optional[str]:
    properties = feature.get("properties")
    if not isinstance(properties, dict):
        return None
    name = properties.get(NAME_PROPERTY)
    if isinstance(name, str) and name:
        return name
    return None


@dataclass(frozen=True)
class GeoBoundaries:
    """
    A GeoJSON FeatureCollection with one feature per country, keyed by
    properties.NAME.
    """

    geojson: Dict[str, Any]

    @classmethod
    def from_geojson(cls, raw: Any) -> GeoBoundaries:
        if not isinstance(raw, dict) or raw.get("type") != "FeatureCollection":
            raise DataLoadError("Boundary file must be a GeoJSON FeatureCollection")
        features = raw.get("features")
        if not isinstance(features, list):
            raise DataLoadError("Boundary file has no 'features' list")

        malformed = sum(1 for f in features if not isinstance(f, dict))
        if malformed:
            raise DataLoadError(f"Boundary file has {malformed} feature(s) that are not objects")

        unnamed = [f for f in features if _feature_name(f) is None]
        if unnamed:
            logger.warning(
                "Boundary features without a NAME are never matched",
                extra={"n_unnamed": len(unnamed)},
            )
        return cls(geojson=raw)

    @property
    def features(self) -> List[Dict[str, Any]]:
        return self.geojson["features"]

    def names(self) -> List[str]:
        names = []
        for feature in self.features:
            name = _feature_name(feature)
            if name is not None:
                names.append(name)
        return names


def load_geojson(source: JsonSource, *, timeout: float = DEFAULT_TIMEOUT) -> GeoBoundaries:
    boundaries = GeoBoundaries.from_geojson(read_json_source(source, timeout=timeout))
    logger.info("Boundaries loaded", extra={"n_features": len(boundaries.features)})
    return boundaries
