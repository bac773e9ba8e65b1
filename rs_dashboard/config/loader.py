from __future__ import annotations

import json
import logging
from pathlib import Path

from rs_dashboard.config.model import AttributeCatalog, GlobalConfig
from rs_dashboard.core.exceptions import ConfigError
from rs_dashboard.core.sources import is_url

logger = logging.getLogger(__name__)


def _resolve_source(raw: str, root: Path) -> str:
    """
    URLs are kept as-is; relative paths are resolved against the config root.
    """
    if is_url(raw):
        return raw
    path = Path(raw)
    if not path.is_absolute():
        path = (root / path).resolve()
    return str(path)


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory.

    Expected structure:

        root/
            global.json

    global.json keys:

    - ui_title: title for UI, defaults to 'European Road Safety'
    - data_source: path or URL of the dataset JSON (required)
    - geo_source: path or URL of the GeoJSON boundaries (required)
    - initial_attribute: indicator the choropleth opens on
    - attributes: {code: label}; defaults to the built-in labels
    - playback_interval_ms: time-slider playback step
    - fetch_timeout: seconds allowed per remote fetch

    :param root: Directory containing 'global.json'.
    :return: A GlobalConfig instance.
    :raises FileNotFoundError: if global.json does not exist.
    :raises ConfigError: if global.json is malformed or incomplete.
    """
    root = Path(root)
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise FileNotFoundError(f"File not found at {global_path}")

    try:
        with global_path.open(encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    missing = [key for key in ("data_source", "geo_source") if not raw.get(key)]
    if missing:
        raise ConfigError(f"Missing required key(s) in {global_path}: {', '.join(missing)}")

    labels = raw.get("attributes")
    if labels is None:
        attributes = AttributeCatalog.default()
    elif isinstance(labels, dict):
        attributes = AttributeCatalog.from_mapping(labels)
    else:
        raise ConfigError("'attributes' must map attribute codes to labels")

    initial_attribute = raw.get("initial_attribute", "fatal_pc_km")
    if initial_attribute not in attributes:
        raise ConfigError(f"initial_attribute '{initial_attribute}' is not a known attribute")

    try:
        playback_interval_ms = int(raw.get("playback_interval_ms", 1000))
        fetch_timeout = float(raw.get("fetch_timeout", 30.0))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting in {global_path}: {e}") from e

    return GlobalConfig(
        ui_title=raw.get("ui_title", "European Road Safety"),
        data_source=_resolve_source(raw["data_source"], root),
        geo_source=_resolve_source(raw["geo_source"], root),
        attributes=attributes,
        initial_attribute=initial_attribute,
        playback_interval_ms=playback_interval_ms,
        fetch_timeout=fetch_timeout,
        config_root=root,
    )
