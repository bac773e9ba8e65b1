from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import requests

from .exceptions import DataLoadError

logger = logging.getLogger(__name__)

JsonSource = Union[str, Path, bytes, list, dict]

DEFAULT_TIMEOUT = 30.0


def is_url(source: Any) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def read_json_source(source: JsonSource, *, timeout: float = DEFAULT_TIMEOUT) -> Any:
    """
    Resolve a JSON document from any of the forms the dashboard accepts.

    - already-parsed list/dict: returned as-is
    - bytes or a string starting with '[' / '{': parsed in place
    - http(s) URL: fetched with requests
    - anything else: treated as a filesystem path

    :raises DataLoadError: if the document cannot be fetched, read or parsed.
    """
    if isinstance(source, (list, dict)):
        return source

    if isinstance(source, bytes):
        try:
            return json.loads(source.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DataLoadError(f"Invalid JSON payload: {e}") from e

    if is_url(source):
        logger.info("Fetching JSON source", extra={"url": source})
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise DataLoadError(f"Failed to fetch {source}: {e}") from e
        except ValueError as e:
            raise DataLoadError(f"Response from {source} is not valid JSON: {e}") from e

    if isinstance(source, str) and source.lstrip().startswith(("[", "{")):
        try:
            return json.loads(source)
        except json.JSONDecodeError as e:
            raise DataLoadError(f"Invalid JSON payload: {e}") from e

    path = Path(source)
    if not path.is_file():
        raise DataLoadError(f"File not found at {path}")

    try:
        with path.open(encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DataLoadError(f"Could not read JSON from {path}: {e}") from e
