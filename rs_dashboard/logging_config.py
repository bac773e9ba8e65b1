from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "rs_dashboard"

# The playback interval posts a callback every tick; one access-log line per
# tick drowns everything else.
QUIET_LOGGERS = ("werkzeug",)


def _resolve_level(level: Optional[Union[int, str]]) -> int:
    if level is None:
        level = os.getenv("RS_DASHBOARD_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def configure_logging(
        level: Optional[Union[int, str]] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure the root logger for the dashboard.

    JSON records carry a constant ``service`` field, and whatever a module
    passes in ``extra`` (``view_id``, ``elapsed_ms``, ``n_records`` ...)
    becomes a top-level key.

    Level: the ``level`` argument, else RS_DASHBOARD_LOG_LEVEL, else INFO.
    Format: ``force_format`` ("json" or "plain"), else RS_DASHBOARD_LOG_FORMAT,
    else "json".
    """

    if force_format is not None:
        format_mode = force_format
    else:
        format_mode = os.getenv("RS_DASHBOARD_LOG_FORMAT", "json").lower()

    logger = logging.getLogger()
    logger.setLevel(_resolve_level(level))

    handler = logging.StreamHandler()

    if format_mode == "plain":
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
        )
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
            static_fields={"service": SERVICE_NAME},
        )

    handler.setFormatter(formatter)

    # Replace any existing handlers to avoid duplicate logs
    logger.handlers.clear()
    logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
