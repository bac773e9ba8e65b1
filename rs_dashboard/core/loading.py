from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional

from . import record_store
from .exceptions import DataLoadError
from .geo import GeoBoundaries, load_geojson
from .record import Record
from .sources import DEFAULT_TIMEOUT, JsonSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardData:
    records: List[Record]
    geo: GeoBoundaries


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of the startup load: either data, or a message the UI shows in
    place of the dashboard.
    """

    data: Optional[DashboardData] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.data is not None


def load_dashboard_data(
    data_source: JsonSource,
    geo_source: JsonSource,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> DashboardData:
    """
    Fetch the dataset and the boundary file concurrently and wait for both.
    Nothing is returned unless both succeed.

    :raises DataLoadError: if either source fails
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="rs-load") as pool:
        records_future = pool.submit(record_store.load, data_source, timeout=timeout)
        geo_future = pool.submit(load_geojson, geo_source, timeout=timeout)

        records = records_future.result()
        geo = geo_future.result()

    if not records:
        raise DataLoadError("The dataset contains no usable rows")

    return DashboardData(records=records, geo=geo)


def try_load_dashboard_data(
    data_source: JsonSource,
    geo_source: JsonSource,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> LoadResult:
    try:
        data = load_dashboard_data(data_source, geo_source, timeout=timeout)
    except DataLoadError as e:
        logger.error(
            "Dashboard data failed to load",
            extra={"data_source": str(data_source), "geo_source": str(geo_source), "error": str(e)},
        )
        return LoadResult(error=str(e))
    return LoadResult(data=data)
