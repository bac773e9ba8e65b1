from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .exceptions import DataLoadError
from .record import ATTRIBUTE_CODES, FLAG_ATTRIBUTES, ID_FIELDS, Record
from .sources import DEFAULT_TIMEOUT, JsonSource, read_json_source

logger = logging.getLogger(__name__)

RecordLike = Union[Record, Mapping[str, Any]]


# -------------------------------------------------------------------------
# Field coercion
# -------------------------------------------------------------------------
def to_float(raw: Any) -> Optional[float]:
    """
    Lenient float conversion: absent, blank, non-finite or unparsable -> None.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def to_flag(raw: Any) -> Optional[bool]:
    """
    0/1 indicator -> False/True. Anything else is treated as missing.
    """
    value = to_float(raw)
    if value == 0.0:
        return False
    if value == 1.0:
        return True
    return None


def to_year(raw: Any) -> Optional[int]:
    value = to_float(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def parse_row(row: Mapping[str, Any]) -> Optional[Record]:
    """
    Build a Record from one raw row, or None if it has no usable country/year.
    """
    country = row.get("country")
    if country is None or not str(country).strip():
        return None

    year = to_year(row.get("year"))
    if year is None:
        return None

    values = {}
    for code in ATTRIBUTE_CODES:
        if code in FLAG_ATTRIBUTES:
            values[code] = to_flag(row.get(code))
        else:
            values[code] = to_float(row.get(code))

    return Record(country=str(country).strip(), year=year, **values)


# -------------------------------------------------------------------------
# Public API
# -------------------------------------------------------------------------
def load(source: JsonSource, *, timeout: float = DEFAULT_TIMEOUT) -> List[Record]:
    """
    Load the dataset and normalise every row into a Record.

    :param source: path, URL, JSON text/bytes or an already-parsed list of rows
    :return: records in source order
    :raises DataLoadError: if the source cannot be read or is not a JSON array
    """
    rows = read_json_source(source, timeout=timeout)
    if not isinstance(rows, list):
        raise DataLoadError("Dataset must be a JSON array of row objects")

    records: List[Record] = []
    skipped = 0
    for row in rows:
        record = parse_row(row) if isinstance(row, Mapping) else None
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.warning(
            "Skipped rows without a usable country/year",
            extra={"n_skipped": skipped},
        )

    logger.info(
        "Records loaded",
        extra={"n_records": len(records), "n_countries": len(countries(records))},
    )
    return records


def filter_data(records: Iterable[RecordLike], attributes: Sequence[str]) -> List[dict]:
    """
    Project each record onto the requested attributes, keeping row order.
    """
    projected: List[dict] = []
    for rec in records:
        if isinstance(rec, Record):
            projected.append({attr: getattr(rec, attr, None) for attr in attributes})
        else:
            projected.append({attr: rec.get(attr) for attr in attributes})
    return projected


def records_to_frame(records: Iterable[RecordLike]) -> pd.DataFrame:
    """
    Tabular form of a record sequence for the aggregator.

    Flags become 0.0/1.0 and absent values become NaN; columns missing from
    partial (projected) records are simply absent from the frame.
    """
    rows = []
    for rec in records:
        if isinstance(rec, Record):
            row = {"country": rec.country, "year": rec.year}
            row.update({code: rec.value(code) for code in ATTRIBUTE_CODES})
        else:
            row = {
                k: (float(v) if isinstance(v, bool) else v)
                for k, v in rec.items()
            }
        rows.append(row)

    if not rows:
        return pd.DataFrame(columns=[*ID_FIELDS, *ATTRIBUTE_CODES])

    return pd.DataFrame(rows)


def countries(records: Iterable[RecordLike]) -> List[str]:
    return sorted({_field(rec, "country") for rec in records} - {None})


def years(records: Iterable[RecordLike]) -> List[int]:
    return sorted({_field(rec, "year") for rec in records} - {None})


def _field(rec: RecordLike, key: str) -> Any:
    if isinstance(rec, Record):
        return getattr(rec, key)
    return rec.get(key)
