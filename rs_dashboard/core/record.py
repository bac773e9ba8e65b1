from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional, Tuple

# Numeric indicators carried by every row, in source order.
ATTRIBUTE_CODES: Tuple[str, ...] = (
    "fatal_pc_km",
    "fatal_mIn",
    "accid_adj_pc_km",
    "p_km",
    "croad_inv_km",
    "croad_maint_km",
    "prop_motorwa",
    "populat",
    "unemploy",
    "petrol_car",
    "alcohol",
    "mot_index_1000",
    "den_populat",
    "cgdp",
    "cgdp_cap",
    "precipit",
    "prop_elder",
    "dps",
    "freight",
)

# 0/1 indicators, stored as Optional[bool] so a real "no" is not mistaken for missing
FLAG_ATTRIBUTES: Tuple[str, ...] = ("dps",)

ID_FIELDS: Tuple[str, ...] = ("country", "year")


@dataclass(frozen=True)
class Record:
    """
    One country-year observation.

    Every indicator may be None (absent). ``dps`` (Demerit Point System) is a
    nullable boolean: False means "no demerit point system", None means the
    source had no value.
    """

    country: str
    year: int

    fatal_pc_km: Optional[float] = None
    fatal_mIn: Optional[float] = None
    accid_adj_pc_km: Optional[float] = None
    p_km: Optional[float] = None
    croad_inv_km: Optional[float] = None
    croad_maint_km: Optional[float] = None
    prop_motorwa: Optional[float] = None
    populat: Optional[float] = None
    unemploy: Optional[float] = None
    petrol_car: Optional[float] = None
    alcohol: Optional[float] = None
    mot_index_1000: Optional[float] = None
    den_populat: Optional[float] = None
    cgdp: Optional[float] = None
    cgdp_cap: Optional[float] = None
    precipit: Optional[float] = None
    prop_elder: Optional[float] = None
    dps: Optional[bool] = None
    freight: Optional[float] = None

    def value(self, key: str) -> Optional[float]:
        """
        Numeric value of an indicator, with flags mapped to 0.0 / 1.0.
        """
        raw = getattr(self, key)
        if raw is None:
            return None
        if isinstance(raw, bool):
            return 1.0 if raw else 0.0
        return float(raw)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
