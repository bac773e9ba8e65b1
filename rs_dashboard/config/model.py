from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional

# Labels for every indicator in the dataset, in display order.
DEFAULT_ATTRIBUTE_LABELS: Dict[str, str] = {
    "fatal_pc_km": "Fatalities per billion passenger-km",
    "fatal_mIn": "Fatalities per million inhabitants",
    "accid_adj_pc_km": "Accidents per billion passenger-km",
    "p_km": "Billions of passenger-km",
    "croad_inv_km": "Investment in roads construction per kilometer, €/km (2015 constant prices)",
    "croad_maint_km": "Expenditure on roads maintenance per kilometer, €/km (2015 constant prices)",
    "prop_motorwa": "Proportion of motorways over the total road network (%)",
    "populat": "Population, in millions of inhabitants",
    "unemploy": "Unemployment rate (%)",
    "petrol_car": "Consumption of gasolina and petrol derivatives (tons) per tourism",
    "alcohol": "Alcohol consumption, in liters per capita (age > 15)",
    "mot_index_1000": "Motorization index, in cars per 1,000 inhabitants",
    "den_populat": "Population density, inhabitants/km²",
    "cgdp": "Gross Domestic Product (GDP), in € (2015 constant prices)",
    "cgdp_cap": "GDP per capita, in € (2015 constant prices)",
    "precipit": "Average depth of rain water during a year (mm)",
    "prop_elder": "Proportion of people over 65 years (%)",
    "dps": "Demerit Point System (0: no; 1: yes)",
    "freight": "Freight transport, in billions of ton-km",
}


@dataclass(frozen=True)
class AttributeDescriptor:
    code: str
    label: str


class AttributeCatalog:
    """
    Read-only code -> human label lookup, passed to whatever needs labels.
    """

    def __init__(self, descriptors: List[AttributeDescriptor]):
        self._by_code: Dict[str, AttributeDescriptor] = {}
        for d in descriptors:
            if d.code in self._by_code:
                raise ValueError(f"Attribute '{d.code}' declared twice")
            self._by_code[d.code] = d

    @classmethod
    def from_mapping(cls, labels: Mapping[str, str]) -> AttributeCatalog:
        return cls([AttributeDescriptor(code=c, label=l) for c, l in labels.items()])

    @classmethod
    def default(cls) -> AttributeCatalog:
        return cls.from_mapping(DEFAULT_ATTRIBUTE_LABELS)

    def label(self, code: str) -> str:
        descriptor = self._by_code.get(code)
        return descriptor.label if descriptor is not None else code

    def codes(self) -> List[str]:
        return list(self._by_code)

    def options(self) -> List[dict]:
        return [{"label": d.label, "value": d.code} for d in self]

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __iter__(self) -> Iterator[AttributeDescriptor]:
        return iter(self._by_code.values())

    def __len__(self) -> int:
        return len(self._by_code)


@dataclass
class GlobalConfig:
    ui_title: str
    data_source: str
    geo_source: str
    attributes: AttributeCatalog = field(default_factory=AttributeCatalog.default)
    initial_attribute: str = "fatal_pc_km"
    playback_interval_ms: int = 1000
    fetch_timeout: float = 30.0
    config_root: Optional[Path] = None
