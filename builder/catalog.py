"""
Element Catalog

Static table of every element a player can drop onto the build surface,
with the fixed environmental impact each one has on the five indicators.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping


class ElementType(Enum):
    """Placeable building and infrastructure elements."""
    HOUSE = "house"
    FACTORY = "factory"
    TREE = "tree"
    SOLAR = "solar"
    WIND = "wind"
    WASTE = "waste"


@dataclass(frozen=True)
class ImpactVector:
    """Signed per-element change applied to each indicator."""
    air_quality: int
    temperature: int
    vegetation: int
    energy: int
    atmosphere: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "airQuality": self.air_quality,
            "temperature": self.temperature,
            "vegetation": self.vegetation,
            "energy": self.energy,
            "atmosphere": self.atmosphere,
        }


@dataclass(frozen=True)
class CatalogEntry:
    """Display data and impact for one element type."""
    name: str
    impact: ImpactVector
    emoji: str
    description: str


# ═══════════════════════════════════════════════════════════════════════════
# ELEMENT TABLE
# ═══════════════════════════════════════════════════════════════════════════
ELEMENT_CATALOG: Mapping[ElementType, CatalogEntry] = MappingProxyType({
    ElementType.HOUSE: CatalogEntry(
        name="House",
        impact=ImpactVector(air_quality=-2, temperature=1, vegetation=-1, energy=-3, atmosphere=-1),
        emoji="🏠",
        description="Residential building",
    ),
    ElementType.FACTORY: CatalogEntry(
        name="Factory",
        impact=ImpactVector(air_quality=-8, temperature=3, vegetation=-2, energy=-8, atmosphere=-5),
        emoji="🏭",
        description="Industrial facility",
    ),
    ElementType.TREE: CatalogEntry(
        name="Tree",
        impact=ImpactVector(air_quality=5, temperature=-2, vegetation=8, energy=1, atmosphere=4),
        emoji="🌳",
        description="Natural vegetation",
    ),
    ElementType.SOLAR: CatalogEntry(
        name="Solar Panel",
        impact=ImpactVector(air_quality=3, temperature=-1, vegetation=0, energy=6, atmosphere=3),
        emoji="☀️",
        description="Clean energy source",
    ),
    ElementType.WIND: CatalogEntry(
        name="Wind Turbine",
        impact=ImpactVector(air_quality=3, temperature=0, vegetation=0, energy=7, atmosphere=3),
        emoji="💨",
        description="Renewable energy",
    ),
    ElementType.WASTE: CatalogEntry(
        name="Waste Dump",
        impact=ImpactVector(air_quality=-10, temperature=2, vegetation=-5, energy=-2, atmosphere=-6),
        emoji="🗑️",
        description="Waste disposal site",
    ),
})


# ═══════════════════════════════════════════════════════════════════════════
# OBSERVING INSTRUMENTS
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Instrument:
    """Terra satellite instrument that observes one indicator."""
    name: str
    indicator: str  # EnvironmentalIndicators field name
    description: str


INSTRUMENTS = (
    Instrument("MODIS", "vegetation", "Monitors vegetation and green cover"),
    Instrument("MOPITT", "air_quality", "Tracks air quality and carbon monoxide"),
    Instrument("CERES", "energy", "Measures energy balance"),
    Instrument("ASTER", "temperature", "Monitors land surface heat"),
    Instrument("MISR", "atmosphere", "Analyzes atmospheric particles"),
)


def get_entry(element_type: ElementType) -> CatalogEntry:
    """Look up the catalog entry for an element type."""
    return ELEMENT_CATALOG[element_type]


def parse_element_type(value) -> ElementType:
    """
    Coerce a name like "tree" (or an ElementType) to an ElementType.

    Raises:
        ValueError: if the name is not in the catalog
    """
    if isinstance(value, ElementType):
        return value
    try:
        return ElementType(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(t.value for t in ElementType)
        raise ValueError(f"Unknown element type {value!r} (expected one of: {valid})") from None


def list_elements() -> list:
    """List all placeable elements with their impacts."""
    return [
        {
            "id": element_type.value,
            "name": entry.name,
            "emoji": entry.emoji,
            "description": entry.description,
            "impact": entry.impact.to_dict(),
        }
        for element_type, entry in ELEMENT_CATALOG.items()
    ]
