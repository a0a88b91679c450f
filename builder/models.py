"""
Core data models for the city builder scoring engine.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Tuple

from builder.catalog import ElementType

# Placed positions are kept away from the edges of the build surface
MIN_POSITION = 5.0
MAX_POSITION = 95.0

NEUTRAL_SCORE = 50.0


def clamp_position(value: float) -> float:
    """Clamp a surface coordinate (percent of width/height) into [5, 95]."""
    return max(MIN_POSITION, min(MAX_POSITION, float(value)))


@dataclass(frozen=True)
class PlacedElement:
    """
    An element dropped onto the build surface.

    x and y are percentages of the surface size, already clamped.
    """
    id: str
    type: ElementType
    x: float
    y: float

    def to_dict(self) -> Dict:
        return {"id": self.id, "type": self.type.value, "x": self.x, "y": self.y}


@dataclass(frozen=True)
class CityMetrics:
    """
    Normalized snapshot of a city layout, sent to the prediction service.

    Every coverage/density field is a ratio in [0, 1].
    """
    concrete_coverage: float
    vegetation_coverage: float
    water_coverage: float
    building_density: float
    industrial_buildings: float
    tree_coverage: float
    solar_panel_coverage: float
    wind_turbine_density: float
    residential_buildings: float
    traffic_density: float
    latitude: float
    longitude: float
    hour_of_day: int

    RATIO_FIELDS = (
        "concrete_coverage",
        "vegetation_coverage",
        "water_coverage",
        "building_density",
        "industrial_buildings",
        "tree_coverage",
        "solar_panel_coverage",
        "wind_turbine_density",
        "residential_buildings",
        "traffic_density",
    )

    def ratios(self) -> Dict[str, float]:
        """Only the coverage/density fields."""
        return {name: getattr(self, name) for name in self.RATIO_FIELDS}

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "CityMetrics":
        return cls(**data)


@dataclass(frozen=True)
class EnvironmentalIndicators:
    """The five 0-100 display values surfaced to the build surface."""
    air_quality: float = NEUTRAL_SCORE
    temperature: float = NEUTRAL_SCORE
    vegetation: float = NEUTRAL_SCORE
    energy: float = NEUTRAL_SCORE
    atmosphere: float = NEUTRAL_SCORE

    FIELDS = ("air_quality", "temperature", "vegetation", "energy", "atmosphere")

    @classmethod
    def neutral(cls) -> "EnvironmentalIndicators":
        return cls()

    def values(self) -> Tuple[float, ...]:
        return tuple(getattr(self, name) for name in self.FIELDS)

    def as_dict(self) -> Dict[str, float]:
        """Display keys, as rendered by the build surface."""
        return {
            "airQuality": self.air_quality,
            "temperature": self.temperature,
            "vegetation": self.vegetation,
            "energy": self.energy,
            "atmosphere": self.atmosphere,
        }
