"""
Metrics Deriver

Turns the placed elements of a city into the normalized CityMetrics record
the prediction service expects.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

from builder.catalog import ElementType
from builder.models import CityMetrics, PlacedElement

log = logging.getLogger(__name__)

# Cairo, Egypt
DEFAULT_LATITUDE = 30.0444
DEFAULT_LONGITUDE = 31.2357

# A grid is assumed to hold at most this many elements of one kind
MAX_ELEMENTS = 100

WATER_COVERAGE = 0.1
VEGETATION_PER_TREE = 0.8
CONCRETE_PER_WASTE = 0.5
TRAFFIC_PER_BUILDING = 0.3


def _ratio(value: float) -> float:
    return max(0.0, min(1.0, value))


def count_elements(elements: Iterable[PlacedElement]) -> Counter:
    """Count placed elements per ElementType. Every type is present, possibly 0."""
    counts = Counter({element_type: 0 for element_type in ElementType})
    for element in elements:
        if element.type in counts:
            counts[element.type] += 1
    return counts


def derive_city_metrics(
    elements: Iterable[PlacedElement],
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    hour: Optional[int] = None,
) -> CityMetrics:
    """
    Derive normalized city metrics from placed elements.

    Args:
        elements: Placed elements, in any order
        latitude: Defaults to DEFAULT_LATITUDE
        longitude: Defaults to DEFAULT_LONGITUDE
        hour: Hour of day 0-23. Defaults to the current local hour.

    Returns:
        CityMetrics with every coverage/density field in [0, 1]
    """
    counts = count_elements(elements)

    residential = _ratio(counts[ElementType.HOUSE] / MAX_ELEMENTS)
    industrial = _ratio(counts[ElementType.FACTORY] / MAX_ELEMENTS)
    tree = _ratio(counts[ElementType.TREE] / MAX_ELEMENTS)
    solar = _ratio(counts[ElementType.SOLAR] / MAX_ELEMENTS)
    wind = _ratio(counts[ElementType.WIND] / MAX_ELEMENTS)
    waste = _ratio(counts[ElementType.WASTE] / MAX_ELEMENTS)

    building_density = _ratio(residential + industrial)
    concrete_coverage = _ratio(building_density + waste * CONCRETE_PER_WASTE)
    vegetation_coverage = _ratio(tree * VEGETATION_PER_TREE)
    traffic_density = _ratio((residential + industrial) * TRAFFIC_PER_BUILDING)

    if hour is None:
        hour = datetime.now().hour
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0-23, got {hour}")

    metrics = CityMetrics(
        concrete_coverage=concrete_coverage,
        vegetation_coverage=vegetation_coverage,
        water_coverage=WATER_COVERAGE,
        building_density=building_density,
        industrial_buildings=industrial,
        tree_coverage=tree,
        solar_panel_coverage=solar,
        wind_turbine_density=wind,
        residential_buildings=residential,
        traffic_density=traffic_density,
        latitude=DEFAULT_LATITUDE if latitude is None else latitude,
        longitude=DEFAULT_LONGITUDE if longitude is None else longitude,
        hour_of_day=int(hour),
    )
    log.debug(f"Derived metrics from {sum(counts.values())} elements: {metrics.ratios()}")
    return metrics
