"""
Build surface state for Terra City Builder.
Contains the element catalog and data models.

The build session lives in builder.session; it depends on the scoring
package, so it is not imported here.
"""

from builder.catalog import ElementType, ELEMENT_CATALOG, INSTRUMENTS, parse_element_type
from builder.models import PlacedElement, CityMetrics, EnvironmentalIndicators
from builder.debounce import Debouncer

__all__ = [
    # Catalog
    "ElementType",
    "ELEMENT_CATALOG",
    "INSTRUMENTS",
    "parse_element_type",
    # Models
    "PlacedElement",
    "CityMetrics",
    "EnvironmentalIndicators",
    "Debouncer",
]
