"""
Indicator Scoring Module

Implements the two ways of producing EnvironmentalIndicators:
- Score normalization of a remote prediction (AQI, UHI intensity, etc.)
- Local additive fallback from the element catalog

plus the overall label shown next to the indicators.
"""

import math
import logging
from typing import Any, Dict, Iterable, Mapping, Optional

from builder.catalog import ELEMENT_CATALOG
from builder.models import CityMetrics, EnvironmentalIndicators, PlacedElement, NEUTRAL_SCORE

log = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0

# AQI 0 maps to 100 and AQI ~150 to ~0
AQI_SCALE = 0.67
DEFAULT_AQI = 50.0

# Score points lost per degree of urban heat island warming
UHI_SCALE = 10.0


# ═══════════════════════════════════════════════════════════════════════════
# NUMERIC HELPERS
# ═══════════════════════════════════════════════════════════════════════════
def sanitize_score(value: Any) -> float:
    """
    Clamp a score to [0, 100]. NaN, infinities and non-numbers become 50.
    """
    try:
        value = float(value)
    except (TypeError, ValueError):
        return NEUTRAL_SCORE
    if not math.isfinite(value):
        return NEUTRAL_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, value))


def sanitize_indicators(indicators: EnvironmentalIndicators) -> EnvironmentalIndicators:
    """Re-clamp every field of an indicator record."""
    return EnvironmentalIndicators(
        **{name: sanitize_score(getattr(indicators, name)) for name in EnvironmentalIndicators.FIELDS}
    )


def _section(prediction: Any, name: str) -> Mapping:
    """Nested object of a prediction, or an empty mapping if absent or not an object."""
    if not isinstance(prediction, Mapping):
        return {}
    section = prediction.get(name)
    return section if isinstance(section, Mapping) else {}


def _read_number(section: Mapping, *keys: str) -> Optional[float]:
    """First of keys holding a number. Missing, null and non-numeric values are skipped."""
    for key in keys:
        value = section.get(key)
        if value is None or isinstance(value, bool):
            continue
        try:
            return float(value)
        except (TypeError, ValueError):
            log.debug(f"Ignoring non-numeric {key}={value!r}")
    return None


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


# ═══════════════════════════════════════════════════════════════════════════
# SCORE NORMALIZER
# ═══════════════════════════════════════════════════════════════════════════
def normalize_prediction(prediction: Dict, metrics: CityMetrics) -> EnvironmentalIndicators:
    """
    Map a remote prediction onto the five 0-100 indicators.

    Two response shapes are in the wild, so each field is read from both
    its current and its older name:

        air_quality = 100 - 0.67 * AQI     (air_quality_index | aqi, else 50)
        atmosphere  = air quality score    (air_quality_score | air_quality, else 50)
        temperature = 100 - 10 * UHI       (uhi_intensity, else 0)
        vegetation  = 100 * metrics.vegetation_coverage
        energy      = sustainability       (sustainability_score | sustainability, else 50)

    Args:
        prediction: Parsed response body. Shape is not trusted.
        metrics: The metrics the prediction was requested for

    Returns:
        EnvironmentalIndicators, every field finite and in [0, 100]
    """
    air = _section(prediction, "air_quality")
    scores = _section(prediction, "scores")
    temperature = _section(prediction, "temperature")
    energy = _section(prediction, "energy")

    aqi = _or_default(_read_number(air, "air_quality_index", "aqi"), DEFAULT_AQI)
    uhi_intensity = _or_default(_read_number(temperature, "uhi_intensity"), 0.0)

    indicators = EnvironmentalIndicators(
        air_quality=sanitize_score(100.0 - aqi * AQI_SCALE),
        temperature=sanitize_score(100.0 - uhi_intensity * UHI_SCALE),
        vegetation=sanitize_score(metrics.vegetation_coverage * 100.0),
        energy=sanitize_score(
            _or_default(_read_number(energy, "sustainability_score", "sustainability"), NEUTRAL_SCORE)
        ),
        atmosphere=sanitize_score(
            _or_default(_read_number(scores, "air_quality_score", "air_quality"), NEUTRAL_SCORE)
        ),
    )
    return sanitize_indicators(indicators)


# ═══════════════════════════════════════════════════════════════════════════
# LOCAL FALLBACK CALCULATOR
# ═══════════════════════════════════════════════════════════════════════════
def calculate_local_indicators(elements: Iterable[PlacedElement]) -> EnvironmentalIndicators:
    """
    Additive model: start every indicator at 50 and add each element's impact.

    Used standalone, or when the prediction service cannot be reached.
    """
    totals = {name: NEUTRAL_SCORE for name in EnvironmentalIndicators.FIELDS}

    for element in elements:
        impact = ELEMENT_CATALOG[element.type].impact
        totals["air_quality"] += impact.air_quality
        totals["temperature"] += impact.temperature
        totals["vegetation"] += impact.vegetation
        totals["energy"] += impact.energy
        totals["atmosphere"] += impact.atmosphere

    return EnvironmentalIndicators(**{name: sanitize_score(value) for name, value in totals.items()})


# ═══════════════════════════════════════════════════════════════════════════
# OVERALL SCORE
# ═══════════════════════════════════════════════════════════════════════════
OVERALL_LABELS = (
    (70.0, "Excellent"),
    (50.0, "Good"),
    (30.0, "Fair"),
)
LOWEST_LABEL = "Poor"

LEVEL_THRESHOLDS = (
    (70, "high"),
    (40, "medium"),
)
LOWEST_LEVEL = "low"


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def overall_score(indicators: EnvironmentalIndicators) -> float:
    """Mean of the finite indicator values, or 50 when none are finite."""
    values = [v for v in indicators.values() if _is_finite_number(v)]
    if not values:
        return NEUTRAL_SCORE
    return sum(values) / len(values)


def classify_overall(indicators: EnvironmentalIndicators) -> str:
    """Label the city: Excellent, Good, Fair or Poor."""
    mean = overall_score(indicators)
    for threshold, label in OVERALL_LABELS:
        if mean >= threshold:
            return label
    return LOWEST_LABEL


def indicator_level(value: Any) -> str:
    """
    Colour band of a single indicator: high, medium or low.

    The value is rounded half-up first; non-finite values count as 0.
    """
    rounded = math.floor(value + 0.5) if _is_finite_number(value) else 0
    for threshold, level in LEVEL_THRESHOLDS:
        if rounded >= threshold:
            return level
    return LOWEST_LEVEL
