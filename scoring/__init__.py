"""
Environmental scoring for Terra City Builder.
Derives city metrics and turns predictions or placed elements into indicators.
"""

from scoring.metrics import derive_city_metrics
from scoring.indicators import (
    normalize_prediction,
    calculate_local_indicators,
    classify_overall,
    overall_score,
    indicator_level,
)
from scoring.engine import ScoringEngine, ScoringOutcome, get_engine

__all__ = [
    "derive_city_metrics",
    "normalize_prediction",
    "calculate_local_indicators",
    "classify_overall",
    "overall_score",
    "indicator_level",
    "ScoringEngine",
    "ScoringOutcome",
    "get_engine",
]
