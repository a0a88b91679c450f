"""
Scoring Engine

Picks between the two indicator strategies:

    RemoteStrategy: derive metrics -> prediction service -> normalize
    LocalStrategy:  additive catalog impacts

The remote strategy is tried first when a client is configured. Any
prediction failure falls back to the local strategy, so every call ends
with a complete, bounded set of indicators.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from builder.models import CityMetrics, EnvironmentalIndicators, PlacedElement
from prediction.client import PredictionError, PredictorClient
from scoring.indicators import calculate_local_indicators, classify_overall, normalize_prediction
from scoring.metrics import derive_city_metrics

log = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Unable to connect to prediction server"

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"


@dataclass(frozen=True)
class ScoringOutcome:
    """Result of one scoring request."""
    indicators: EnvironmentalIndicators
    label: str
    source: str                          # "remote" or "local"
    metrics: Optional[CityMetrics] = None
    prediction: Optional[Dict] = None    # Raw response body, remote only
    error: Optional[str] = None          # User-visible connectivity message

    @property
    def connectivity_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict:
        return {
            "indicators": self.indicators.as_dict(),
            "label": self.label,
            "source": self.source,
            "error": self.error,
        }


class RemoteStrategy:
    """Indicators from the prediction service."""

    def __init__(self, client: PredictorClient):
        self.client = client

    def compute(
        self,
        elements: Sequence[PlacedElement],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ):
        """
        Returns:
            (indicators, metrics, prediction)

        Raises:
            PredictionError: when the service cannot deliver a prediction
        """
        metrics = derive_city_metrics(elements, latitude, longitude)
        prediction = self.client.predict(metrics)
        return normalize_prediction(prediction, metrics), metrics, prediction


class LocalStrategy:
    """Indicators from the additive catalog model. Never fails."""

    def compute(self, elements: Sequence[PlacedElement]) -> EnvironmentalIndicators:
        return calculate_local_indicators(elements)


class ScoringEngine:
    """
    Turns placed elements into indicators plus an overall label.

    With no client the engine is local-only.
    """

    def __init__(self, client: Optional[PredictorClient] = None):
        self.remote = RemoteStrategy(client) if client is not None else None
        self.local = LocalStrategy()

    @property
    def uses_remote(self) -> bool:
        return self.remote is not None

    def close(self):
        if self.remote is not None:
            self.remote.client.close()

    def score(
        self,
        elements: Sequence[PlacedElement],
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ScoringOutcome:
        """
        Score a city.

        Args:
            elements: Placed elements
            latitude: City latitude, defaults to the metrics default
            longitude: City longitude, defaults to the metrics default

        Returns:
            ScoringOutcome. On fallback, error holds the connectivity message.
        """
        elements = list(elements)

        if self.remote is not None:
            try:
                indicators, metrics, prediction = self.remote.compute(elements, latitude, longitude)
            except PredictionError as e:
                log.warning(f"Prediction unavailable, using local model: {e}")
                return self.score_locally(elements, error=CONNECTIVITY_MESSAGE)

            log.info(f"Scored {len(elements)} elements with the prediction service")
            return ScoringOutcome(
                indicators=indicators,
                label=classify_overall(indicators),
                source=SOURCE_REMOTE,
                metrics=metrics,
                prediction=prediction,
            )

        return self.score_locally(elements)

    def score_locally(
        self,
        elements: Sequence[PlacedElement],
        error: Optional[str] = None,
    ) -> ScoringOutcome:
        """Score with the additive model only."""
        indicators = self.local.compute(elements)
        log.info(f"Scored {len(elements)} elements with the local model")
        return ScoringOutcome(
            indicators=indicators,
            label=classify_overall(indicators),
            source=SOURCE_LOCAL,
            error=error,
        )


def get_engine(client: Optional[PredictorClient] = None) -> ScoringEngine:
    """Factory function for a scoring engine."""
    return ScoringEngine(client)
