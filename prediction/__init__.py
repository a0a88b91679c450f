"""
Client for the remote environmental prediction service.
"""

from prediction.settings import PredictorSettings
from prediction.client import (
    PredictorClient,
    PredictionError,
    NetworkError,
    ProtocolError,
    forecast_temperature,
)

__all__ = [
    "PredictorSettings",
    "PredictorClient",
    "PredictionError",
    "NetworkError",
    "ProtocolError",
    "forecast_temperature",
]
