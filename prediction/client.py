"""
Remote Predictor Client - environmental prediction over HTTP.

Posts CityMetrics as JSON to the prediction service and hands back the
parsed body untouched. The service schema has drifted between versions,
so field checking is left to the score normalizer.
"""

import logging
from typing import Dict, Optional

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from builder.models import CityMetrics
from prediction.settings import PredictorSettings

log = logging.getLogger(__name__)


class PredictionError(Exception):
    """Base class for failed prediction requests."""


class NetworkError(PredictionError):
    """The request never got a response (DNS, connection, timeout)."""


class ProtocolError(PredictionError):
    """The service answered, but not with a successful JSON response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PredictorClient:
    """
    Client for POST /predict/complete.

    Usage:
        with PredictorClient() as client:
            body = client.predict(metrics)
    """

    def __init__(
        self,
        settings: Optional[PredictorSettings] = None,
        session: Optional[requests.Session] = None,
        wait=None,
    ):
        self.settings = settings or PredictorSettings()
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self._wait = wait or wait_exponential(multiplier=1, min=1, max=5)

    def __enter__(self) -> "PredictorClient":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        self.session.close()

    def predict(self, metrics: CityMetrics) -> Dict:
        """
        Request an environmental prediction for a city.

        Args:
            metrics: Derived city metrics, sent as the JSON body

        Returns:
            The parsed response body, unvalidated

        Raises:
            NetworkError: transport failure
            ProtocolError: non-2xx status or a body that is not JSON
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.settings.max_attempts),
            wait=self._wait,
            retry=retry_if_exception_type(NetworkError),
            reraise=True,
        )
        return retrying(self._post, metrics.to_dict())

    def _post(self, payload: Dict) -> Dict:
        url = self.settings.predict_url
        try:
            response = self.session.post(url, json=payload, timeout=self.settings.timeout)
        except requests.RequestException as e:
            log.error(f"Prediction request to {url} failed: {e}")
            raise NetworkError(f"Unable to reach prediction service at {url}: {e}") from e

        if not response.ok:
            log.error(f"Prediction service returned {response.status_code} {response.reason}")
            raise ProtocolError(
                f"API request failed: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            log.error(f"Prediction service returned a non-JSON body: {e}")
            raise ProtocolError("API response is not valid JSON", status_code=response.status_code) from e

        log.debug(f"Prediction received with status {data.get('status') if isinstance(data, dict) else None}")
        return data


# ═══════════════════════════════════════════════════════════════════════════
# QUICK FORECAST
# ═══════════════════════════════════════════════════════════════════════════
def reference_metrics(pollution_offset: float = 0.0) -> CityMetrics:
    """Fixed mid-sized city in Cairo at 14:00, shifted by a pollution offset."""
    return CityMetrics(
        concrete_coverage=0.3 + pollution_offset * 0.1,
        vegetation_coverage=0.4 - pollution_offset * 0.1,
        water_coverage=0.1,
        building_density=0.5,
        industrial_buildings=0.2,
        tree_coverage=0.25,
        solar_panel_coverage=0.15,
        wind_turbine_density=0.05,
        residential_buildings=0.3,
        traffic_density=0.1,
        latitude=30.0444,
        longitude=31.2357,
        hour_of_day=14,
    )


def forecast_temperature(client: PredictorClient, pollution_offset: float = 0.0) -> str:
    """
    Predicted temperature of the reference city, formatted to 2 decimals.

    Returns "N/A" when the service fails or the field is missing.
    """
    try:
        prediction = client.predict(reference_metrics(pollution_offset))
    except PredictionError as e:
        log.error(f"Temperature forecast failed: {e}")
        return "N/A"

    try:
        return f"{float(prediction['temperature']['predicted']):.2f}"
    except (KeyError, TypeError, ValueError):
        log.warning("Prediction has no temperature.predicted value")
        return "N/A"
