"""
Settings for the prediction client and the build session.

Values come from environment variables, falling back to the defaults below.
"""

import os
from dataclasses import dataclass, asdict
from typing import Dict, Optional

DEFAULT_BASE_URL = "http://10.20.164.134:5000"
PREDICT_ENDPOINT = "/predict/complete"


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


@dataclass
class PredictorSettings:
    """
    All values are explicit - no hidden defaults.

    timeout None means requests waits as long as the transport allows,
    and max_attempts 1 means a single try with no retry.
    """
    base_url: str = DEFAULT_BASE_URL
    endpoint: str = PREDICT_ENDPOINT
    timeout: Optional[float] = None      # Seconds per request
    max_attempts: int = 1                 # Transport failures only
    debounce_seconds: float = 0.5         # Quiet period before auto-predict
    max_per_type: int = 10                # Placement cap per element type
    default_latitude: float = 30.0444     # Cairo
    default_longitude: float = 31.2357

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def predict_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.endpoint.lstrip("/")

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "PredictorSettings":
        return cls(**data)

    @classmethod
    def from_env(cls) -> "PredictorSettings":
        """Build settings from TERRA_* environment variables."""
        return cls(
            base_url=os.getenv("TERRA_PREDICTOR_URL", DEFAULT_BASE_URL),
            timeout=_optional_float(os.getenv("TERRA_PREDICTOR_TIMEOUT")),
            max_attempts=int(os.getenv("TERRA_PREDICTOR_MAX_ATTEMPTS", "1")),
            debounce_seconds=float(os.getenv("TERRA_DEBOUNCE_SECONDS", "0.5")),
        )
