"""
Build Session - the state behind one build surface.

Holds the placed elements and the indicators currently on display.
Placement rules (per-type caps, position clamping) are enforced here, so
the scoring engine never sees an element the surface would refuse.
"""

import logging
import threading
import uuid
from typing import Dict, Optional, Tuple

from builder.catalog import parse_element_type
from builder.debounce import Debouncer
from builder.models import EnvironmentalIndicators, PlacedElement, clamp_position
from prediction.client import PredictorClient
from prediction.settings import PredictorSettings
from scoring.engine import ScoringEngine, ScoringOutcome
from scoring.indicators import classify_overall

log = logging.getLogger(__name__)

DEFAULT_MAX_PER_TYPE = 10


class PlacementLimitError(ValueError):
    """The element type already has the maximum number of placements."""


class EmptyCityError(ValueError):
    """A prediction was requested before anything was placed."""


class BuildSession:
    """
    Placed elements plus the latest indicators.

    When debounce_delay is set, every edit schedules a recomputation; only
    the last edit in a burst triggers it.
    """

    def __init__(
        self,
        engine: Optional[ScoringEngine] = None,
        max_per_type: int = DEFAULT_MAX_PER_TYPE,
        debounce_delay: Optional[float] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ):
        self.engine = engine or ScoringEngine()
        self.max_per_type = max_per_type
        self.latitude = latitude
        self.longitude = longitude

        self._lock = threading.RLock()
        self._elements: Dict[str, PlacedElement] = {}
        self._indicators = EnvironmentalIndicators.neutral()
        self._prediction: Optional[Dict] = None
        self._error: Optional[str] = None
        # Every scoring request takes a number; results older than the last applied one are dropped
        self._request_seq = 0
        self._applied_seq = 0

        self._debouncer = Debouncer(debounce_delay, self._auto_score) if debounce_delay is not None else None

    # ─── Read-only views ──────────────────────────────────────────────────

    @property
    def elements(self) -> Tuple[PlacedElement, ...]:
        with self._lock:
            return tuple(self._elements.values())

    @property
    def indicators(self) -> EnvironmentalIndicators:
        with self._lock:
            return self._indicators

    @property
    def label(self) -> str:
        return classify_overall(self.indicators)

    @property
    def error(self) -> Optional[str]:
        with self._lock:
            return self._error

    @property
    def prediction(self) -> Optional[Dict]:
        with self._lock:
            return self._prediction

    @property
    def debouncer(self) -> Optional[Debouncer]:
        return self._debouncer

    def count(self, element_type) -> int:
        element_type = parse_element_type(element_type)
        with self._lock:
            return sum(1 for el in self._elements.values() if el.type is element_type)

    def can_add(self, element_type) -> bool:
        return self.count(element_type) < self.max_per_type

    # ─── Edits ────────────────────────────────────────────────────────────

    def add(self, element_type, x: float, y: float) -> PlacedElement:
        """
        Place an element at (x, y), given as percentages of the surface.

        Raises:
            ValueError: unknown element type
            PlacementLimitError: the type is already at max_per_type
        """
        element_type = parse_element_type(element_type)
        with self._lock:
            if not self.can_add(element_type):
                raise PlacementLimitError(
                    f"Cannot place more than {self.max_per_type} {element_type.value} elements"
                )
            element = PlacedElement(
                id=f"{element_type.value}-{uuid.uuid4().hex}",
                type=element_type,
                x=clamp_position(x),
                y=clamp_position(y),
            )
            self._elements[element.id] = element
        log.debug(f"Placed {element.id} at ({element.x:.1f}, {element.y:.1f})")
        self._changed()
        return element

    def remove(self, element_id: str) -> bool:
        """Remove a placed element. Unknown ids are ignored."""
        with self._lock:
            removed = self._elements.pop(element_id, None)
        if removed is None:
            return False
        log.debug(f"Removed {element_id}")
        self._changed()
        return True

    def reset(self):
        """Clear the surface and put the indicators back to neutral."""
        if self._debouncer is not None:
            self._debouncer.cancel()
        with self._lock:
            self._elements.clear()
            self._indicators = EnvironmentalIndicators.neutral()
            self._prediction = None
            self._error = None
            self._applied_seq = self._request_seq
        log.info("Build session reset")

    # ─── Scoring ──────────────────────────────────────────────────────────

    def predict(self) -> ScoringOutcome:
        """
        Score the city, remotely when possible.

        Raises:
            EmptyCityError: nothing has been placed yet
        """
        with self._lock:
            elements = tuple(self._elements.values())
            seq = self._next_request()
        if not elements:
            raise EmptyCityError("Add some elements to the city first")

        outcome = self.engine.score(elements, self.latitude, self.longitude)
        self._apply(outcome, seq)
        return outcome

    def recalculate_locally(self) -> ScoringOutcome:
        """Score the city with the additive model only."""
        with self._lock:
            elements = tuple(self._elements.values())
            seq = self._next_request()
        outcome = self.engine.score_locally(elements)
        self._apply(outcome, seq)
        return outcome

    def _next_request(self) -> int:
        self._request_seq += 1
        return self._request_seq

    def _apply(self, outcome: ScoringOutcome, seq: int):
        with self._lock:
            if seq <= self._applied_seq:
                log.debug(f"Discarding stale result of request {seq}")
                return
            self._applied_seq = seq
            self._indicators = outcome.indicators
            self._error = outcome.error
            if outcome.prediction is not None:
                self._prediction = outcome.prediction

    def _changed(self):
        if self._debouncer is not None:
            self._debouncer.schedule()

    def _auto_score(self):
        with self._lock:
            empty = not self._elements
        if empty:
            self.recalculate_locally()
        else:
            self.predict()

    def __enter__(self) -> "BuildSession":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        """Cancel any pending recomputation and release the engine."""
        if self._debouncer is not None:
            self._debouncer.cancel()
        self.engine.close()


def create_session(
    settings: Optional[PredictorSettings] = None,
    online: bool = True,
    debounce: bool = False,
) -> BuildSession:
    """
    Build a session from settings.

    Args:
        settings: Defaults to PredictorSettings.from_env()
        online: Use the prediction service, falling back locally on failure
        debounce: Recompute automatically after settings.debounce_seconds of quiet
    """
    settings = settings or PredictorSettings.from_env()
    client = PredictorClient(settings) if online else None
    return BuildSession(
        engine=ScoringEngine(client),
        max_per_type=settings.max_per_type,
        debounce_delay=settings.debounce_seconds if debounce else None,
        latitude=settings.default_latitude,
        longitude=settings.default_longitude,
    )
