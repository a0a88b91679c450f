"""
Debouncer - trailing-edge scheduling of recomputations.

Every schedule() call cancels the pending one, so only the last edit in a
burst triggers the callback once the quiet period has elapsed.
"""

import logging
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)


class Debouncer:
    """
    Cancellable scheduled task backed by threading.Timer.

    Usage:
        debouncer = Debouncer(0.5, session.predict)
        debouncer.schedule()   # on each edit
        debouncer.cancel()     # on reset
    """

    def __init__(self, delay: float, callback: Callable):
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self.callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        """True while a call is scheduled but has not started."""
        with self._lock:
            return self._timer is not None

    def schedule(self, *args, **kwargs):
        """Schedule the callback, superseding any pending call."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                log.debug("Superseded pending recomputation")
            self._generation += 1
            timer = threading.Timer(
                self.delay, self._fire, args=(self._generation, args, kwargs)
            )
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
            return True

    def flush(self) -> bool:
        """Run the pending call now instead of waiting. Returns True if one ran."""
        with self._lock:
            timer = self._timer
            if timer is None:
                return False
            timer.cancel()
            self._timer = None
            self._generation += 1
            args, kwargs = timer.args[1], timer.args[2]
        self.callback(*args, **kwargs)
        return True

    def _fire(self, generation: int, args, kwargs):
        with self._lock:
            # A cancelled timer can still fire if it was already running
            if generation != self._generation:
                return
            self._timer = None
        try:
            self.callback(*args, **kwargs)
        except Exception as e:
            log.error(f"Debounced callback failed: {e}")
