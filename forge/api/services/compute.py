import threading
import time
from collections import deque
from typing import Dict, Optional

RECENT_OPS = 50

_tracker: Optional["ComputeTracker"] = None
_tracker_lock = threading.Lock()


class ComputeTracker:
    """Character-based usage accounting per model."""

    def __init__(self, recent: int = RECENT_OPS):
        self._recent: deque = deque(maxlen=recent)
        self._totals: Dict[str, int] = {}
        self._calls: Dict[str, int] = {}
        self._lock = threading.Lock()

    def deduct_cost(self, model: str, chars: int) -> None:
        with self._lock:
            self._totals[model] = self._totals.get(model, 0) + chars
            self._calls[model] = self._calls.get(model, 0) + 1
            self._recent.appendleft({"model": model, "chars": chars, "timestamp": int(time.time() * 1000)})

    def total_chars(self, model: Optional[str] = None) -> int:
        with self._lock:
            if model is not None:
                return self._totals.get(model, 0)
            return sum(self._totals.values())

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "totals": dict(self._totals),
                "calls": dict(self._calls),
                "recentOps": list(self._recent),
            }


def get_tracker() -> ComputeTracker:
    global _tracker
    if _tracker is None:
        with _tracker_lock:
            if _tracker is None:
                _tracker = ComputeTracker()
    return _tracker
