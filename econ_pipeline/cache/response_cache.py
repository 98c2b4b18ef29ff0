"""
In-process response cache for read endpoints.

Constructed once per process and handed to whoever needs it. Ingestion calls
invalidate_indicators() explicitly after a committed batch.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional

from econ_pipeline.utils.logger import logger

TTL_COUNTRIES = 60 * 60
TTL_INDICATORS = 10 * 60
TTL_META = 5 * 60

_TTL_BY_KIND = {
    "countries": TTL_COUNTRIES,
    "indicators": TTL_INDICATORS,
    "meta": TTL_META,
}

# key fragments whose responses depend on indicator values
INDICATOR_KEY_PATTERNS = ("indicators", "history", "meta")


class ResponseCache:
    def __init__(self, max_entries: int = 100, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: "OrderedDict[str, tuple[float, Any]]" = OrderedDict()
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, data = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return data

    def set(self, key: str, data: Any, kind: str = "indicators") -> None:
        ttl = _TTL_BY_KIND.get(kind, TTL_INDICATORS)
        with self._lock:
            self._entries[key] = (self._clock() + ttl, data)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Drop keys containing pattern, or everything when pattern is None."""
        with self._lock:
            if pattern is None:
                removed = len(self._entries)
                self._entries.clear()
            else:
                doomed = [k for k in self._entries if pattern in k]
                for k in doomed:
                    del self._entries[k]
                removed = len(doomed)
        logger.debug(f"Cache invalidated pattern={pattern!r} removed={removed}")
        return removed

    def invalidate_indicators(self) -> int:
        return sum(self.invalidate(p) for p in INDICATOR_KEY_PATTERNS)
