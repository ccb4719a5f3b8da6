# artiklo_assistant/services/rate_limiter.py
"""
Sliding-window admission control keyed by user identity.

State lives in this process only. Several workers or hosts each keep their
own windows, so a horizontally scaled deployment needs a shared store in
front of this class. Unauthenticated callers all share the ``"anonymous"``
bucket.
"""
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


class RateLimiter:
    def __init__(
        self,
        max_requests: int = 5,
        window_seconds: float = 15 * 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = {}

    @staticmethod
    def _key(identifier: Optional[str]) -> str:
        return identifier or ANONYMOUS

    def _prune(self, key: str, now: float) -> Deque[float]:
        """Drops expired entries; identifiers with nothing left are forgotten."""
        window = self._windows.get(key)
        if window is None:
            return deque(maxlen=self.max_requests)
        while window and now - window[0] >= self.window_seconds:
            window.popleft()
        if not window:
            del self._windows[key]
        return window

    def is_allowed(self, identifier: Optional[str]) -> bool:
        """Admits and records one request, or denies without recording it."""
        key = self._key(identifier)
        now = self._clock()
        window = self._prune(key, now)

        if len(window) >= self.max_requests:
            logger.warning(f"Rate limit exceeded for '{key}' ({len(window)}/{self.max_requests})")
            return False

        window.append(now)
        self._windows[key] = window
        return True

    def retry_after(self, identifier: Optional[str]) -> float:
        """Seconds until the oldest request in a full window expires; 0 when not limited."""
        key = self._key(identifier)
        now = self._clock()
        window = self._prune(key, now)
        if len(window) < self.max_requests:
            return 0.0
        return max(0.0, self.window_seconds - (now - window[0]))

    def reset(self, identifier: Optional[str]) -> None:
        self._windows.pop(self._key(identifier), None)

    @property
    def tracked_identifiers(self) -> int:
        """Number of identifiers currently holding a window."""
        return len(self._windows)
