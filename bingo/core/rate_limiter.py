import math
import threading
import time
from collections import deque
from typing import Callable

from bingo.config import settings

WINDOW_SECONDS = 60


class InMemoryRateLimiter:
    """
    Sliding-window log per client and bucket, held in process memory.
    Counts are not shared between workers. Keys with no hit inside their window are
    dropped, so idle clients cost nothing.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (window seconds, timestamps of accepted hits, oldest first)
        self._logs: dict[str, tuple[int, deque[float]]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)

    def check(self, client: str, method: str, path: str) -> tuple[bool, int]:
        """
        Apply the bucket for this route, if any, to the client.
        Returns (allowed, seconds until the oldest counted hit leaves the window).
        """
        rule = rule_for(method, path)
        if rule is None:
            return True, 0
        bucket, limit = rule
        if limit <= 0:
            return True, 0
        return self.hit(f"{client}:{bucket}", limit)

    def hit(self, key: str, limit: int, window_seconds: int = WINDOW_SECONDS) -> tuple[bool, int]:
        now = self._clock()
        with self._lock:
            self._sweep(now)
            _, stamps = self._logs.setdefault(key, (window_seconds, deque()))
            cutoff = now - window_seconds
            while stamps and stamps[0] <= cutoff:
                stamps.popleft()
            if len(stamps) >= limit:
                return False, max(1, math.ceil(stamps[0] - cutoff))
            stamps.append(now)
        return True, 0

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        if now - self._last_sweep < WINDOW_SECONDS:
            return
        self._last_sweep = now
        stale = [key for key, (window, stamps) in self._logs.items() if not stamps or stamps[-1] <= now - window]
        for key in stale:
            del self._logs[key]

    def reset(self) -> None:
        with self._lock:
            self._logs.clear()
            self._last_sweep = self._clock()


def rule_for(method: str, path: str) -> tuple[str, int] | None:
    """Map a request to (bucket, per-minute limit), or None when it is not limited."""
    if method != "POST":
        return None
    if path in {"/auth/login", "/auth/register"}:
        return "auth", settings.rate_limit_auth_per_min
    if path == "/messages" or (path.startswith("/conversations/") and path.endswith("/messages")):
        return "message", settings.rate_limit_message_per_min
    if path == "/documents":
        return "upload", settings.rate_limit_upload_per_min
    return None


rate_limiter = InMemoryRateLimiter()
