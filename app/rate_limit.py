"""Fixed-window in-memory IP rate limiter."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional

LOGGER = logging.getLogger(__name__)

NEAR_THRESHOLD_RATIO = 0.8


@dataclass(frozen=True)
class RateLimitDecision:
    client_ip: str
    count: int
    limit: int

    @property
    def allowed(self) -> bool:
        return self.count <= self.limit

    @property
    def near_threshold(self) -> bool:
        return self.allowed and self.count > self.limit * NEAR_THRESHOLD_RATIO


class FixedWindowRateLimiter:
    """Counts requests per client IP and zeroes every counter once per window.

    All clients share the same window boundaries. Counters are zeroed rather
    than removed, so memory grows with the number of distinct addresses seen
    over the life of the process.
    """

    def __init__(self, limit: int, window_seconds: int = 60) -> None:
        self.limit = limit
        self.window = window_seconds
        self._counts: Dict[str, int] = {}
        self._lock = Lock()
        self._task: Optional[asyncio.Task] = None

    def hit(self, client_ip: str) -> RateLimitDecision:
        """Record one request from ``client_ip`` and classify it."""

        with self._lock:
            count = self._counts.get(client_ip, 0) + 1
            self._counts[client_ip] = count
        decision = RateLimitDecision(client_ip=client_ip, count=count, limit=self.limit)
        extra = {"client_ip": client_ip, "count": count, "limit": self.limit}
        if not decision.allowed:
            LOGGER.warning("Request blocked, rate limit exceeded", extra=extra)
        elif decision.near_threshold:
            LOGGER.warning("Request count near rate limit threshold", extra=extra)
        return decision

    def count(self, client_ip: str) -> int:
        with self._lock:
            return self._counts.get(client_ip, 0)

    def reset(self) -> None:
        with self._lock:
            for client_ip in self._counts:
                self._counts[client_ip] = 0
            tracked = len(self._counts)
        LOGGER.debug("Rate limit window reset", extra={"count": tracked})

    async def _run_resets(self) -> None:
        while True:
            await asyncio.sleep(self.window)
            self.reset()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the periodic reset on the running event loop."""

        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run_resets())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
