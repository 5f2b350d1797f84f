"""Measurement orchestration: reuse the cache when fresh, otherwise fetch and persist."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .cache import Freshness, MeasurementCache
from .models import Measurement

LOGGER = logging.getLogger(__name__)

Fetcher = Callable[[], Measurement]


class MeasurementManager:
    def __init__(self, cache: MeasurementCache, fetch: Fetcher, max_age_seconds: int):
        self.cache = cache
        self.fetch = fetch
        self.max_age_seconds = max_age_seconds

    def current(self, now: Optional[float] = None) -> Measurement:
        status = self.cache.status(self.max_age_seconds, now)

        if status.state is Freshness.FRESH:
            LOGGER.info("Cache hit: %s is %ds old", self.cache.path, status.elapsed)
            # A cache that fails to decode ends the run; there is no fallback fetch.
            return self.cache.load()

        if status.state is Freshness.STALE:
            LOGGER.info(
                "Cache stale: %s is %ds old (limit %ds)",
                self.cache.path,
                status.elapsed,
                self.max_age_seconds,
            )
        else:
            LOGGER.info("Cache absent: %s", status.reason)

        return self.refresh()

    def refresh(self) -> Measurement:
        result = self.fetch()
        self.cache.store(result)
        LOGGER.info(
            "Stored measurement in %s (down %d Mbps / latency %d ms)",
            self.cache.path,
            result.download_speed_mbps,
            result.latency_ms,
        )
        return result
