"""On-disk cache of the most recent measurement.

The record's timestamp is the file's modification time; nothing but the
measurement itself is encoded in the payload. Writes overwrite the file in
place without locking.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import stat
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import (
    CacheMetadataError,
    CacheReadError,
    CacheWriteError,
    ClockError,
    DecodeError,
    EncodeError,
    SpeedbarError,
)
from .models import Measurement

LOGGER = logging.getLogger(__name__)


class Freshness(enum.Enum):
    FRESH = "fresh"
    STALE = "stale"
    ABSENT = "absent"


@dataclass(frozen=True)
class CacheStatus:
    state: Freshness
    elapsed: Optional[int] = None
    reason: Optional[SpeedbarError] = None


def seconds_since_modified(path: Path, now: Optional[float] = None) -> int:
    """Whole seconds elapsed since ``path`` was last modified."""
    try:
        info = os.stat(path)
    except OSError as exc:
        raise CacheMetadataError(f"Failed to get metadata for file '{path}': {exc}") from exc

    if not stat.S_ISREG(info.st_mode):
        raise CacheMetadataError(f"'{path}' is not a regular file")

    current = time.time() if now is None else now
    delta = current - info.st_mtime
    if delta < 0:
        raise ClockError(
            f"Modification time of '{path}' is {-delta:.3f}s in the future; cannot compute elapsed time"
        )
    return int(delta)


def check_freshness(path: Path, max_age_seconds: int, now: Optional[float] = None) -> CacheStatus:
    """Classify the cache file as fresh, stale or absent. Never raises."""
    try:
        elapsed = seconds_since_modified(path, now)
    except (CacheMetadataError, ClockError) as exc:
        return CacheStatus(Freshness.ABSENT, reason=exc)

    if elapsed <= max_age_seconds:
        return CacheStatus(Freshness.FRESH, elapsed=elapsed)
    return CacheStatus(Freshness.STALE, elapsed=elapsed)


class MeasurementCache:
    """Plain-file measurement store addressed by a single path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def status(self, max_age_seconds: int, now: Optional[float] = None) -> CacheStatus:
        return check_freshness(self.path, max_age_seconds, now)

    def load(self) -> Measurement:
        source = f"cache file '{self.path}'"
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise CacheReadError(f"Failed to read cache file '{self.path}': {exc}") from exc

        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            LOGGER.debug("Undecodable cache contents in %s: %r", self.path, data[:200])
            raise DecodeError(source, exc) from exc
        return Measurement.from_cache_payload(payload, source=source)

    def store(self, measurement: Measurement) -> None:
        try:
            encoded = json.dumps(measurement.to_cache_payload(), indent=2, sort_keys=True)
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Failed to encode measurement for cache: {exc}") from exc

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(encoded + "\n", encoding="utf-8")
        except OSError as exc:
            raise CacheWriteError(f"Failed to write cache file '{self.path}': {exc}") from exc
        LOGGER.debug("Wrote measurement cache to %s", self.path)
