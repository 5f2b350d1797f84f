import json

import pytest

from speedbar.errors import (
    CacheMetadataError,
    CacheReadError,
    CacheWriteError,
    ClockError,
    DecodeError,
)
from speedbar.measurements.cache import (
    Freshness,
    MeasurementCache,
    check_freshness,
    seconds_since_modified,
)
from speedbar.measurements.models import Measurement

from .conftest import write_cache

MTIME = 1_700_000_000
DAY = 86400


@pytest.fixture
def cached_file(cache_path):
    write_cache(cache_path, {"download_speed_mbps": 330, "latency_ms": 17}, mtime=MTIME)
    return cache_path


def test_elapsed_seconds_are_truncated(cached_file):
    assert seconds_since_modified(cached_file, now=MTIME + 12.9) == 12


@pytest.mark.parametrize("elapsed", [0, 1, 3600, DAY - 1, DAY])
def test_within_threshold_is_fresh(cached_file, elapsed):
    status = check_freshness(cached_file, DAY, now=MTIME + elapsed)

    assert status.state is Freshness.FRESH
    assert status.elapsed == elapsed


@pytest.mark.parametrize("elapsed", [DAY + 1, 2 * DAY])
def test_older_than_threshold_is_stale(cached_file, elapsed):
    status = check_freshness(cached_file, DAY, now=MTIME + elapsed)

    assert status.state is Freshness.STALE
    assert status.elapsed == elapsed


def test_missing_file_is_absent(tmp_path):
    status = check_freshness(tmp_path / "nope.json", DAY)

    assert status.state is Freshness.ABSENT
    assert isinstance(status.reason, CacheMetadataError)


def test_directory_is_absent(tmp_path):
    status = check_freshness(tmp_path, DAY)

    assert status.state is Freshness.ABSENT
    assert "not a regular file" in str(status.reason)


def test_future_mtime_is_absent_not_a_crash(cached_file):
    status = check_freshness(cached_file, DAY, now=MTIME - 10)

    assert status.state is Freshness.ABSENT
    assert isinstance(status.reason, ClockError)


def test_seconds_since_modified_raises_clock_error(cached_file):
    with pytest.raises(ClockError):
        seconds_since_modified(cached_file, now=MTIME - 1)


def test_store_then_load(cache, measurement, cache_path):
    cache.store(measurement)

    assert json.loads(cache_path.read_text()) == {"download_speed_mbps": 330, "latency_ms": 17}
    assert cache.load() == measurement


def test_store_overwrites_previous_record(cache, measurement):
    cache.store(measurement)
    cache.store(Measurement(download_speed_mbps=100, latency_ms=120))

    assert cache.load() == Measurement(download_speed_mbps=100, latency_ms=120)


def test_load_rejects_garbage(cache_path):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("download_speed_mbps = 330")

    with pytest.raises(DecodeError):
        MeasurementCache(cache_path).load()


def test_load_rejects_wrong_schema(cache_path):
    write_cache(cache_path, {"downloadSpeed": 330, "latency": 17})

    with pytest.raises(DecodeError, match="download_speed_mbps"):
        MeasurementCache(cache_path).load()


def test_store_reports_write_failures(tmp_path, measurement):
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(CacheWriteError):
        MeasurementCache(blocker / "measurement.json").store(measurement)


def test_load_rejects_invalid_utf8(cache_path):
    cache_path.parent.mkdir(parents=True)
    cache_path.write_bytes(b"\xff\xfe{")

    with pytest.raises(DecodeError):
        MeasurementCache(cache_path).load()


def test_unreadable_cache_is_a_read_error(tmp_path):
    with pytest.raises(CacheReadError, match="Failed to read cache file"):
        MeasurementCache(tmp_path).load()
