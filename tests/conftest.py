from __future__ import annotations

import json
import os
import subprocess
from pathlib import Path
from typing import List, Optional

import pytest

from speedbar.config import AppConfig
from speedbar.measurements import fast_runner
from speedbar.measurements.cache import MeasurementCache
from speedbar.measurements.models import Measurement

FAST_OUTPUT = {
    "downloadSpeed": 330,
    "downloaded": 310,
    "latency": 17,
    "bufferBloat": 143,
    "userLocation": "Clearwater, US",
    "userIp": "72.187.132.254",
}


class FakeRun:
    """Stands in for subprocess.run and records every command it receives."""

    def __init__(self, stdout: str = "", stderr: str = "", returncode: int = 0, error=None):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.error = error
        self.calls: List[list] = []

    def __call__(self, command, **kwargs):
        self.calls.append(list(command))
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def install(**kwargs) -> FakeRun:
        runner = FakeRun(**kwargs)
        monkeypatch.setattr(fast_runner.subprocess, "run", runner)
        return runner

    return install


@pytest.fixture
def fast_json() -> str:
    return json.dumps(FAST_OUTPUT)


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "speedbar" / "measurement.json"


@pytest.fixture
def cache(cache_path: Path) -> MeasurementCache:
    return MeasurementCache(cache_path)


@pytest.fixture
def measurement() -> Measurement:
    return Measurement(download_speed_mbps=330, latency_ms=17)


@pytest.fixture
def config(tmp_path: Path, monkeypatch) -> AppConfig:
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    app_config = AppConfig()
    app_config.logging.file = str(tmp_path / "speedbar.log")
    return app_config


def write_cache(path: Path, payload: dict, mtime: Optional[float] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
