"""Application wiring helpers."""

from __future__ import annotations

from functools import partial

from .config import AppConfig, resolve_cache_path
from .logging_setup import configure_logging
from .measurements.cache import MeasurementCache
from .measurements.fast_runner import run_fast_test
from .measurements.manager import MeasurementManager
from .measurements.models import Measurement
from .presentation import render

__version__ = "0.1.0"


class ApplicationContext:
    """Holds the collaborators for a single run."""

    def __init__(self, config: AppConfig, setup_logging: bool = True):
        self.config = config
        if setup_logging:
            configure_logging(config)
        # Resolved up front so a missing cache base fails before any test runs.
        self.cache = MeasurementCache(resolve_cache_path(config))
        self.measurements = MeasurementManager(
            cache=self.cache,
            fetch=partial(run_fast_test, config.fast),
            max_age_seconds=config.cache.max_age_seconds,
        )

    def status_line(self, refresh: bool = False) -> str:
        measurement: Measurement
        if refresh:
            measurement = self.measurements.refresh()
        else:
            measurement = self.measurements.current()
        return render(measurement, self.config.display)
