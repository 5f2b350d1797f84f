"""Status-bar rendering of a measurement."""

from __future__ import annotations

import enum

from .config import DisplayConfig
from .measurements.models import Measurement

GOOD_LATENCY_MAX_MS = 50
WARNING_LATENCY_MAX_MS = 150


class Band(enum.Enum):
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"


def latency_band(latency_ms: int) -> Band:
    if latency_ms <= GOOD_LATENCY_MAX_MS:
        return Band.GOOD
    if latency_ms <= WARNING_LATENCY_MAX_MS:
        return Band.WARNING
    return Band.BAD


def render_glyph(band: Band, display: DisplayConfig) -> str:
    color = display.colors.get(band.value, "")
    opening = display.markup_open.format(color=color)
    closing = display.markup_close.format(color=color)
    return f"{opening}{display.glyph}{closing}"


def render(measurement: Measurement, display: DisplayConfig) -> str:
    text = f"{measurement.latency_ms} ms {measurement.download_speed_mbps} Mbps"
    if not display.color:
        return text
    return f"{render_glyph(latency_band(measurement.latency_ms), display)} {text}"
