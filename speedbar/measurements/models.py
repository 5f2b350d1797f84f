"""Shared dataclasses for measurements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import DecodeError


def _required_int(payload: Dict[str, Any], key: str, source: str) -> int:
    if key not in payload:
        raise DecodeError(source, f"missing field '{key}'")
    return _checked_int(payload[key], key, source)


def _optional_int(payload: Dict[str, Any], key: str, source: str) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return None
    return _checked_int(value, key, source)


def _optional_str(payload: Dict[str, Any], key: str, source: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(source, f"field '{key}' must be a string, got {value!r}")
    return value


def _checked_int(value: Any, key: str, source: str) -> int:
    # bool is an int subclass; JSON true/false is never a valid count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(source, f"field '{key}' must be an integer, got {value!r}")
    if value < 0:
        raise DecodeError(source, f"field '{key}' must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class Measurement:
    download_speed_mbps: int
    latency_ms: int
    downloaded_mb: Optional[int] = None
    buffer_bloat_ms: Optional[int] = None
    user_location: Optional[str] = None
    user_ip: Optional[str] = None

    @classmethod
    def from_fast_payload(cls, payload: Any, source: str = "speed-test output") -> "Measurement":
        """Build a measurement from the camelCase object printed by ``fast --json``."""
        if not isinstance(payload, dict):
            raise DecodeError(source, f"expected a JSON object, got {type(payload).__name__}")
        return cls(
            download_speed_mbps=_required_int(payload, "downloadSpeed", source),
            latency_ms=_required_int(payload, "latency", source),
            downloaded_mb=_optional_int(payload, "downloaded", source),
            buffer_bloat_ms=_optional_int(payload, "bufferBloat", source),
            user_location=_optional_str(payload, "userLocation", source),
            user_ip=_optional_str(payload, "userIp", source),
        )

    @classmethod
    def from_cache_payload(cls, payload: Any, source: str = "cache file") -> "Measurement":
        if not isinstance(payload, dict):
            raise DecodeError(source, f"expected a JSON object, got {type(payload).__name__}")
        return cls(
            download_speed_mbps=_required_int(payload, "download_speed_mbps", source),
            latency_ms=_required_int(payload, "latency_ms", source),
            downloaded_mb=_optional_int(payload, "downloaded_mb", source),
            buffer_bloat_ms=_optional_int(payload, "buffer_bloat_ms", source),
            user_location=_optional_str(payload, "user_location", source),
            user_ip=_optional_str(payload, "user_ip", source),
        )

    def to_cache_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "download_speed_mbps": self.download_speed_mbps,
            "latency_ms": self.latency_ms,
        }
        optional = {
            "downloaded_mb": self.downloaded_mb,
            "buffer_bloat_ms": self.buffer_bloat_ms,
            "user_location": self.user_location,
            "user_ip": self.user_ip,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload
