"""Configuration loading helpers for the status-bar speed reporter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .errors import ConfigError, MissingEnvironmentError

CACHE_HOME_VARIABLE = "XDG_CACHE_HOME"
CONFIG_HOME_VARIABLE = "XDG_CONFIG_HOME"
DEFAULT_CONFIG_NAME = "speedbar/config.yaml"


@dataclass
class CacheConfig:
    max_age_seconds: int = 86400
    path: Optional[str] = None
    filename: str = "speedbar/measurement.json"


@dataclass
class FastConfig:
    binary: str = "fast"
    extra_args: List[str] = field(default_factory=list)
    timeout_seconds: Optional[float] = None


@dataclass
class DisplayConfig:
    color: bool = True
    glyph: str = "●"
    colors: Dict[str, str] = field(
        default_factory=lambda: {"good": "#50fa7b", "warning": "#f1fa8c", "bad": "#ff5555"}
    )
    markup_open: str = "%{{F{color}}}"
    markup_close: str = "%{{F-}}"


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = "/tmp/speedbar.log"


@dataclass
class AppConfig:
    cache: CacheConfig = field(default_factory=CacheConfig)
    fast: FastConfig = field(default_factory=FastConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source: Optional[Path] = None


def _section(data: dict, name: str, factory):
    values = data.get(name) or {}
    if not isinstance(values, dict):
        raise ConfigError(f"Configuration section '{name}' must be a mapping")
    try:
        return factory(**values)
    except TypeError as exc:
        raise ConfigError(f"Invalid '{name}' configuration: {exc}") from exc


def _default_config_path() -> Optional[Path]:
    base = os.environ.get(CONFIG_HOME_VARIABLE)
    if not base:
        return None
    candidate = Path(base) / DEFAULT_CONFIG_NAME
    return candidate if candidate.is_file() else None


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from YAML, falling back to defaults when no file exists.

    An explicit ``path`` must exist. Without one, ``$XDG_CONFIG_HOME/speedbar/config.yaml``
    is used when present.
    """

    if path:
        source_path = Path(path)
        if not source_path.is_file():
            raise ConfigError(f"Missing configuration file at {source_path}")
    else:
        source_path = _default_config_path()
        if source_path is None:
            return AppConfig()

    try:
        with source_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read configuration from {source_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration at {source_path} must be a mapping")

    unknown = set(data) - {"cache", "fast", "display", "logging"}
    if unknown:
        raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

    config = AppConfig(
        cache=_section(data, "cache", CacheConfig),
        fast=_section(data, "fast", FastConfig),
        display=_section(data, "display", DisplayConfig),
        logging=_section(data, "logging", LoggingConfig),
        source=source_path,
    )

    return validate_config(config)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_str(value) -> bool:
    return value is None or isinstance(value, str)


def _check_template(name: str, template) -> None:
    if not isinstance(template, str):
        raise ConfigError(f"{name} must be a string")
    try:
        template.format(color="")
    except (AttributeError, KeyError, IndexError, ValueError) as exc:
        raise ConfigError(f"{name} is not a valid template ({exc!r}); only {{color}} is available") from exc


def validate_config(config: AppConfig) -> AppConfig:
    """Reject values of the wrong type so later stages can rely on them."""

    cache = config.cache
    if not isinstance(cache.max_age_seconds, int) or isinstance(cache.max_age_seconds, bool):
        raise ConfigError(f"cache.max_age_seconds must be an integer, got {cache.max_age_seconds!r}")
    if cache.max_age_seconds < 0:
        raise ConfigError("cache.max_age_seconds cannot be negative")
    if not _optional_str(cache.path):
        raise ConfigError(f"cache.path must be a string, got {cache.path!r}")
    if not isinstance(cache.filename, str) or not cache.filename:
        raise ConfigError(f"cache.filename must be a non-empty string, got {cache.filename!r}")

    fast = config.fast
    if not isinstance(fast.binary, str) or not fast.binary:
        raise ConfigError(f"fast.binary must be a non-empty string, got {fast.binary!r}")
    if not isinstance(fast.extra_args, list) or not all(isinstance(arg, str) for arg in fast.extra_args):
        raise ConfigError(f"fast.extra_args must be a list of strings, got {fast.extra_args!r}")
    if fast.timeout_seconds is not None:
        if not _is_number(fast.timeout_seconds) or fast.timeout_seconds <= 0:
            raise ConfigError(f"fast.timeout_seconds must be a positive number, got {fast.timeout_seconds!r}")

    display = config.display
    if not isinstance(display.color, bool):
        raise ConfigError(f"display.color must be true or false, got {display.color!r}")
    if not isinstance(display.glyph, str):
        raise ConfigError(f"display.glyph must be a string, got {display.glyph!r}")
    if not isinstance(display.colors, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in display.colors.items()
    ):
        raise ConfigError(f"display.colors must map band names to strings, got {display.colors!r}")
    _check_template("display.markup_open", display.markup_open)
    _check_template("display.markup_close", display.markup_close)

    if not isinstance(config.logging.level, str):
        raise ConfigError(f"logging.level must be a string, got {config.logging.level!r}")
    if not _optional_str(config.logging.file):
        raise ConfigError(f"logging.file must be a string, got {config.logging.file!r}")

    return config


def resolve_cache_path(config: AppConfig) -> Path:
    """Return the canonical cache file location.

    An explicit ``cache.path`` wins; otherwise the file lives under
    ``$XDG_CACHE_HOME``, which must then be set.
    """

    if config.cache.path:
        return Path(config.cache.path).expanduser()

    base = os.environ.get(CACHE_HOME_VARIABLE)
    if not base:
        raise MissingEnvironmentError(CACHE_HOME_VARIABLE)
    return Path(base) / config.cache.filename
