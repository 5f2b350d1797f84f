"""Entry point: print one status-bar line with the current internet speed."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from speedbar import ApplicationContext
from speedbar.config import AppConfig, load_config, validate_config
from speedbar.errors import SpeedbarError

LOGGER = logging.getLogger("speedbar")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Report cached internet speed for a status bar")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--max-age", type=int, default=None, help="Reuse a cached result up to this many seconds old"
    )
    parser.add_argument(
        "--timeout", type=float, default=None, help="Abort the speed test after this many seconds"
    )
    parser.add_argument("--refresh", action="store_true", help="Ignore the cache and run a new test")
    parser.add_argument("--no-color", action="store_true", help="Omit the latency glyph markup")
    parser.add_argument("--log-level", default=None, help="Override the log level")
    parser.add_argument("--log-file", default=None, help="Override the log file path")
    return parser.parse_args(argv)


def apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    if args.max_age is not None:
        config.cache.max_age_seconds = args.max_age
    if args.timeout is not None:
        config.fast.timeout_seconds = args.timeout
    if args.no_color:
        config.display.color = False
    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.file = args.log_file
    return validate_config(config)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = apply_overrides(load_config(args.config), args)
        context = ApplicationContext(config)
        line = context.status_line(refresh=args.refresh)
    except SpeedbarError as exc:
        LOGGER.error("%s", exc)
        return 1

    print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
