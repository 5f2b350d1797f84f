"""Speed-test runner backed by the fast.com command line client."""

from __future__ import annotations

import json
import logging
import subprocess
from typing import List

from ..config import FastConfig
from ..errors import (
    DecodeError,
    ProcessExecutionError,
    ProcessInvocationError,
    ProcessTimeoutError,
)
from .models import Measurement

LOGGER = logging.getLogger(__name__)


def build_command(config: FastConfig) -> List[str]:
    command = [config.binary, "--json"]
    if config.extra_args:
        command += list(config.extra_args)
    return command


def run_fast_test(config: FastConfig) -> Measurement:
    """Run one speed test and decode its JSON report.

    Blocks until the tool exits, or until ``timeout_seconds`` when configured.
    """

    command = build_command(config)
    LOGGER.info("Running speed test: %s", " ".join(command))
    try:
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=config.timeout_seconds,
        )
    except subprocess.TimeoutExpired as exc:
        raise ProcessTimeoutError(
            f"'{config.binary}' did not finish within {config.timeout_seconds}s"
        ) from exc
    except OSError as exc:
        raise ProcessInvocationError(f"Failed to execute '{config.binary}': {exc}") from exc

    if completed.returncode != 0:
        raise ProcessExecutionError(config.binary, completed.returncode, completed.stderr or "")

    return parse_fast_output(completed.stdout)


def parse_fast_output(output: str) -> Measurement:
    source = "speed-test output"
    try:
        data = json.loads(output)
    except json.JSONDecodeError as exc:
        LOGGER.debug("Undecodable speed-test output: %r", output[:200])
        raise DecodeError(source, f"invalid JSON ({exc})") from exc
    return Measurement.from_fast_payload(data, source=source)
