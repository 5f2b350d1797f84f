"""Exception hierarchy shared by every stage of a speedbar run."""

from __future__ import annotations


class SpeedbarError(Exception):
    """Base class for failures that end a run without a status line."""


class ConfigError(SpeedbarError):
    pass


class MissingEnvironmentError(SpeedbarError):
    """A required environment variable is unset or empty."""

    def __init__(self, variable: str):
        super().__init__(f"Environment variable {variable} is not set")
        self.variable = variable


class CacheMetadataError(SpeedbarError):
    """The cache file cannot be stat'ed or is not a regular file."""


class ClockError(SpeedbarError):
    """Elapsed time since the cache was modified could not be computed."""


class ProcessInvocationError(SpeedbarError):
    """The speed-test executable could not be started."""


class ProcessTimeoutError(SpeedbarError):
    pass


class ProcessExecutionError(SpeedbarError):
    """The speed-test executable ran but reported failure."""

    def __init__(self, command: str, returncode: int, stderr: str):
        detail = stderr.strip() or "<no error output>"
        super().__init__(f"'{command}' exited with status {returncode}: {detail}")
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class DecodeError(SpeedbarError):
    """Structured output could not be turned into a Measurement."""

    def __init__(self, source: str, cause: object):
        super().__init__(f"Failed to decode {source}: {cause}")
        self.source = source


class EncodeError(SpeedbarError):
    pass


class CacheReadError(SpeedbarError):
    pass


class CacheWriteError(SpeedbarError):
    pass
