"""Failure taxonomy for the command layer.

Every failure a command or the orchestrator can surface derives from
``SimStationError`` so callers can catch the whole family at once:

* ``ProcessError``: the child process could not be launched, wrote to
  stderr, or exited with a nonzero status where the exit code matters.
* ``DecodingError``: structured output (JSON, property list, UTF-8 text)
  could not be decoded into the expected shape.
* ``OutputFormatError``: the process succeeded and the output decoded, but
  its content (line count, identifier shape) is not what the tool prints.
"""

from __future__ import annotations


class SimStationError(Exception):
    """Base class for every SimStation failure."""


# ------------------------------------------------------------------
# Process failures
# ------------------------------------------------------------------

class ProcessError(SimStationError):
    """The external process did not complete cleanly."""


class ProcessLaunchError(ProcessError):
    """The executable is missing or cannot be run."""

    def __init__(self, executable: str, reason: str):
        super().__init__(f"Unable to launch {executable}: {reason}")
        self.executable = executable
        self.reason = reason


class ProcessStderrError(ProcessError):
    """The process wrote to standard error (regardless of exit status)."""

    def __init__(self, stderr: str, returncode: int | None = None):
        super().__init__(stderr)
        self.stderr = stderr
        self.returncode = returncode


class TerminationStatusError(ProcessError):
    """The process exited with a nonzero status and wrote nothing to stderr."""

    def __init__(self, returncode: int):
        super().__init__(f"Process terminated with status {returncode}")
        self.returncode = returncode


# ------------------------------------------------------------------
# Output failures
# ------------------------------------------------------------------

class DecodingError(SimStationError):
    """Structured output could not be decoded."""


class OutputFormatError(SimStationError):
    """Output decoded fine but does not have the expected shape."""


class InvalidOutputError(OutputFormatError):
    """Output does not match the expected pattern (e.g. a device UUID)."""


class UnexpectedOutputError(OutputFormatError):
    """An expected marker line is missing from the output."""


class UnexpectedLineCountError(OutputFormatError):
    """The output has a number of lines the parser does not understand."""

    def __init__(self, count: int, expected: tuple[int, ...]):
        super().__init__(
            f"Unexpected number of lines decoded: {count} "
            f"(expected one of {', '.join(str(e) for e in expected)})"
        )
        self.count = count
        self.expected = expected


# ------------------------------------------------------------------
# Request validation
# ------------------------------------------------------------------

class InvalidBatteryStateError(SimStationError, ValueError):
    """A battery override was rejected before any process was launched."""
