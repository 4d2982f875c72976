"""ShellCommand — typed unit of work built on a CommandDescriptor.

A command knows three things: how to build its descriptor, which commands
must run before it (prerequisites) and after it (follow-ups), and how to
turn the raw process result into a typed value.  ``run()`` drives the
composition strictly in order:

    prerequisites (in order) -> primary descriptor -> parse -> follow-ups (in order)

The first failure aborts the chain and propagates.  Steps that already
completed are not undone; a failing erase leaves the device shut down.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar

import simstation.log  # registers TRACE level and logger.trace()
from simstation.errors import DecodingError
from simstation.platform.process_adapter import CommandDescriptor, IProcessRunner, ProcessResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ToolPaths:
    """Locations of the host programs every command is built on."""

    xcrun: str = "/usr/bin/xcrun"
    open: str = "/usr/bin/open"
    bash: str = "/bin/bash"
    simulator_app: str = "Simulator"


DEFAULT_TOOL_PATHS = ToolPaths()


class ShellCommand(ABC, Generic[T]):
    """Base class for all simctl-backed commands."""

    def __init__(self, paths: ToolPaths | None = None):
        self.paths = paths or DEFAULT_TOOL_PATHS

    # -- composition -----------------------------------------------------

    @abstractmethod
    def descriptor(self) -> CommandDescriptor:
        """Build the primary process descriptor."""

    def prerequisites(self) -> Sequence["ShellCommand"]:
        return ()

    def follow_ups(self) -> Sequence["ShellCommand"]:
        return ()

    def parse(self, result: ProcessResult) -> T:
        """Turn the primary result into a typed value. Default: nothing to parse."""
        return None  # type: ignore[return-value]

    async def run(self, runner: IProcessRunner) -> T:
        for command in self.prerequisites():
            logger.trace("%r: prerequisite %r", self, command)  # type: ignore[attr-defined]
            await command.run(runner)

        result = await runner.run(self.descriptor())
        value = self.parse(result)

        for command in self.follow_ups():
            logger.trace("%r: follow-up %r", self, command)  # type: ignore[attr-defined]
            await command.run(runner)

        return value

    # -- helpers ---------------------------------------------------------

    def simctl(self, *arguments: str) -> CommandDescriptor:
        return CommandDescriptor(self.paths.xcrun, ("simctl", *arguments))

    @staticmethod
    def decode_text(result: ProcessResult) -> str:
        try:
            return result.text
        except UnicodeDecodeError as exc:
            raise DecodingError(f"Output is not valid UTF-8: {exc}") from exc

    def __repr__(self) -> str:
        return f"{type(self).__name__}({' '.join(self.descriptor().arguments)!r})"
