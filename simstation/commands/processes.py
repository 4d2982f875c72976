"""Active processes inside a booted device (``launchctl list``)."""

from __future__ import annotations

import logging
import shlex

import simstation.log  # registers TRACE level and logger.trace()
from simstation.commands.base import ShellCommand, ToolPaths
from simstation.core.models import SimulatorProcess
from simstation.platform.process_adapter import CommandDescriptor, ProcessResult

logger = logging.getLogger(__name__)


def parse_launchctl_list(text: str) -> list[SimulatorProcess]:
    """Header line is skipped; lines without exactly 3 tab-separated fields are dropped."""
    processes = []
    for line in text.split("\n")[1:]:
        fields = line.split("\t")
        if len(fields) != 3:
            if line:
                logger.trace("Dropping launchctl line: %r", line)  # type: ignore[attr-defined]
            continue
        pid, status, label = fields
        processes.append(SimulatorProcess(pid=pid, status=status, label=label))
    return processes


class FetchActiveProcessesCommand(ShellCommand[list]):
    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return CommandDescriptor(
            self.paths.bash,
            ("-c", shlex.join([self.paths.xcrun, "simctl", "spawn", self.simulator_id, "launchctl", "list"])),
        )

    def parse(self, result: ProcessResult) -> list[SimulatorProcess]:
        return parse_launchctl_list(self.decode_text(result))
