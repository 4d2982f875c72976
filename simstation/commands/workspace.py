"""Host-side helpers that open Finder locations for a device or app."""

from __future__ import annotations

from simstation.commands.base import ShellCommand, ToolPaths
from simstation.platform.process_adapter import CommandDescriptor


class OpenPathCommand(ShellCommand[None]):
    def __init__(self, path: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        if not path:
            raise ValueError("Path to open must not be empty")
        self.path = path

    def descriptor(self) -> CommandDescriptor:
        return CommandDescriptor(self.paths.open, (self.path,))
