"""CommandFactory — single place where commands are constructed.

Controllers never instantiate command classes directly; they ask the
factory, which stamps every command with the configured ToolPaths.  Tests
substitute individual builders to observe or fake a specific command.
"""

from __future__ import annotations

from simstation.commands.applications import FetchInstalledApplicationsCommand
from simstation.commands.base import DEFAULT_TOOL_PATHS, ToolPaths
from simstation.commands.battery import FetchBatteryStateCommand, SetBatteryStateCommand
from simstation.commands.processes import FetchActiveProcessesCommand
from simstation.commands.runtimes import FetchDeviceTypesCommand, FetchRuntimesCommand
from simstation.commands.simulators import (
    BootSimulatorCommand,
    CreateSimulatorCommand,
    DeleteSimulatorCommand,
    EraseContentCommand,
    FetchSimulatorsCommand,
    OpenSimulatorCommand,
    ShutdownSimulatorCommand,
    UpdateLocationCommand,
)
from simstation.commands.workspace import OpenPathCommand
from simstation.core.models import BatteryState, CreateParameters


class CommandFactory:
    def __init__(self, paths: ToolPaths | None = None):
        self.paths = paths or DEFAULT_TOOL_PATHS

    def fetch_simulators(self) -> FetchSimulatorsCommand:
        return FetchSimulatorsCommand(self.paths)

    def fetch_runtimes(self) -> FetchRuntimesCommand:
        return FetchRuntimesCommand(self.paths)

    def fetch_device_types(self) -> FetchDeviceTypesCommand:
        return FetchDeviceTypesCommand(self.paths)

    def boot(self, simulator_id: str) -> BootSimulatorCommand:
        return BootSimulatorCommand(simulator_id, self.paths)

    def open_simulator(self, simulator_id: str) -> OpenSimulatorCommand:
        return OpenSimulatorCommand(simulator_id, self.paths)

    def shutdown(self, simulator_id: str) -> ShutdownSimulatorCommand:
        return ShutdownSimulatorCommand(simulator_id, self.paths)

    def erase_content(self, simulator_id: str) -> EraseContentCommand:
        return EraseContentCommand(simulator_id, self.paths)

    def create(self, parameters: CreateParameters) -> CreateSimulatorCommand:
        return CreateSimulatorCommand(parameters, self.paths)

    def delete(self, simulator_id: str) -> DeleteSimulatorCommand:
        return DeleteSimulatorCommand(simulator_id, self.paths)

    def fetch_active_processes(self, simulator_id: str) -> FetchActiveProcessesCommand:
        return FetchActiveProcessesCommand(simulator_id, self.paths)

    def fetch_battery_state(self, simulator_id: str) -> FetchBatteryStateCommand:
        return FetchBatteryStateCommand(simulator_id, self.paths)

    def set_battery_state(self, simulator_id: str, state: BatteryState) -> SetBatteryStateCommand:
        return SetBatteryStateCommand(simulator_id, state, self.paths)

    def fetch_installed_applications(self, simulator_id: str) -> FetchInstalledApplicationsCommand:
        return FetchInstalledApplicationsCommand(simulator_id, self.paths)

    def update_location(self, simulator_id: str, latitude: float, longitude: float) -> UpdateLocationCommand:
        return UpdateLocationCommand(simulator_id, latitude, longitude, self.paths)

    def open_path(self, path: str) -> OpenPathCommand:
        return OpenPathCommand(path, self.paths)
