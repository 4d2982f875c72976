"""simctl command definitions and their output parsers."""

from simstation.commands.applications import FetchInstalledApplicationsCommand
from simstation.commands.base import DEFAULT_TOOL_PATHS, ShellCommand, ToolPaths
from simstation.commands.battery import (
    FetchBatteryStateCommand,
    SetBatteryStateCommand,
    validate_battery_state,
)
from simstation.commands.factory import CommandFactory
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

__all__ = [
    'BootSimulatorCommand',
    'CommandFactory',
    'CreateSimulatorCommand',
    'DEFAULT_TOOL_PATHS',
    'DeleteSimulatorCommand',
    'EraseContentCommand',
    'FetchActiveProcessesCommand',
    'FetchBatteryStateCommand',
    'FetchDeviceTypesCommand',
    'FetchInstalledApplicationsCommand',
    'FetchRuntimesCommand',
    'FetchSimulatorsCommand',
    'OpenPathCommand',
    'OpenSimulatorCommand',
    'SetBatteryStateCommand',
    'ShellCommand',
    'ShutdownSimulatorCommand',
    'ToolPaths',
    'UpdateLocationCommand',
    'validate_battery_state',
]
