"""Status-bar battery commands.

``simctl status_bar <id> list`` prints two lines when no override is
active.  With an override it prints a third line such as::

    Current Status Bar Overrides:
    ...
    Battery State: 1, Level: 42, Details: ...
"""

from __future__ import annotations

from simstation.commands.base import ShellCommand, ToolPaths
from simstation.core.models import DEFAULT_BATTERY_STATE, BatteryChargeState, BatteryState
from simstation.errors import (
    DecodingError,
    InvalidBatteryStateError,
    UnexpectedLineCountError,
    UnexpectedOutputError,
)
from simstation.platform.process_adapter import CommandDescriptor, ProcessResult

BATTERY_MARKER = "Battery State:"


def validate_battery_state(state: BatteryState) -> None:
    """Raise InvalidBatteryStateError unless *state* can be sent to simctl."""
    if isinstance(state.level, bool) or not isinstance(state.level, int):
        raise InvalidBatteryStateError(f"Battery level must be an integer, got {state.level!r}")
    if not 0 <= state.level <= 100:
        raise InvalidBatteryStateError(f"Battery level must be within 0..100, got {state.level}")
    if state.charge_state is BatteryChargeState.UNKNOWN:
        raise InvalidBatteryStateError("Battery charge state must be known")


def parse_battery_line(line: str) -> BatteryState:
    charge_state: BatteryChargeState | None = None
    level: int | None = None

    for component in line.split(","):
        if "State:" in component:
            tokens = component.split()
            if tokens:
                charge_state = BatteryChargeState.from_code(tokens[-1])
        elif "Level:" in component:
            tokens = component.split()
            try:
                level = int(tokens[-1])
            except (IndexError, ValueError):
                level = None

    if charge_state is None or level is None:
        raise DecodingError(f"Unable to decode battery state or level from {line!r}")
    return BatteryState(charge_state=charge_state, level=level)


class FetchBatteryStateCommand(ShellCommand[BatteryState]):
    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("status_bar", self.simulator_id, "list")

    def parse(self, result: ProcessResult) -> BatteryState:
        lines = [line for line in self.decode_text(result).split("\n") if line]

        if len(lines) == 2:
            return DEFAULT_BATTERY_STATE
        if len(lines) != 3:
            raise UnexpectedLineCountError(len(lines), expected=(2, 3))

        battery_line = next((line for line in reversed(lines) if BATTERY_MARKER in line), None)
        if battery_line is None:
            raise UnexpectedOutputError(f"No '{BATTERY_MARKER}' line in status bar overrides")
        return parse_battery_line(battery_line)


class SetBatteryStateCommand(ShellCommand[None]):
    """Override the status-bar battery. Callers validate with validate_battery_state() first."""

    def __init__(self, simulator_id: str, state: BatteryState, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id
        self.state = state

    def descriptor(self) -> CommandDescriptor:
        return self.simctl(
            "status_bar", self.simulator_id, "override",
            "--batteryState", self.state.charge_state.value,
            "--batteryLevel", str(self.state.level),
        )
