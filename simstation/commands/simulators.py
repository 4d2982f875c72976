"""Simulator lifecycle commands: roster, boot/open/shutdown, erase, create, delete."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

import simstation.log  # registers TRACE level and logger.trace()
from simstation.commands.base import ShellCommand, ToolPaths
from simstation.core.models import CreateParameters, OSName, Simulator, SimulatorState
from simstation.errors import DecodingError, InvalidOutputError, TerminationStatusError
from simstation.platform.process_adapter import CommandDescriptor, ProcessResult

logger = logging.getLogger(__name__)

# simctl prints new device identifiers as upper-case RFC 4122 UUIDs
UUID_PATTERN = re.compile(r"^[0-9A-F]{8}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{4}-[0-9A-F]{12}$")

Roster = dict[OSName, tuple[Simulator, ...]]


# ------------------------------------------------------------------
# Roster
# ------------------------------------------------------------------

def _optional(entry: dict, key: str, kind: type) -> Any:
    value = entry.get(key)
    if kind is int and isinstance(value, bool):
        return None
    return value if isinstance(value, kind) else None


def parse_simulator(entry: Any, os_name: OSName | None) -> Simulator | None:
    """Build a Simulator from one ``list devices`` dictionary.

    Missing or mistyped optional fields become None. Entries without a
    ``udid`` cannot be addressed by any command and are skipped.
    """
    if not isinstance(entry, dict):
        return None
    udid = _optional(entry, "udid", str)
    if not udid:
        return None

    device_type = _optional(entry, "deviceTypeIdentifier", str)
    if device_type is not None:
        device_type = device_type.rsplit(".", 1)[-1]

    return Simulator(
        udid=udid,
        name=_optional(entry, "name", str),
        device_type_identifier=device_type,
        os=os_name,
        state=SimulatorState.parse(entry.get("state")),
        is_available=_optional(entry, "isAvailable", bool),
        data_path=_optional(entry, "dataPath", str),
        log_path=_optional(entry, "logPath", str),
        data_path_size=_optional(entry, "dataPathSize", int),
    )


class FetchSimulatorsCommand(ShellCommand[Roster]):
    """``simctl list devices --json`` grouped by canonical OS key, sorted."""

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("list", "devices", "--json")

    def parse(self, result: ProcessResult) -> Roster:
        try:
            payload = json.loads(result.stdout)
        except ValueError as exc:
            raise DecodingError(f"Invalid device list JSON: {exc}") from exc

        devices = payload.get("devices") if isinstance(payload, dict) else None
        if not isinstance(devices, dict):
            raise DecodingError("Device list has no 'devices' mapping")

        groups: dict[OSName, list[Simulator]] = {}
        for raw_key, entries in devices.items():
            if not isinstance(entries, list):
                continue
            os_name = OSName.from_runtime_key(raw_key)
            simulators = [s for s in (parse_simulator(e, os_name) for e in entries) if s is not None]
            if not simulators:
                logger.trace("No usable devices under %s", raw_key)  # type: ignore[attr-defined]
                continue
            groups.setdefault(os_name, []).extend(simulators)

        return {key: tuple(groups[key]) for key in sorted(groups)}


# ------------------------------------------------------------------
# Power state
# ------------------------------------------------------------------

class BootSimulatorCommand(ShellCommand[None]):
    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("boot", self.simulator_id)


class ShutdownSimulatorCommand(ShellCommand[None]):
    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("shutdown", self.simulator_id)


class OpenSimulatorCommand(ShellCommand[None]):
    """Boot the device, then bring it up in Simulator.app."""

    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def prerequisites(self) -> Sequence[ShellCommand]:
        return (BootSimulatorCommand(self.simulator_id, self.paths),)

    def descriptor(self) -> CommandDescriptor:
        return CommandDescriptor(
            self.paths.open,
            ("-a", self.paths.simulator_app, "--args", "-CurrentDeviceUDID", self.simulator_id),
        )


class EraseContentCommand(ShellCommand[None]):
    """Shut down, erase, then reopen the device (whether or not it was open before)."""

    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def prerequisites(self) -> Sequence[ShellCommand]:
        return (ShutdownSimulatorCommand(self.simulator_id, self.paths),)

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("erase", self.simulator_id)

    def follow_ups(self) -> Sequence[ShellCommand]:
        return (OpenSimulatorCommand(self.simulator_id, self.paths),)


# ------------------------------------------------------------------
# Creation / deletion
# ------------------------------------------------------------------

class CreateSimulatorCommand(ShellCommand[str]):
    """``simctl create``; returns the new device's UDID."""

    def __init__(self, parameters: CreateParameters, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.parameters = parameters

    def descriptor(self) -> CommandDescriptor:
        p = self.parameters
        return self.simctl("create", p.name, p.device_type, p.runtime)

    def parse(self, result: ProcessResult) -> str:
        udid = "".join(self.decode_text(result).split())
        if not UUID_PATTERN.match(udid):
            raise InvalidOutputError(f"simctl create did not print a device UUID: {udid!r}")
        return udid


class DeleteSimulatorCommand(ShellCommand[None]):
    def __init__(self, simulator_id: str, paths: ToolPaths | None = None):
        super().__init__(paths)
        self.simulator_id = simulator_id

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("delete", self.simulator_id)

    def parse(self, result: ProcessResult) -> None:
        if result.returncode != 0:
            raise TerminationStatusError(result.returncode)


# ------------------------------------------------------------------
# Location
# ------------------------------------------------------------------

class UpdateLocationCommand(ShellCommand[None]):
    """Override the simulated GPS position."""

    def __init__(self, simulator_id: str, latitude: float, longitude: float, paths: ToolPaths | None = None):
        super().__init__(paths)
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {longitude}")
        self.simulator_id = simulator_id
        self.latitude = latitude
        self.longitude = longitude

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("location", self.simulator_id, "set", f"{self.latitude},{self.longitude}")
