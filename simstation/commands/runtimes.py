"""Catalog commands: installed runtimes and device types (JSON)."""

from __future__ import annotations

import json

from simstation.commands.base import ShellCommand
from simstation.core.models import DeviceType, Runtime
from simstation.errors import DecodingError
from simstation.platform.process_adapter import CommandDescriptor, ProcessResult


def _decode_list(result: ProcessResult, key: str) -> list:
    try:
        payload = json.loads(result.stdout)
    except ValueError as exc:
        raise DecodingError(f"Invalid {key} JSON: {exc}") from exc
    items = payload.get(key) if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise DecodingError(f"JSON has no '{key}' list")
    return items


class FetchRuntimesCommand(ShellCommand[list]):
    """``simctl list runtimes -j`` decoded into Runtime values."""

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("list", "runtimes", "-j")

    def parse(self, result: ProcessResult) -> list[Runtime]:
        try:
            return [Runtime.from_json(item) for item in _decode_list(result, "runtimes")]
        except (KeyError, TypeError, AttributeError) as exc:
            raise DecodingError(f"Malformed runtime entry: {exc!r}") from exc


class FetchDeviceTypesCommand(ShellCommand[list]):
    """``simctl list devicetypes -j`` decoded into DeviceType values."""

    def descriptor(self) -> CommandDescriptor:
        return self.simctl("list", "devicetypes", "-j")

    def parse(self, result: ProcessResult) -> list[DeviceType]:
        try:
            return [DeviceType.from_json(item) for item in _decode_list(result, "devicetypes")]
        except (KeyError, TypeError, AttributeError) as exc:
            raise DecodingError(f"Malformed device type entry: {exc!r}") from exc
