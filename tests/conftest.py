"""Shared fixtures: a scripted IProcessRunner and simctl output builders."""

import asyncio
import json
import os
import plistlib

import pytest

from simstation.errors import ProcessStderrError
from simstation.platform.process_adapter import CommandDescriptor, IProcessRunner, ProcessResult


class _Response:
    def __init__(self, stdout=b"", returncode=0, stderr=None, error=None, gate=None):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.gate = gate


def short_name(descriptor: CommandDescriptor) -> str:
    """``boot`` for ``xcrun simctl boot X``; ``open`` / ``bash`` for the host tools."""
    args = descriptor.arguments
    if args[:1] == ("simctl",) and len(args) > 1:
        return args[1]
    return os.path.basename(descriptor.executable)


class FakeProcessRunner(IProcessRunner):
    """Records every descriptor and answers from a list of scripted responses.

    ``respond("list devices", stdout=...)`` matches any descriptor whose argv
    (executable reduced to its basename) contains those tokens contiguously.
    Unmatched descriptors succeed with empty output.
    """

    def __init__(self):
        self.calls: list[CommandDescriptor] = []
        self._responses: list[tuple[tuple[str, ...], _Response]] = []

    def respond(self, match: str, **kwargs) -> None:
        self._responses.append((tuple(match.split()), _Response(**kwargs)))

    def _match(self, descriptor: CommandDescriptor) -> _Response:
        argv = [os.path.basename(descriptor.executable), *descriptor.arguments]
        for tokens, response in self._responses:
            n = len(tokens)
            if any(tuple(argv[i:i + n]) == tokens for i in range(len(argv) - n + 1)):
                return response
        return _Response()

    async def run(self, descriptor: CommandDescriptor) -> ProcessResult:
        self.calls.append(descriptor)
        response = self._match(descriptor)
        if response.gate is not None:
            await response.gate.wait()
        if response.error is not None:
            raise response.error
        if response.stderr:
            raise ProcessStderrError(response.stderr, response.returncode)
        return ProcessResult(stdout=response.stdout, returncode=response.returncode)

    @property
    def called(self) -> list[str]:
        return [short_name(d) for d in self.calls]


@pytest.fixture
def runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def run():
    """Run a coroutine to completion (tests stay plain functions)."""
    return asyncio.run


IOS_17 = "com.apple.CoreSimulator.SimRuntime.iOS-17-0"
IOS_16 = "com.apple.CoreSimulator.SimRuntime.iOS-16-4"
WATCH_10 = "com.apple.CoreSimulator.SimRuntime.watchOS-10-0"


def device(udid, name="iPhone 15", state="Shutdown", **extra) -> dict:
    entry = {
        "udid": udid,
        "name": name,
        "state": state,
        "isAvailable": True,
        "deviceTypeIdentifier": "com.apple.CoreSimulator.SimDeviceType.iPhone-15",
        "dataPath": f"/Users/dev/Library/Developer/CoreSimulator/Devices/{udid}/data",
        "logPath": f"/Users/dev/Library/Logs/CoreSimulator/{udid}",
        "dataPathSize": 18223104,
    }
    entry.update(extra)
    return entry


def roster(groups: dict) -> bytes:
    return json.dumps({"devices": groups}).encode()


def app_entry(bundle_id, app_type="User", **extra) -> dict:
    entry = {
        "ApplicationType": app_type,
        "Bundle": f"file:///apps/{bundle_id}.app/",
        "CFBundleDisplayName": bundle_id.rsplit(".", 1)[-1].title(),
        "CFBundleExecutable": bundle_id.rsplit(".", 1)[-1],
        "CFBundleIdentifier": bundle_id,
        "CFBundleName": bundle_id.rsplit(".", 1)[-1],
        "CFBundleVersion": "1",
        "Path": f"/apps/{bundle_id}.app",
    }
    entry.update(extra)
    return entry


def binary_plist(payload) -> bytes:
    return plistlib.dumps(payload, fmt=plistlib.FMT_BINARY)


@pytest.fixture
def simctl_output():
    """Builders for realistic simctl output, bundled so tests need no imports from here."""

    class Builders:
        IOS_17 = IOS_17
        IOS_16 = IOS_16
        WATCH_10 = WATCH_10
        device = staticmethod(device)
        roster = staticmethod(roster)
        app_entry = staticmethod(app_entry)
        binary_plist = staticmethod(binary_plist)

    return Builders
