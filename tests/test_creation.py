"""Tests for SimulatorCreationController."""

import json

import pytest

from simstation.core.creation import SimulatorCreationController
from simstation.core.models import DeviceType, Runtime
from simstation.core.orchestrator import SimulatorOrchestrator

NEW_UDID = "0F1E2D3C-4B5A-6978-8796-A5B4C3D2E1F0"

IPHONE = DeviceType("com.apple.CoreSimulator.SimDeviceType.iPhone-15", "iPhone 15")
IPAD = DeviceType("com.apple.CoreSimulator.SimDeviceType.iPad-Air", "iPad Air")
WATCH = DeviceType("com.apple.CoreSimulator.SimDeviceType.Apple-Watch-Series-9-45mm", "Apple Watch Series 9")

IOS = Runtime("com.apple.CoreSimulator.SimRuntime.iOS-17-0", "iOS 17.0", "17.0",
              supported_device_types=(IPHONE, IPAD))
WATCH_OS = Runtime("com.apple.CoreSimulator.SimRuntime.watchOS-10-0", "watchOS 10.0", "10.0",
                   supported_device_types=(WATCH,))


def runtime_json(runtime: Runtime) -> dict:
    return {
        "identifier": runtime.identifier,
        "name": runtime.name,
        "version": runtime.version,
        "supportedDeviceTypes": [
            {"identifier": d.identifier, "name": d.name} for d in runtime.supported_device_types
        ],
    }


@pytest.fixture
def controller(runner):
    orchestrator = SimulatorOrchestrator(runner, refresh_on_create=False)
    return SimulatorCreationController(orchestrator)


def test_retrieve_runtimes(controller, runner, run):
    runner.respond("list runtimes", stdout=json.dumps({"runtimes": [runtime_json(IOS)]}).encode())

    runtimes = run(controller.retrieve_runtimes())

    assert [r.identifier for r in runtimes] == [IOS.identifier]
    assert runtimes[0].supported_device_types == (IPHONE, IPAD)
    assert controller.runtimes.is_loaded


def test_device_types_follow_selected_runtime(controller):
    assert controller.available_device_types == ()
    controller.select_runtime(IOS)
    assert controller.available_device_types == (IPHONE, IPAD)


def test_changing_runtime_drops_unsupported_device_type(controller):
    controller.select_runtime(IOS)
    controller.select_device_type(IPHONE)
    controller.select_runtime(WATCH_OS)
    assert controller.selected_device_type is None


def test_changing_runtime_keeps_supported_device_type(controller):
    other_ios = Runtime("com.apple.CoreSimulator.SimRuntime.iOS-16-4", "iOS 16.4", "16.4",
                        supported_device_types=(IPHONE,))
    controller.select_runtime(IOS)
    controller.select_device_type(IPHONE)
    controller.select_runtime(other_ios)
    assert controller.selected_device_type == IPHONE


def test_parameters_use_identifiers(controller):
    controller.select_runtime(IOS)
    controller.select_device_type(IPAD)
    controller.select_name("Tablet")

    parameters = controller.parameters
    assert parameters.runtime == IOS.identifier
    assert parameters.device_type == IPAD.identifier
    assert parameters.is_complete


def test_create_incomplete_selection_is_noop(controller, runner, run):
    controller.select_runtime(IOS)
    controller.select_name("Tablet")
    assert run(controller.create()) is None
    assert runner.calls == []


def test_create_runs_simctl(controller, runner, run):
    runner.respond("create", stdout=f"{NEW_UDID}\n".encode())
    controller.select_runtime(IOS)
    controller.select_device_type(IPHONE)
    controller.select_name("My Phone")

    assert run(controller.create()) == NEW_UDID
    (call,) = runner.calls
    assert call.arguments == ("simctl", "create", "My Phone", IPHONE.identifier, IOS.identifier)


def test_reset_clears_selection(controller):
    controller.select_runtime(IOS)
    controller.select_device_type(IPHONE)
    controller.select_name("My Phone")
    controller.reset()
    assert controller.parameters.name == ""
    assert not controller.parameters.is_complete
