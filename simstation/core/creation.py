"""SimulatorCreationController — runtime / device type / name selection for a new device."""

from __future__ import annotations

from simstation.commands.factory import CommandFactory
from simstation.core.loadable import LoadableValue, load_into
from simstation.core.models import CreateParameters, DeviceType, Runtime
from simstation.core.orchestrator import SimulatorOrchestrator


class SimulatorCreationController:
    def __init__(self, orchestrator: SimulatorOrchestrator, factory: CommandFactory | None = None):
        self.orchestrator = orchestrator
        self.factory = factory or orchestrator.factory
        self.runtimes: LoadableValue = LoadableValue()
        self.selected_runtime: Runtime | None = None
        self.selected_device_type: DeviceType | None = None
        self.selected_name: str = ""

    async def retrieve_runtimes(self) -> list[Runtime]:
        command = self.factory.fetch_runtimes()
        return await load_into(self, "runtimes", command.run(self.orchestrator.runner))

    @property
    def available_device_types(self) -> tuple[DeviceType, ...]:
        if self.selected_runtime is None:
            return ()
        return self.selected_runtime.supported_device_types

    def select_runtime(self, runtime: Runtime) -> None:
        if runtime == self.selected_runtime:
            return
        self.selected_runtime = runtime
        if self.selected_device_type not in runtime.supported_device_types:
            self.selected_device_type = None

    def select_device_type(self, device_type: DeviceType) -> None:
        self.selected_device_type = device_type

    def select_name(self, name: str) -> None:
        self.selected_name = name

    def reset(self) -> None:
        self.selected_runtime = None
        self.selected_device_type = None
        self.selected_name = ""

    @property
    def parameters(self) -> CreateParameters:
        return CreateParameters(
            name=self.selected_name,
            device_type=self.selected_device_type.identifier if self.selected_device_type else None,
            runtime=self.selected_runtime.identifier if self.selected_runtime else None,
        )

    async def create(self) -> str | None:
        """Create the device; None when the selection is incomplete."""
        return await self.orchestrator.create(self.parameters)
