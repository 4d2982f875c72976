"""SimulatorOrchestrator — sequences simulator commands and owns the registry.

The registry is written only here, and only after a command has completed
successfully.  A failed or cancelled command leaves the registry exactly as
it was, so the UI keeps showing the last known-good state instead of an
optimistic guess.

Every operation records its progress in a LoadableValue on ``self.state``,
publishes ``COMMAND_FAILED`` on error, and re-raises the error to the caller.
No operation is retried.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, TypeVar

import simstation.log  # registers TRACE level and logger.trace()
from simstation.commands.factory import CommandFactory
from simstation.core.event_bus import EventBus
from simstation.core.events import (
    CommandFailedEventData,
    Event,
    EventType,
    RosterEventData,
    SimulatorCreatedEventData,
    StateChangeEventData,
)
from simstation.core.loadable import LoadableValue, load_into
from simstation.core.models import CreateParameters, Simulator, SimulatorState
from simstation.core.registry import DeviceRegistry, Groups
from simstation.errors import SimStationError
from simstation.platform.process_adapter import IProcessRunner

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class OrchestratorState:
    roster: LoadableValue = field(default_factory=LoadableValue)
    updating: LoadableValue = field(default_factory=LoadableValue)
    deleting: LoadableValue = field(default_factory=LoadableValue)
    creating: LoadableValue = field(default_factory=LoadableValue)
    erasing: LoadableValue = field(default_factory=LoadableValue)


class SimulatorOrchestrator:
    """Single writer of the simulator registry."""

    def __init__(
        self,
        runner: IProcessRunner,
        factory: CommandFactory | None = None,
        event_bus: EventBus | None = None,
        refresh_on_create: bool = True,
        debug: bool = False,
    ):
        self.runner = runner
        self.factory = factory or CommandFactory()
        self.bus = event_bus or EventBus()
        self.debug = debug
        self.state = OrchestratorState()
        self._registry = DeviceRegistry()
        self._refresh_tasks: set[asyncio.Task] = set()

        if refresh_on_create:
            self.bus.subscribe(EventType.SIMULATOR_CREATED, self._on_simulator_created)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def snapshot(self) -> Groups:
        return self._registry.snapshot()

    def find(self, udid: str) -> Simulator | None:
        return self._registry.find(udid)

    @property
    def generation(self) -> int:
        return self._registry.generation

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def retrieve(self) -> Groups:
        """Fetch the roster and install it as one atomic replacement."""
        roster = await self._track("roster", self.factory.fetch_simulators().run(self.runner))
        groups = self._registry.replace(roster)
        logger.debug("Roster refreshed: %d devices in %d groups", len(self._registry), len(groups))
        self.bus.publish(Event(EventType.ROSTER_UPDATED, RosterEventData(groups)))
        return groups

    async def set_state(self, simulator: Simulator, target: SimulatorState) -> Simulator | None:
        """Boot (open) or shut down *simulator*; the registry changes only on success."""
        if target is SimulatorState.BOOTED:
            command = self.factory.open_simulator(simulator.udid)
        elif target is SimulatorState.SHUTDOWN:
            command = self.factory.shutdown(simulator.udid)
        else:
            raise ValueError(f"Unsupported target state: {target!r}")

        await self._track("updating", command.run(self.runner), simulator)
        return self._apply_state(simulator, target)

    async def delete(self, simulator: Simulator) -> bool:
        """Delete *simulator*; on success it leaves the registry (and its group, if emptied)."""
        await self._track("deleting", self.factory.delete(simulator.udid).run(self.runner), simulator)
        removed = self._registry.remove(simulator)
        if removed:
            logger.info("Deleted simulator %s (%s)", simulator.name, simulator.udid)
            self.bus.publish(Event(EventType.SIMULATOR_DELETED, simulator))
        return removed

    async def create(self, parameters: CreateParameters) -> str | None:
        """Create a simulator and broadcast SIMULATOR_CREATED.

        Returns None without launching anything when the runtime or device
        type is missing or the name is too short.
        """
        if not parameters.is_complete:
            logger.debug("Skipping create: incomplete parameters %r", parameters)
            return None

        udid = await self._track("creating", self.factory.create(parameters).run(self.runner))
        logger.info("Created simulator %r (%s)", parameters.name, udid)
        self.bus.publish(Event(EventType.SIMULATOR_CREATED, SimulatorCreatedEventData(udid, parameters)))
        return udid

    async def erase_content(self, simulator: Simulator) -> Simulator | None:
        """Shut down, erase and reopen *simulator*.

        A failure part-way through is not rolled back (the device may stay
        shut down); the roster is refreshed instead so it reflects reality.
        """
        try:
            await self._track("erasing", self.factory.erase_content(simulator.udid).run(self.runner), simulator)
        except SimStationError:
            self._schedule_refresh()
            raise
        return self._apply_state(simulator, SimulatorState.BOOTED)

    # ------------------------------------------------------------------
    # Background refresh
    # ------------------------------------------------------------------

    async def wait_for_refresh(self) -> None:
        """Wait until every scheduled roster refresh has finished."""
        while self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    def _on_simulator_created(self, event: Event) -> None:
        self._schedule_refresh()

    def _schedule_refresh(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; roster refresh skipped")
            return
        task = loop.create_task(self._refresh())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _refresh(self) -> None:
        try:
            await self.retrieve()
        except SimStationError:
            # Already recorded in state.roster and published as COMMAND_FAILED
            pass

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_state(self, simulator: Simulator, target: SimulatorState) -> Simulator | None:
        previous = self._registry.find(simulator.udid)
        updated = self._registry.update_state(simulator, target)
        if updated is not None:
            logger.info("Simulator %s (%s) is now %s", updated.name, updated.udid, target.value)
            self.bus.publish(Event(
                EventType.SIMULATOR_STATE_CHANGED,
                StateChangeEventData(updated, previous.state if previous else None),
            ))
        return updated

    async def _track(self, slot: str, work: Awaitable[T], simulator: Simulator | None = None) -> T:
        try:
            return await load_into(self.state, slot, work)
        except SimStationError as exc:
            logger.warning("%s failed%s: %s", slot, f" for {simulator.udid}" if simulator else "", exc)
            self.bus.publish(Event(EventType.COMMAND_FAILED, CommandFailedEventData(slot, exc, simulator)))
            raise
        except asyncio.CancelledError:
            logger.debug("%s cancelled", slot)
            raise
