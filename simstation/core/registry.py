"""DeviceRegistry — the authoritative roster of simulators.

Groups are stored as an immutable generation: a plain dict of tuples of
frozen Simulator records that is never modified after it is published.
Every mutation builds the next generation and swaps it in under a lock,
so a snapshot is always one whole generation, never a half-written one.

Only SimulatorOrchestrator calls the mutating methods.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from types import MappingProxyType
from typing import Iterator, Mapping

import simstation.log  # registers TRACE level and logger.trace()
from simstation.core.models import OSName, Simulator, SimulatorState

logger = logging.getLogger(__name__)

Groups = Mapping[OSName, tuple[Simulator, ...]]


class DeviceRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._groups: dict[OSName, tuple[Simulator, ...]] = {}
        self._generation = 0

    # -- reads -----------------------------------------------------------

    def snapshot(self) -> Groups:
        with self._lock:
            return MappingProxyType(self._groups)

    @property
    def generation(self) -> int:
        return self._generation

    def find(self, udid: str) -> Simulator | None:
        for group in self.snapshot().values():
            for simulator in group:
                if simulator.udid == udid:
                    return simulator
        return None

    def __iter__(self) -> Iterator[Simulator]:
        for group in self.snapshot().values():
            yield from group

    def __len__(self) -> int:
        return sum(len(group) for group in self.snapshot().values())

    # -- writes (orchestrator only) ----------------------------------------

    def replace(self, roster: Mapping[OSName, tuple[Simulator, ...]]) -> Groups:
        """Install a freshly fetched roster as the next generation.

        A device whose parsed state is unknown keeps the state it had in
        the previous generation. Empty groups are dropped.
        """
        with self._lock:
            known = {
                s.udid: s.state
                for group in self._groups.values()
                for s in group
                if s.state is not None
            }
            groups: dict[OSName, tuple[Simulator, ...]] = {}
            for os_name, simulators in roster.items():
                merged = tuple(
                    dataclasses.replace(s, state=known[s.udid])
                    if s.state is None and s.udid in known else s
                    for s in simulators
                )
                if merged:
                    groups[os_name] = merged
            self._swap(groups)
            return MappingProxyType(groups)

    def update_state(self, simulator: Simulator, state: SimulatorState) -> Simulator | None:
        """Set the state of *simulator* (matched by udid). Returns the new record."""
        with self._lock:
            location = self._locate(simulator)
            if location is None:
                logger.debug("Cannot update %s: not in registry", simulator.udid)
                return None
            os_name, index = location
            group = list(self._groups[os_name])
            updated = dataclasses.replace(group[index], state=state)
            group[index] = updated

            groups = dict(self._groups)
            groups[os_name] = tuple(group)
            self._swap(groups)
            return updated

    def remove(self, simulator: Simulator) -> bool:
        """Remove *simulator*; a group left empty is removed with it."""
        with self._lock:
            location = self._locate(simulator)
            if location is None:
                return False
            os_name, index = location
            group = self._groups[os_name][:index] + self._groups[os_name][index + 1:]

            groups = dict(self._groups)
            if group:
                groups[os_name] = group
            else:
                del groups[os_name]
            self._swap(groups)
            return True

    # -- internals -------------------------------------------------------

    def _locate(self, simulator: Simulator) -> tuple[OSName, int] | None:
        # Look in the device's own group first, then anywhere (it may have moved)
        candidates = []
        if simulator.os is not None and simulator.os in self._groups:
            candidates.append(simulator.os)
        candidates.extend(k for k in self._groups if k != simulator.os)

        for os_name in candidates:
            for index, existing in enumerate(self._groups[os_name]):
                if existing.udid == simulator.udid:
                    return os_name, index
        return None

    def _swap(self, groups: dict[OSName, tuple[Simulator, ...]]) -> None:
        self._groups = groups
        self._generation += 1
        logger.trace("Registry generation %d: %d groups", self._generation, len(groups))  # type: ignore[attr-defined]
