"""Typed event definitions (dataclasses)."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Mapping

from simstation.core.models import CreateParameters, OSName, Simulator, SimulatorState


class EventType(Enum):
    # Registry
    ROSTER_UPDATED = auto()
    SIMULATOR_STATE_CHANGED = auto()
    SIMULATOR_DELETED = auto()
    # Creation broadcast; the orchestrator refreshes the roster on it
    SIMULATOR_CREATED = auto()
    # Failures surfaced to the UI
    COMMAND_FAILED = auto()


@dataclass
class Event:
    type: EventType
    data: Any = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class RosterEventData:
    groups: Mapping[OSName, tuple[Simulator, ...]]


@dataclass
class StateChangeEventData:
    simulator: Simulator
    previous: SimulatorState | None


@dataclass
class SimulatorCreatedEventData:
    udid: str
    parameters: CreateParameters


@dataclass
class CommandFailedEventData:
    operation: str
    error: BaseException
    simulator: Simulator | None = None
