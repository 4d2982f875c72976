"""Domain value objects (frozen dataclasses) decoded from simctl output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any


# ------------------------------------------------------------------
# Simulators
# ------------------------------------------------------------------

class SimulatorState(Enum):
    BOOTED = "Booted"
    SHUTDOWN = "Shutdown"

    @classmethod
    def parse(cls, raw: Any) -> "SimulatorState | None":
        """Map simctl's state string; anything but booted/shutdown is unknown (None)."""
        if not isinstance(raw, str):
            return None
        lowered = raw.lower()
        if lowered == "booted":
            return cls.BOOTED
        if lowered == "shutdown":
            return cls.SHUTDOWN
        return None

    def opposite(self) -> "SimulatorState":
        return SimulatorState.SHUTDOWN if self is SimulatorState.BOOTED else SimulatorState.BOOTED


def _version_key(version: str) -> tuple:
    parts = []
    for token in version.split("-"):
        # Numeric tokens sort numerically and before any textual token
        parts.append((0, int(token), "") if token.isdigit() else (1, 0, token))
    return tuple(parts)


@total_ordering
@dataclass(frozen=True)
class OSName:
    """Canonical OS grouping key, e.g. ``OSName("iOS", "17-0")``."""

    platform: str
    version: str

    @classmethod
    def from_runtime_key(cls, key: str) -> "OSName":
        """Parse ``com.apple.CoreSimulator.SimRuntime.iOS-17-0`` into ``("iOS", "17-0")``."""
        tail = key.rsplit(".", 1)[-1]
        platform, _, version = tail.partition("-")
        return cls(platform=platform, version=version)

    def _key(self) -> tuple:
        return (self.platform, _version_key(self.version))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, OSName):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        return f"{self.platform}-{self.version}" if self.version else self.platform


@dataclass(frozen=True)
class Simulator:
    udid: str
    name: str | None = None
    device_type_identifier: str | None = None
    os: OSName | None = None
    state: SimulatorState | None = None
    is_available: bool | None = None
    data_path: str | None = None
    log_path: str | None = None
    data_path_size: int | None = None

    @property
    def id(self) -> str:
        return self.udid


@dataclass(frozen=True)
class SimulatorProcess:
    pid: str
    status: str
    label: str

    @property
    def id(self) -> str:
        return f"{self.pid}{self.status}{self.label}"


SYSTEM_APPLICATION_TYPE = "System"


@dataclass(frozen=True)
class Application:
    """One entry of ``simctl listapps``; field names follow the plist keys."""

    application_type: str
    bundle: str
    display_name: str
    executable: str
    bundle_identifier: str
    bundle_name: str
    bundle_version: str
    path: str
    data_container: str | None = None
    group_containers: dict[str, str] | None = None
    sb_app_tags: tuple[str, ...] | None = None

    @property
    def id(self) -> str:
        return self.bundle_identifier

    @property
    def is_system(self) -> bool:
        return self.application_type == SYSTEM_APPLICATION_TYPE

    @property
    def preferences_path(self) -> str | None:
        """Location of the app's user defaults plist inside its data container."""
        if not self.data_container:
            return None
        container = self.data_container
        if container.startswith("file://"):
            container = container[len("file://"):]
        return f"{container.rstrip('/')}/Library/Preferences/{self.bundle_identifier}.plist"


# ------------------------------------------------------------------
# Battery
# ------------------------------------------------------------------

class BatteryChargeState(Enum):
    CHARGED = "charged"
    CHARGING = "charging"
    DISCHARGING = "discharging"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> "BatteryChargeState":
        """Numeric code printed by ``status_bar list``; unrecognised codes count as charged."""
        try:
            value = int(code)
        except (TypeError, ValueError):
            return cls.CHARGED
        return {0: cls.DISCHARGING, 1: cls.CHARGING}.get(value, cls.CHARGED)


@dataclass(frozen=True)
class BatteryState:
    charge_state: BatteryChargeState
    level: int


DEFAULT_BATTERY_STATE = BatteryState(BatteryChargeState.CHARGED, 100)


# ------------------------------------------------------------------
# Runtimes and device types
# ------------------------------------------------------------------

@dataclass(frozen=True)
class DeviceType:
    identifier: str
    name: str
    bundle_path: str = ""
    product_family: str = ""

    @property
    def id(self) -> str:
        return self.identifier

    @classmethod
    def from_json(cls, data: dict) -> "DeviceType":
        return cls(
            identifier=data["identifier"],
            name=data["name"],
            bundle_path=data.get("bundlePath", ""),
            product_family=data.get("productFamily", ""),
        )


@dataclass(frozen=True)
class LastUsage:
    arm64: str | None = None


@dataclass(frozen=True)
class Runtime:
    identifier: str
    name: str
    version: str
    platform: str = ""
    is_available: bool = True
    is_internal: bool = False
    build_version: str = ""
    bundle_path: str = ""
    runtime_root: str = ""
    supported_architectures: tuple[str, ...] = ()
    supported_device_types: tuple[DeviceType, ...] = ()
    last_usage: LastUsage = field(default_factory=LastUsage)

    @property
    def id(self) -> str:
        return self.identifier

    @classmethod
    def from_json(cls, data: dict) -> "Runtime":
        return cls(
            identifier=data["identifier"],
            name=data["name"],
            version=data["version"],
            platform=data.get("platform", ""),
            is_available=bool(data.get("isAvailable", True)),
            is_internal=bool(data.get("isInternal", False)),
            build_version=data.get("buildversion", ""),
            bundle_path=data.get("bundlePath", ""),
            runtime_root=data.get("runtimeRoot", ""),
            supported_architectures=tuple(data.get("supportedArchitectures", ())),
            supported_device_types=tuple(
                DeviceType.from_json(d) for d in data.get("supportedDeviceTypes", ())
            ),
            last_usage=LastUsage(arm64=(data.get("lastUsage") or {}).get("arm64")),
        )


# simctl accepts shorter names, but the creation flow requires more than this
MIN_NAME_LENGTH = 3


@dataclass(frozen=True)
class CreateParameters:
    name: str
    device_type: str | None = None
    runtime: str | None = None

    @property
    def is_complete(self) -> bool:
        """Runtime and device type chosen and the name longer than MIN_NAME_LENGTH."""
        return bool(self.device_type) and bool(self.runtime) and len(self.name or "") > MIN_NAME_LENGTH
