"""BatteryStatusController — edit and apply a device's status-bar battery override."""

from __future__ import annotations

import logging

from simstation.commands.battery import validate_battery_state
from simstation.commands.factory import CommandFactory
from simstation.core.loadable import LoadableValue, load_into
from simstation.core.models import BatteryChargeState, BatteryState
from simstation.errors import InvalidBatteryStateError
from simstation.platform.process_adapter import IProcessRunner

logger = logging.getLogger(__name__)


class BatteryStatusController:
    """Holds the editable battery values for one simulator.

    ``level`` and ``charge_state`` start out invalid (-1 / unknown) and are
    filled by ``retrieve()`` or by the user.  ``apply()`` refuses to launch
    simctl until both are valid.
    """

    def __init__(self, simulator_id: str, runner: IProcessRunner, factory: CommandFactory | None = None):
        self.simulator_id = simulator_id
        self.runner = runner
        self.factory = factory or CommandFactory()
        self.saved_state: LoadableValue = LoadableValue()
        self.setting_state: LoadableValue = LoadableValue()
        self.level: int = -1
        self.charge_state: BatteryChargeState = BatteryChargeState.UNKNOWN

    @property
    def battery_state(self) -> BatteryState:
        return BatteryState(charge_state=self.charge_state, level=self.level)

    async def retrieve(self) -> BatteryState:
        command = self.factory.fetch_battery_state(self.simulator_id)
        state = await load_into(self, "saved_state", command.run(self.runner))
        self.level = state.level
        self.charge_state = state.charge_state
        return state

    def update_level(self, level: int) -> None:
        self.level = level

    def update_state(self, charge_state: BatteryChargeState) -> None:
        self.charge_state = charge_state

    async def apply(self) -> bool:
        """Send the override. Returns False (no process launched) when the values are invalid."""
        state = self.battery_state
        try:
            validate_battery_state(state)
        except InvalidBatteryStateError as exc:
            logger.debug("Battery override for %s rejected: %s", self.simulator_id, exc)
            return False

        command = self.factory.set_battery_state(self.simulator_id, state)
        await load_into(self, "setting_state", command.run(self.runner))
        logger.info("Battery override for %s: %s %d%%", self.simulator_id, state.charge_state.value, state.level)
        return True
