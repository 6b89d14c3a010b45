"""Closed-loop fan control along the calibration curve."""

from typing import TYPE_CHECKING, Any

from pydantic import Field

from archsense.base.errors import ArchSenseError
from archsense.base.process import Controller
from archsense.hardware.interface import HardwareInterface

from .curve import DEFAULT_FAN_CURVE, FanCurve, compute_duty

if TYPE_CHECKING:
    from archsense.daemon.store import ConfigStore


def apply_fan_curve(hardware: HardwareInterface, curve: FanCurve) -> int:
    """Drive both fans to the curve's duty for the current CPU temperature.

    Returns:
        The duty percentage written

    Raises:
        ArchSenseError: If the temperature read or fan write fails

    """
    temperature = hardware.get_cpu_temperature()
    duty = compute_duty(temperature, curve)
    hardware.set_fan_speed(duty, duty)
    return duty


class AutoFanController(Controller):
    """Periodic controller active only while the fan mode is auto.

    Each cycle holds the configuration lock just long enough to read
    the fan mode. Temperature reads and fan writes happen after the
    lock is released, so a slow sysfs write never stalls command
    handling. The duty is derived state and is never stored.
    """

    curve: FanCurve = Field(
        default=DEFAULT_FAN_CURVE,
        description="Calibration table mapping temperature to duty",
    )
    last_duty: int | None = Field(
        default=None,
        description="Duty written by the most recent active cycle",
    )

    def __init__(
        self, hardware: HardwareInterface, store: "ConfigStore", **data: Any
    ) -> None:
        super().__init__(**data)
        self._hardware = hardware
        self._store = store

    def _execute(self) -> None:
        is_auto = self._store.read(lambda config: config.fan_mode.is_auto)
        if not is_auto:
            return

        try:
            duty = apply_fan_curve(self._hardware, self.curve)
        except ArchSenseError as e:
            self._logger.warning(f"Fan curve cycle skipped: {e}")
            return

        if duty != self.last_duty:
            self._logger.info(f"Fan duty set to {duty}%")
        self.last_duty = duty
