"""Command dispatch: one handler per command variant.

Mutating handlers follow one rule: inside the store's critical
section, write the hardware first and change the configuration only
after the write succeeded. Any ArchSenseError raised on the way is
reported to the client verbatim and the store stays as it was.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from archsense.base.errors import ArchSenseError
from archsense.controllers.curve import DEFAULT_FAN_CURVE, FanCurve
from archsense.controllers.fan import apply_fan_curve
from archsense.hardware.interface import HardwareInterface
from archsense.hardware.keyboard import KeyboardInterface
from archsense.hardware.modes import Animation, CustomColor, RgbMode

from . import protocol
from .config import DaemonConfig
from .store import ConfigStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

BRIGHTNESS_STEP = 10


def _on_off(enabled: bool) -> str:
    return "enabled" if enabled else "disabled"


class CommandDispatcher:
    """Route decoded commands to the hardware and the store."""

    def __init__(
        self,
        hardware: HardwareInterface,
        keyboard: KeyboardInterface,
        store: ConfigStore,
        curve: FanCurve = DEFAULT_FAN_CURVE,
    ) -> None:
        self.hardware = hardware
        self.keyboard = keyboard
        self.store = store
        self.curve = curve
        self._handlers: dict[type, Callable[[Any], protocol.Response]] = {
            protocol.GetHardwareStatus: self._get_hardware_status,
            protocol.SetFanMode: self._set_fan_mode,
            protocol.SetBatteryLimiter: self._set_battery_limiter,
            protocol.SetBatteryCalibration: self._set_battery_calibration,
            protocol.SetRgbMode: self._set_rgb_mode,
            protocol.SetKeyboardColor: self._set_keyboard_color,
            protocol.SetKeyboardAnimation: self._set_keyboard_animation,
            protocol.IncreaseRgbBrightness: self._increase_rgb_brightness,
            protocol.DecreaseRgbBrightness: self._decrease_rgb_brightness,
            protocol.SetLcdOverdrive: self._set_lcd_overdrive,
            protocol.SetBootAnimation: self._set_boot_animation,
            protocol.SetBacklightTimeout: self._set_backlight_timeout,
            protocol.ToggleSmartBatterySaver: self._toggle_smart_battery_saver,
            protocol.SetUsbCharging: self._set_usb_charging,
            protocol.SetThermalProfile: self._set_thermal_profile,
        }

    def dispatch(self, command: protocol.Command) -> protocol.Response:
        """Execute one command and return its response."""
        handler = self._handlers.get(type(command))
        if handler is None:
            return protocol.Error(message=f"Unknown command: {command!r}")
        try:
            return handler(command)
        except ArchSenseError as e:
            logger.warning("%s failed: %s", type(command).__name__, e)
            return protocol.Error(message=str(e))

    def handle_payload(self, payload: bytes) -> protocol.Response:
        """Decode a raw request and dispatch it."""
        try:
            command = protocol.decode_command(payload)
        except ArchSenseError as e:
            logger.info("Rejected request: %s", e)
            return protocol.Error(message=str(e))
        return self.dispatch(command)

    # ==========================================
    # Status
    # ==========================================

    def _sensor(self, read: Callable[[], T], fallback: T, label: str) -> T:
        try:
            return read()
        except ArchSenseError as e:
            logger.debug("%s unavailable: %s", label, e)
            return fallback

    def _get_hardware_status(
        self, command: protocol.GetHardwareStatus
    ) -> protocol.Response:
        config = self.store.snapshot()
        cpu_fan, gpu_fan = self._sensor(self.hardware.get_fan_speed, (0, 0), "fan speed")
        return protocol.HardwareStatus(
            cpu_temp=self._sensor(self.hardware.get_cpu_temperature, 0, "CPU temperature"),
            gpu_temp=self._sensor(self.hardware.get_gpu_temperature, 0, "GPU temperature"),
            cpu_fan_percent=cpu_fan,
            gpu_fan_percent=gpu_fan,
            fan_mode=config.fan_mode,
            active_rgb_mode=config.rgb_mode,
            rgb_brightness=config.rgb_brightness,
            fx_speed=config.fx_speed,
            battery_limiter=config.battery_limiter,
            battery_calibration=config.battery_calibration,
            lcd_overdrive=config.lcd_overdrive,
            boot_animation=config.boot_animation,
            smart_battery_saver=config.backlight_timeout,
            usb_charging=config.usb_charging,
            thermal_profile=self._sensor(
                self.hardware.get_thermal_profile, "", "thermal profile"
            ),
            thermal_profile_choices=self._sensor(
                self.hardware.get_thermal_profile_choices, [], "thermal profile choices"
            ),
            keyboard_present=self.keyboard.is_present(),
        )

    # ==========================================
    # Fans & power
    # ==========================================

    def _set_fan_mode(self, command: protocol.SetFanMode) -> protocol.Response:
        mode = command.mode

        def apply(config: DaemonConfig) -> None:
            if mode.is_auto:
                try:
                    apply_fan_curve(self.hardware, self.curve)
                except ArchSenseError as e:
                    # Hand the fans back to the firmware until the
                    # controller's next cycle can read a temperature.
                    logger.warning("Fan curve step failed (%s); using firmware auto", e)
                    self.hardware.set_fan_mode(mode)
            else:
                self.hardware.set_fan_mode(mode)
            config.fan_mode = mode

        self.store.with_lock(apply)
        return protocol.Ack(message=f"Fan mode set to {mode}")

    def _set_flag(
        self,
        write: Callable[[bool], None],
        field: str,
        enabled: bool,
        label: str,
    ) -> protocol.Response:
        def apply(config: DaemonConfig) -> None:
            write(enabled)
            setattr(config, field, enabled)

        self.store.with_lock(apply)
        return protocol.Ack(message=f"{label} {_on_off(enabled)}")

    def _set_battery_limiter(self, command: protocol.SetBatteryLimiter) -> protocol.Response:
        return self._set_flag(
            self.hardware.set_battery_limiter, "battery_limiter", command.enabled, "Battery limiter"
        )

    def _set_battery_calibration(
        self, command: protocol.SetBatteryCalibration
    ) -> protocol.Response:
        return self._set_flag(
            self.hardware.set_battery_calibration,
            "battery_calibration",
            command.enabled,
            "Battery calibration",
        )

    def _set_lcd_overdrive(self, command: protocol.SetLcdOverdrive) -> protocol.Response:
        return self._set_flag(
            self.hardware.set_lcd_overdrive, "lcd_overdrive", command.enabled, "LCD overdrive"
        )

    def _set_boot_animation(self, command: protocol.SetBootAnimation) -> protocol.Response:
        return self._set_flag(
            self.hardware.set_boot_animation, "boot_animation", command.enabled, "Boot animation"
        )

    def _set_backlight_timeout(
        self, command: protocol.SetBacklightTimeout
    ) -> protocol.Response:
        return self._set_flag(
            self.hardware.set_backlight_timeout,
            "backlight_timeout",
            command.enabled,
            "Keyboard backlight timeout",
        )

    def _toggle_smart_battery_saver(
        self, command: protocol.ToggleSmartBatterySaver
    ) -> protocol.Response:
        def apply(config: DaemonConfig) -> bool:
            enabled = not config.backlight_timeout
            self.hardware.set_backlight_timeout(enabled)
            config.backlight_timeout = enabled
            return enabled

        enabled = self.store.with_lock(apply)
        return protocol.Ack(message=f"Smart battery saver {_on_off(enabled)}")

    def _set_usb_charging(self, command: protocol.SetUsbCharging) -> protocol.Response:
        threshold = command.threshold

        def apply(config: DaemonConfig) -> None:
            self.hardware.set_usb_charging(threshold)
            config.usb_charging = threshold

        self.store.with_lock(apply)
        if threshold == 0:
            return protocol.Ack(message="USB charging while off disabled")
        return protocol.Ack(message=f"USB charging threshold set to {threshold}%")

    def _set_thermal_profile(
        self, command: protocol.SetThermalProfile
    ) -> protocol.Response:
        profile = command.profile

        def apply(config: DaemonConfig) -> None:
            self.hardware.set_thermal_profile(profile)
            config.thermal_profile = profile

        self.store.with_lock(apply)
        return protocol.Ack(message=f"Thermal profile set to {profile}")

    # ==========================================
    # Lighting
    # ==========================================

    def _apply_lighting(
        self,
        mode: RgbMode,
        brightness: int | None = None,
        speed: int | None = None,
    ) -> None:
        def apply(config: DaemonConfig) -> None:
            new_brightness = config.rgb_brightness if brightness is None else brightness
            new_speed = config.fx_speed if speed is None else speed
            self.keyboard.apply_mode(mode, new_brightness, new_speed)
            config.rgb_mode = mode
            config.rgb_brightness = new_brightness
            config.fx_speed = new_speed

        self.store.with_lock(apply)

    def _set_rgb_mode(self, command: protocol.SetRgbMode) -> protocol.Response:
        self._apply_lighting(command.mode)
        return protocol.Ack(message=f"Keyboard lighting set to {command.mode}")

    def _set_keyboard_color(self, command: protocol.SetKeyboardColor) -> protocol.Response:
        mode = CustomColor(red=command.red, green=command.green, blue=command.blue)
        self._apply_lighting(mode)
        return protocol.Ack(message=f"Keyboard color set to {mode}")

    def _set_keyboard_animation(
        self, command: protocol.SetKeyboardAnimation
    ) -> protocol.Response:
        try:
            mode = Animation(
                effect=command.effect,
                direction=command.direction or "right",
                color=command.color,
            )
        except ValueError as e:
            return protocol.Error(message=f"Invalid animation: {e}")
        self._apply_lighting(mode, brightness=command.brightness, speed=command.speed)
        return protocol.Ack(message=f"Keyboard animation set to '{mode.effect}'")

    def _step_brightness(self, step: int) -> protocol.Response:
        def apply(config: DaemonConfig) -> int | None:
            current = config.rgb_brightness
            target = max(0, min(100, current + step))
            if target == current:
                return None
            self.keyboard.apply_mode(config.rgb_mode, target, config.fx_speed)
            config.rgb_brightness = target
            return target

        target = self.store.with_lock(apply)
        if target is None:
            bound = "maximum" if step > 0 else "minimum"
            return protocol.Ack(message=f"Keyboard brightness already at {bound}")
        return protocol.Ack(message=f"Keyboard brightness set to {target}%")

    def _increase_rgb_brightness(
        self, command: protocol.IncreaseRgbBrightness
    ) -> protocol.Response:
        return self._step_brightness(BRIGHTNESS_STEP)

    def _decrease_rgb_brightness(
        self, command: protocol.DecreaseRgbBrightness
    ) -> protocol.Response:
        return self._step_brightness(-BRIGHTNESS_STEP)
