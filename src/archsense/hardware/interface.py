"""Typed access to the laptop's platform attributes.

HardwareInterface layers parsing and validation on top of raw
AttributeTree reads and writes. Every accessor either returns a typed
value or raises an ArchSenseError; malformed hardware output never
escapes as a ValueError.
"""

import logging

from archsense.base.errors import AttributeValidationError

from .gpu import GpuTemperatureProbe
from .modes import FanMode
from .sysfs import (
    PLATFORM_BASE_PATHS,
    SENSE_BASE_PATHS,
    THERMAL_BASE_PATHS,
    AttributeTree,
)

logger = logging.getLogger(__name__)

BATTERY_LIMITER = "battery_limiter"
BATTERY_CALIBRATION = "battery_calibration"
LCD_OVERRIDE = "lcd_override"
BOOT_ANIMATION_SOUND = "boot_animation_sound"
BACKLIGHT_TIMEOUT = "backlight_timeout"
FAN_SPEED = "fan_speed"
USB_CHARGING = "usb_charging"
PLATFORM_PROFILE = "platform_profile"
PLATFORM_PROFILE_CHOICES = "platform_profile_choices"
TEMPERATURE = "temp"

USB_CHARGING_THRESHOLDS: tuple[int, ...] = (0, 10, 20, 30)


def _clamp_percent(value: int) -> int:
    return max(0, min(100, value))


class HardwareInterface:
    """Typed accessors for linuwu_sense, ACPI and thermal attributes."""

    def __init__(
        self,
        sense: AttributeTree | None = None,
        platform: AttributeTree | None = None,
        thermal: AttributeTree | None = None,
        gpu: GpuTemperatureProbe | None = None,
    ) -> None:
        self.sense = sense or AttributeTree(SENSE_BASE_PATHS)
        self.platform = platform or AttributeTree(PLATFORM_BASE_PATHS)
        self.thermal = thermal or AttributeTree(THERMAL_BASE_PATHS)
        self.gpu = gpu or GpuTemperatureProbe()

    def is_available(self) -> bool:
        """Return True if the linuwu_sense attribute directory exists."""
        return self.sense.exists()

    # ==========================================
    # Boolean attributes
    # ==========================================

    def read_bool(self, name: str) -> bool:
        raw = self.sense.read_attribute(name)
        if raw == "1":
            return True
        if raw == "0":
            return False
        raise AttributeValidationError(
            f"Unexpected value {raw!r} in '{name}' (expected 0 or 1)"
        )

    def write_bool(self, name: str, enabled: bool) -> None:
        self.sense.write_attribute(name, "1" if enabled else "0")

    def set_battery_limiter(self, enabled: bool) -> None:
        self.write_bool(BATTERY_LIMITER, enabled)

    def set_battery_calibration(self, enabled: bool) -> None:
        self.write_bool(BATTERY_CALIBRATION, enabled)

    def set_lcd_overdrive(self, enabled: bool) -> None:
        self.write_bool(LCD_OVERRIDE, enabled)

    def set_boot_animation(self, enabled: bool) -> None:
        self.write_bool(BOOT_ANIMATION_SOUND, enabled)

    def set_backlight_timeout(self, enabled: bool) -> None:
        self.write_bool(BACKLIGHT_TIMEOUT, enabled)

    # ==========================================
    # Fans
    # ==========================================

    def get_fan_speed(self) -> tuple[int, int]:
        """Return the (cpu, gpu) duty percentages, each clamped to 0-100.

        Some driver versions report a single "0" in auto mode; a lone
        value applies to both fans.
        """
        raw = self.sense.read_attribute(FAN_SPEED)
        parts = [part.strip() for part in raw.split(",")]
        if len(parts) == 1:
            parts = parts * 2
        if len(parts) != 2:
            raise AttributeValidationError(
                f"Unexpected fan speed {raw!r} (expected 'cpu,gpu')"
            )
        try:
            cpu, gpu = (int(part) for part in parts)
        except ValueError:
            raise AttributeValidationError(
                f"Unexpected fan speed {raw!r} (expected 'cpu,gpu')"
            ) from None
        return _clamp_percent(cpu), _clamp_percent(gpu)

    def set_fan_speed(self, cpu: int, gpu: int) -> None:
        cpu, gpu = _clamp_percent(cpu), _clamp_percent(gpu)
        self.sense.write_attribute(FAN_SPEED, f"{cpu},{gpu}")

    def set_fan_mode(self, mode: FanMode) -> None:
        self.set_fan_speed(*mode.duties())

    # ==========================================
    # USB charging
    # ==========================================

    def get_usb_charging(self) -> int:
        raw = self.sense.read_attribute(USB_CHARGING)
        try:
            return int(raw)
        except ValueError:
            raise AttributeValidationError(
                f"Unexpected USB charging threshold {raw!r}"
            ) from None

    def set_usb_charging(self, threshold: int) -> None:
        if threshold not in USB_CHARGING_THRESHOLDS:
            allowed = ", ".join(str(t) for t in USB_CHARGING_THRESHOLDS)
            raise AttributeValidationError(
                f"Unsupported USB charging threshold {threshold}% "
                f"(choose from: {allowed})"
            )
        self.sense.write_attribute(USB_CHARGING, str(threshold))

    # ==========================================
    # Thermal profile
    # ==========================================

    def get_thermal_profile(self) -> str:
        return self.platform.read_attribute(PLATFORM_PROFILE)

    def get_thermal_profile_choices(self) -> list[str]:
        return self.platform.read_attribute(PLATFORM_PROFILE_CHOICES).split()

    def set_thermal_profile(self, profile: str) -> None:
        choices = self.get_thermal_profile_choices()
        if profile not in choices:
            raise AttributeValidationError(
                f"Unsupported thermal profile '{profile}' "
                f"(choose from: {', '.join(choices) or 'none'})"
            )
        self.platform.write_attribute(PLATFORM_PROFILE, profile)

    # ==========================================
    # Temperatures
    # ==========================================

    def get_cpu_temperature(self) -> int:
        """Return the CPU temperature in whole degrees Celsius."""
        raw = self.thermal.read_attribute(TEMPERATURE)
        try:
            millidegrees = int(raw)
        except ValueError:
            raise AttributeValidationError(
                f"Unexpected temperature reading {raw!r}"
            ) from None
        return millidegrees // 1000

    def get_gpu_temperature(self) -> int:
        return self.gpu.read()
