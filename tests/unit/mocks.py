"""Test doubles for the hardware layer.

SysfsTree lays out attribute files in a temporary directory the way
linuwu_sense, ACPI and the thermal subsystem do. FakeKeyboard and
FakeGpuProbe replace the parts that need real devices or tools.
"""

import shutil
from pathlib import Path

import usb.core

from archsense import AttributeTree, GpuTemperatureProbe, HardwareInterface
from archsense.base.errors import ArchSenseError
from archsense.hardware.keyboard import KeyboardInterface
from archsense.hardware.lighting import Rgb, animation_packets

DEFAULT_SENSE_VALUES = {
    "battery_limiter": "0",
    "battery_calibration": "0",
    "lcd_override": "0",
    "boot_animation_sound": "1",
    "backlight_timeout": "0",
    "fan_speed": "0,0",
    "usb_charging": "0",
}


class SysfsTree:
    """Fake attribute directories under a temporary root.

    The sense tree lists a missing nitro_sense directory ahead of the
    populated predator_sense one, so every access goes through the
    fallback path.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.missing = root / "nitro_sense"
        self.sense = root / "predator_sense"
        self.platform = root / "acpi"
        self.thermal = root / "thermal_zone0"
        for directory in (self.sense, self.platform, self.thermal):
            directory.mkdir(parents=True)

        for name, value in DEFAULT_SENSE_VALUES.items():
            self.set(name, value)
        self.set("platform_profile", "balanced", self.platform)
        self.set(
            "platform_profile_choices",
            "low-power balanced performance",
            self.platform,
        )
        self.set_cpu_temperature(47)

    def set(self, name: str, value: str, directory: Path | None = None) -> None:
        (directory or self.sense).joinpath(name).write_text(f"{value}\n")

    def get(self, name: str, directory: Path | None = None) -> str:
        return (directory or self.sense).joinpath(name).read_text().strip()

    def set_cpu_temperature(self, celsius: float) -> None:
        self.set("temp", str(int(celsius * 1000)), self.thermal)

    def remove(self, name: str, directory: Path | None = None) -> None:
        (directory or self.sense).joinpath(name).unlink()

    def break_attribute(self, name: str, directory: Path | None = None) -> None:
        """Replace an attribute file with a directory so reads and writes fail."""
        path = (directory or self.sense) / name
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
        path.mkdir()

    def interface(self, gpu: GpuTemperatureProbe | None = None) -> HardwareInterface:
        return HardwareInterface(
            sense=AttributeTree([self.missing, self.sense]),
            platform=AttributeTree([self.platform]),
            thermal=AttributeTree([self.thermal]),
            gpu=gpu or FakeGpuProbe(),
        )


class FakeGpuProbe(GpuTemperatureProbe):
    """GPU probe that returns a fixed temperature or raises."""

    def __init__(
        self, temperature: int = 55, error: ArchSenseError | None = None
    ) -> None:
        super().__init__()
        self.temperature = temperature
        self.error = error

    def read(self) -> int:
        if self.error is not None:
            raise self.error
        return self.temperature


class FakeKeyboard(KeyboardInterface):
    """Keyboard driver that records what it was asked to show.

    Argument validation is the real one, so invalid animations fail
    exactly as they would against the device.
    """

    def __init__(self, present: bool = True) -> None:
        super().__init__(find_device=lambda **kwargs: None)
        self.present = present
        self.error: ArchSenseError | None = None
        self.calls: list[tuple] = []

    def is_present(self) -> bool:
        return self.present

    def apply_solid_color(self, rgb: Rgb, brightness: int) -> None:
        if self.error is not None:
            raise self.error
        self.calls.append(("solid", rgb, brightness))

    def apply_animation(
        self,
        effect: str,
        speed: int,
        brightness: int,
        direction: str = "right",
        color: str | None = None,
    ) -> None:
        animation_packets(effect, speed, brightness, direction, color)
        if self.error is not None:
            raise self.error
        self.calls.append(("animation", effect, speed, brightness, direction, color))


class FakeUsbDevice:
    """Stand-in for a pyusb Device that records transfers."""

    def __init__(
        self,
        kernel_driver_active: bool = True,
        fail_control_at: int | None = None,
        fail_write_at: int | None = None,
    ) -> None:
        self.kernel_driver_active = kernel_driver_active
        self.fail_control_at = fail_control_at
        self.fail_write_at = fail_write_at
        self.controls: list[tuple] = []
        self.writes: list[tuple] = []
        self.events: list[str] = []

    def is_kernel_driver_active(self, interface: int) -> bool:
        return self.kernel_driver_active

    def detach_kernel_driver(self, interface: int) -> None:
        self.events.append(f"detach:{interface}")
        self.kernel_driver_active = False

    def attach_kernel_driver(self, interface: int) -> None:
        self.events.append(f"attach:{interface}")
        self.kernel_driver_active = True

    def ctrl_transfer(self, request_type, request, value, index, data, timeout):
        if self.fail_control_at == len(self.controls):
            raise usb.core.USBError("Pipe error")
        self.controls.append((request_type, request, value, index, bytes(data), timeout))
        return len(data)

    def write(self, endpoint, data, timeout):
        if self.fail_write_at == len(self.writes):
            raise usb.core.USBError("Operation timed out")
        self.writes.append((endpoint, bytes(data), timeout))
        return len(data)
