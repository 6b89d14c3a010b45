"""Hardware access: platform attributes, GPU probe and keyboard lighting."""

from .gpu import GpuTemperatureProbe
from .interface import USB_CHARGING_THRESHOLDS, HardwareInterface
from .keyboard import KeyboardInterface
from .modes import (
    Animation,
    CustomColor,
    FanMode,
    FanModeKind,
    RgbMode,
    SolidColor,
)
from .sysfs import AttributeTree

__all__ = [
    "USB_CHARGING_THRESHOLDS",
    "Animation",
    "AttributeTree",
    "CustomColor",
    "FanMode",
    "FanModeKind",
    "GpuTemperatureProbe",
    "HardwareInterface",
    "KeyboardInterface",
    "RgbMode",
    "SolidColor",
]
