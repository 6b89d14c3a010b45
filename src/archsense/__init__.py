"""Control daemon for Acer Predator fans, keyboard lighting and platform settings."""

# Core execution classes
from .base import (
    ArchSenseError,
    AttributeIOError,
    AttributeValidationError,
    ClaimError,
    Controller,
    DeviceError,
    DeviceNotFoundError,
    DiagnosticToolError,
    Entity,
    FastRunner,
    Process,
    ProtocolError,
    Runner,
    StandardRunner,
    StoreError,
    TimeSource,
    TransferError,
)

# Controllers
from .controllers import (
    DEFAULT_FAN_CURVE,
    AutoFanController,
    FanCurve,
    apply_fan_curve,
    compute_duty,
)

# Hardware
from .hardware import (
    Animation,
    AttributeTree,
    CustomColor,
    FanMode,
    FanModeKind,
    GpuTemperatureProbe,
    HardwareInterface,
    KeyboardInterface,
    SolidColor,
)

__all__ = [
    "DEFAULT_FAN_CURVE",
    "Animation",
    "ArchSenseError",
    "AttributeIOError",
    "AttributeTree",
    "AttributeValidationError",
    "AutoFanController",
    "ClaimError",
    "Controller",
    "CustomColor",
    "DeviceError",
    "DeviceNotFoundError",
    "DiagnosticToolError",
    "Entity",
    "FanCurve",
    "FanMode",
    "FanModeKind",
    "FastRunner",
    "GpuTemperatureProbe",
    "HardwareInterface",
    "KeyboardInterface",
    "Process",
    "ProtocolError",
    "Runner",
    "SolidColor",
    "StandardRunner",
    "StoreError",
    "TimeSource",
    "TransferError",
    "apply_fan_curve",
    "compute_duty",
]
