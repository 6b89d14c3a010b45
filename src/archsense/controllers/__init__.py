"""Fan control algorithms."""

from .curve import DEFAULT_FAN_CURVE, FanCurve, compute_duty
from .fan import AutoFanController, apply_fan_curve

__all__ = [
    "DEFAULT_FAN_CURVE",
    "AutoFanController",
    "FanCurve",
    "apply_fan_curve",
    "compute_duty",
]
