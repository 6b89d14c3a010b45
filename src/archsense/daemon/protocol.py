"""Wire protocol between clients and the daemon.

One JSON object per connection in each direction. Commands carry a
"command" discriminator, responses a "response" discriminator:

    {"command": "set_fan_mode", "mode": {"kind": "custom", "cpu": 40, "gpu": 60}}
    {"response": "ack", "message": "Fan mode set to custom (40%/60%)"}

There is no framing beyond "read once, write once": a message must
fit in BUFFER_SIZE bytes. Every message defined here stays well under
that limit.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from archsense.base.errors import ProtocolError
from archsense.hardware.modes import FanMode, RgbMode

BUFFER_SIZE = 4096


class _Message(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ==========================================
# Commands (client -> daemon)
# ==========================================


class GetHardwareStatus(_Message):
    command: Literal["get_hardware_status"] = "get_hardware_status"


class SetFanMode(_Message):
    command: Literal["set_fan_mode"] = "set_fan_mode"
    mode: FanMode


class SetBatteryLimiter(_Message):
    command: Literal["set_battery_limiter"] = "set_battery_limiter"
    enabled: bool


class SetBatteryCalibration(_Message):
    command: Literal["set_battery_calibration"] = "set_battery_calibration"
    enabled: bool


class SetRgbMode(_Message):
    command: Literal["set_rgb_mode"] = "set_rgb_mode"
    mode: RgbMode


class SetKeyboardColor(_Message):
    command: Literal["set_keyboard_color"] = "set_keyboard_color"
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)


class SetKeyboardAnimation(_Message):
    command: Literal["set_keyboard_animation"] = "set_keyboard_animation"
    effect: str
    speed: int | None = Field(default=None, ge=0, le=100)
    brightness: int | None = Field(default=None, ge=0, le=100)
    direction: str | None = None
    color: str | None = None


class IncreaseRgbBrightness(_Message):
    command: Literal["increase_rgb_brightness"] = "increase_rgb_brightness"


class DecreaseRgbBrightness(_Message):
    command: Literal["decrease_rgb_brightness"] = "decrease_rgb_brightness"


class SetLcdOverdrive(_Message):
    command: Literal["set_lcd_overdrive"] = "set_lcd_overdrive"
    enabled: bool


class SetBootAnimation(_Message):
    command: Literal["set_boot_animation"] = "set_boot_animation"
    enabled: bool


class SetBacklightTimeout(_Message):
    command: Literal["set_backlight_timeout"] = "set_backlight_timeout"
    enabled: bool


class ToggleSmartBatterySaver(_Message):
    command: Literal["toggle_smart_battery_saver"] = "toggle_smart_battery_saver"


class SetUsbCharging(_Message):
    command: Literal["set_usb_charging"] = "set_usb_charging"
    threshold: int


class SetThermalProfile(_Message):
    command: Literal["set_thermal_profile"] = "set_thermal_profile"
    profile: str = Field(min_length=1)


Command = Annotated[
    Union[
        GetHardwareStatus,
        SetFanMode,
        SetBatteryLimiter,
        SetBatteryCalibration,
        SetRgbMode,
        SetKeyboardColor,
        SetKeyboardAnimation,
        IncreaseRgbBrightness,
        DecreaseRgbBrightness,
        SetLcdOverdrive,
        SetBootAnimation,
        SetBacklightTimeout,
        ToggleSmartBatterySaver,
        SetUsbCharging,
        SetThermalProfile,
    ],
    Field(discriminator="command"),
]


# ==========================================
# Responses (daemon -> client)
# ==========================================


class Ack(_Message):
    response: Literal["ack"] = "ack"
    message: str


class Error(_Message):
    response: Literal["error"] = "error"
    message: str


class HardwareStatus(_Message):
    """Live sensor readings plus a consistent copy of the configuration.

    Sensor fields that could not be read are 0 (or empty), so one
    missing sensor never hides the rest of the status.
    """

    response: Literal["hardware_status"] = "hardware_status"
    cpu_temp: int
    gpu_temp: int
    cpu_fan_percent: int
    gpu_fan_percent: int
    fan_mode: FanMode
    active_rgb_mode: RgbMode
    rgb_brightness: int
    fx_speed: int
    battery_limiter: bool
    battery_calibration: bool
    lcd_overdrive: bool
    boot_animation: bool
    smart_battery_saver: bool
    usb_charging: int
    thermal_profile: str
    thermal_profile_choices: list[str]
    keyboard_present: bool


Response = Annotated[
    Union[Ack, Error, HardwareStatus],
    Field(discriminator="response"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)
_response_adapter: TypeAdapter[Response] = TypeAdapter(Response)


def decode_command(payload: bytes) -> Command:
    """Decode exactly one command.

    Raises:
        ProtocolError: If the payload is not a valid command

    """
    try:
        return _command_adapter.validate_json(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'request'}: {error['msg']}"
            for error in e.errors()
        )
        raise ProtocolError(f"Invalid request: {problems}") from e


def encode_command(command: Command) -> bytes:
    return command.model_dump_json().encode()


def decode_response(payload: bytes) -> Response:
    """Decode exactly one response.

    Raises:
        ProtocolError: If the payload is not a valid response

    """
    try:
        return _response_adapter.validate_json(payload)
    except ValidationError as e:
        raise ProtocolError(f"Invalid response: {e}") from e


def encode_response(response: Response) -> bytes:
    return response.model_dump_json().encode()
