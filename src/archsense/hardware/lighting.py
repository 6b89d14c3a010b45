"""Packet encoding for the Predator keyboard lighting controller.

Everything here is pure: lookup tables and functions that turn a
requested lighting state into the exact bytes the controller expects.
The transport lives in keyboard.py.

Two subsystems are involved. The colour subsystem takes an init
packet, a 1024-byte zone buffer streamed over the interrupt endpoint,
and a commit packet. The animation subsystem takes its own init packet
and one effect packet:

    08 02 OP SPEED BRIGHT PRESET DIR 9B
"""

from dataclasses import dataclass
from types import MappingProxyType

from archsense.base.errors import AttributeValidationError

Rgb = tuple[int, int, int]

ZONE_COUNT = 256
ZONE_RECORD_SIZE = 4
COLOR_BUFFER_SIZE = ZONE_COUNT * ZONE_RECORD_SIZE
CHUNK_SIZE = 64

COLOR_INIT_PACKET = bytes([0x12, 0x00, 0x00, 0x08, 0x00, 0x00, 0x00, 0xE5])
COLOR_APPLY_PACKET = bytes([0x08, 0x02, 0x33, 0x05, 0x32, 0x08, 0x01, 0x82])
ANIMATION_INIT_PACKET = bytes([0xB1, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x4E])
OFF_PACKET = bytes([0x08, 0x02, 0x01, 0x00, 0x00, 0x01, 0x01, 0x9B])

BRIGHTNESS_HW_MAX = 0x32
SPEED_HW_FAST = 1
SPEED_HW_SLOW = 9

PRESET_SINGLE_COLOR = 0x01
PRESET_RANDOM = 0x08

RANDOM_COLOR = "random"

PALETTE: MappingProxyType[str, Rgb] = MappingProxyType(
    {
        "red": (255, 0, 0),
        "orange": (255, 128, 0),
        "gold": (255, 215, 0),
        "green": (0, 255, 0),
        "cyan": (0, 255, 255),
        "blue": (0, 0, 255),
        "purple": (128, 0, 255),
        "magenta": (255, 0, 255),
        "pink": (255, 105, 180),
        "white": (255, 255, 255),
        "arctic-white": (255, 255, 255),
        "arch-cyan": (0, 150, 255),
        "night-shift-red": (255, 0, 0),
        "eye-care-amber": (255, 150, 0),
    }
)


@dataclass(frozen=True)
class Effect:
    """Encoding rule for one animation effect."""

    opcode: int
    has_color: bool = False
    has_direction: bool = False


EFFECTS: MappingProxyType[str, Effect] = MappingProxyType(
    {
        "off": Effect(0x01),
        "static": Effect(0x01, has_color=True),
        "breathing": Effect(0x02, has_color=True),
        "wave": Effect(0x03, has_direction=True),
        "snake": Effect(0x05, has_color=True),
        "ripple": Effect(0x06, has_color=True),
        "neon": Effect(0x08),
        "rain": Effect(0x0A, has_color=True),
        "lightning": Effect(0x12, has_color=True),
        "spot": Effect(0x25, has_color=True),
        "stars": Effect(0x26, has_color=True),
        "fireball": Effect(0x27, has_color=True),
        "snow": Effect(0x28, has_color=True),
        "heartbeat": Effect(0x29, has_color=True),
    }
)

DIRECTIONS: MappingProxyType[str, int] = MappingProxyType(
    {
        "right": 1,
        "left": 2,
        "up": 3,
        "down": 4,
        "clockwise": 5,
        "counter-clockwise": 6,
    }
)


def _clamp_percent(value: int) -> int:
    return max(0, min(100, value))


def scale_by_brightness(channel: int, brightness: int) -> int:
    """Scale a 0-255 colour channel by a 0-100 brightness percentage."""
    return channel * _clamp_percent(brightness) // 100


def lookup_color(name: str) -> Rgb:
    """Return the RGB triple for a palette colour name."""
    try:
        return PALETTE[name]
    except KeyError:
        raise AttributeValidationError(
            f"Unknown color '{name}' (choose from: {', '.join(PALETTE)})"
        ) from None


def lookup_effect(name: str) -> Effect:
    """Return the encoding rule for an effect name."""
    try:
        return EFFECTS[name]
    except KeyError:
        raise AttributeValidationError(
            f"Unsupported effect '{name}' (choose from: {', '.join(EFFECTS)})"
        ) from None


def lookup_direction(name: str) -> int:
    """Return the direction code for a direction name."""
    try:
        return DIRECTIONS[name]
    except KeyError:
        raise AttributeValidationError(
            f"Unknown direction '{name}' (choose from: {', '.join(DIRECTIONS)})"
        ) from None


def build_color_buffer(rgb: Rgb, brightness: int) -> bytes:
    """Build the zone buffer that paints every key one colour."""
    red, green, blue = (scale_by_brightness(c, brightness) for c in rgb)
    return bytes([0x00, red, green, blue]) * ZONE_COUNT


def iter_chunks(buffer: bytes, size: int = CHUNK_SIZE):
    """Yield consecutive fixed-size slices of buffer."""
    for offset in range(0, len(buffer), size):
        yield buffer[offset : offset + size]


def hardware_speed(speed: int) -> int:
    """Map 0-100% (100 = fastest) to the controller's 9..1 scale."""
    speed = _clamp_percent(speed)
    if speed >= 100:
        return SPEED_HW_FAST
    span = SPEED_HW_SLOW - SPEED_HW_FAST
    return max(SPEED_HW_FAST, SPEED_HW_SLOW - speed * span // 100)


def hardware_brightness(brightness: int) -> int:
    """Map 0-100% to the controller's 0..0x32 brightness scale."""
    return _clamp_percent(brightness) * BRIGHTNESS_HW_MAX // 100


def build_color_packet(rgb: Rgb) -> bytes:
    """Build the packet that loads a colour for animation effects."""
    red, green, blue = rgb
    return bytes([0x14, 0x00, 0x00, red, green, blue, 0x00, 0x00])


def build_animation_packet(
    effect: str,
    speed: int,
    brightness: int,
    direction: str = "right",
    color: str | None = None,
) -> bytes:
    """Build the 8-byte effect packet for a named animation."""
    rule = lookup_effect(effect)
    direction_code = lookup_direction(direction)
    if color is not None and color != RANDOM_COLOR:
        lookup_color(color)

    if effect == "off":
        return OFF_PACKET

    preset = PRESET_RANDOM if color == RANDOM_COLOR else PRESET_SINGLE_COLOR
    return bytes(
        [
            0x08,
            0x02,
            rule.opcode,
            hardware_speed(speed),
            hardware_brightness(brightness),
            preset,
            direction_code if rule.has_direction else 0x01,
            0x9B,
        ]
    )


def animation_packets(
    effect: str,
    speed: int,
    brightness: int,
    direction: str = "right",
    color: str | None = None,
) -> list[bytes]:
    """Return the full control-packet sequence for an animation.

    Validation happens here, before the caller touches the device.
    """
    apply_packet = build_animation_packet(
        effect, speed, brightness, direction, color
    )
    packets = [ANIMATION_INIT_PACKET]
    if color not in (None, RANDOM_COLOR) and lookup_effect(effect).has_color:
        packets.append(build_color_packet(lookup_color(color)))
    packets.append(apply_packet)
    return packets
