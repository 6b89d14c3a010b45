"""Persisted daemon configuration: the user's last confirmed settings."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from archsense.hardware.modes import FanMode, RgbMode, SolidColor

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("/etc/arch-sense/config.json")


class DaemonConfig(BaseModel):
    """Every setting the daemon restores and reports.

    Assignments are validated, so a handler can never put a value into
    the configuration that the schema rejects.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    fan_mode: FanMode = Field(default_factory=FanMode.auto)
    rgb_mode: RgbMode = Field(default_factory=lambda: SolidColor(color="cyan"))
    rgb_brightness: int = Field(default=100, ge=0, le=100)
    fx_speed: int = Field(default=50, ge=0, le=100)
    battery_limiter: bool = False
    battery_calibration: bool = False
    lcd_overdrive: bool = False
    boot_animation: bool = True
    backlight_timeout: bool = False
    usb_charging: Literal[0, 10, 20, 30] = 0
    thermal_profile: str | None = None


def load_config(path: Path) -> DaemonConfig:
    """Load the configuration, falling back to defaults.

    A missing file is normal on first start. An unreadable or invalid
    file is logged and replaced by defaults on the next save.
    """
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        logger.info("No configuration at %s, using defaults", path)
        return DaemonConfig()
    except OSError as e:
        logger.warning("Cannot read configuration %s: %s; using defaults", path, e)
        return DaemonConfig()

    try:
        return DaemonConfig.model_validate_json(content)
    except ValidationError as e:
        logger.warning(
            "Ignoring corrupt configuration %s (%d errors); using defaults",
            path,
            e.error_count(),
        )
        return DaemonConfig()


def save_config(path: Path, config: DaemonConfig) -> None:
    """Write the configuration atomically.

    The JSON goes to a temporary file in the same directory which then
    replaces the old file, so readers see either the old or the new
    configuration and never a partial one.

    Raises:
        OSError: If the directory or file cannot be written

    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
