"""Runtime settings for the daemon process itself.

These are not user preferences (see config.py) but where the daemon
finds things: socket and configuration paths, the control interval,
logging. Each setting has a default, can be overridden by an
ARCH_SENSE_* environment variable, and finally by a CLI flag.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from archsense.hardware.keyboard import DEFAULT_TIMEOUT_MS
from archsense.hardware.sysfs import (
    PLATFORM_BASE_PATHS,
    SENSE_BASE_PATHS,
    THERMAL_BASE_PATHS,
)

from .config import DEFAULT_CONFIG_PATH
from .protocol import BUFFER_SIZE
from .server import DEFAULT_SOCKET_PATH

ENV_PREFIX = "ARCH_SENSE_"


class DaemonSettings(BaseModel):
    """Where the daemon listens, stores, logs, and probes hardware."""

    model_config = ConfigDict(frozen=True)

    socket_path: Path = DEFAULT_SOCKET_PATH
    config_path: Path = DEFAULT_CONFIG_PATH
    control_interval: float = Field(
        default=2.0, gt=0, description="Fan curve period in seconds"
    )
    buffer_size: int = Field(default=BUFFER_SIZE, ge=512)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: Path | None = None
    usb_timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    sense_paths: tuple[Path, ...] = tuple(Path(p) for p in SENSE_BASE_PATHS)
    platform_paths: tuple[Path, ...] = tuple(Path(p) for p in PLATFORM_BASE_PATHS)
    thermal_paths: tuple[Path, ...] = tuple(Path(p) for p in THERMAL_BASE_PATHS)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @property
    def control_interval_ns(self) -> int:
        return int(self.control_interval * 1_000_000_000)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> "DaemonSettings":
        """Build settings from ARCH_SENSE_* variables, then overrides.

        Path lists (SENSE_PATHS, PLATFORM_PATHS, THERMAL_PATHS) use the
        os.pathsep separator. Overrides that are None are ignored so CLI
        flags that were not given fall through.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None:
                continue
            if name.endswith("_paths"):
                values[name] = tuple(p for p in raw.split(os.pathsep) if p)
            else:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
