"""Multi-path access to kernel attribute files.

Different linuwu_sense versions mount their attributes under different
directories (predator_sense vs nitro_sense, module tree vs platform
device tree). An AttributeTree holds the ordered candidates and uses
the first one that works for each operation.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from archsense.base.errors import AttributeIOError

logger = logging.getLogger(__name__)

_ACER_WMI = "/sys/module/linuwu_sense/drivers/platform:acer-wmi/acer-wmi"

SENSE_BASE_PATHS: tuple[str, ...] = (
    f"{_ACER_WMI}/predator_sense",
    f"{_ACER_WMI}/nitro_sense",
    "/sys/devices/platform/acer-wmi/predator_sense",
    "/sys/devices/platform/acer-wmi/nitro_sense",
)
PLATFORM_BASE_PATHS: tuple[str, ...] = ("/sys/firmware/acpi",)
THERMAL_BASE_PATHS: tuple[str, ...] = ("/sys/class/thermal/thermal_zone0",)


class AttributeTree:
    """Read and write attribute files under ordered candidate base paths."""

    def __init__(self, base_paths: Iterable[str | os.PathLike[str]]) -> None:
        self.base_paths = [Path(path) for path in base_paths]

    def __repr__(self) -> str:
        paths = ", ".join(str(path) for path in self.base_paths)
        return f"AttributeTree([{paths}])"

    def exists(self) -> bool:
        """Return True if any candidate base path is a directory."""
        return any(path.is_dir() for path in self.base_paths)

    def read_attribute(self, name: str) -> str:
        """Return the stripped contents of the first readable attribute.

        Raises:
            AttributeIOError: If every candidate path failed

        """
        failures: list[str] = []
        for base in self.base_paths:
            path = base / name
            try:
                return path.read_text().strip()
            except OSError as e:
                failures.append(f"{path}: {e.strerror or e}")
            except UnicodeDecodeError:
                failures.append(f"{path}: contents are not valid text")
        raise AttributeIOError(name, failures)

    def write_attribute(self, name: str, value: str) -> None:
        """Write value to the first writable attribute.

        Candidates whose attribute file does not exist are skipped
        rather than created: sysfs never lets us create files, and a
        regular directory would happily accept one.

        Raises:
            AttributeIOError: If every candidate path failed

        """
        failures: list[str] = []
        for base in self.base_paths:
            path = base / name
            if not path.exists():
                failures.append(f"{path}: No such file or directory")
                continue
            try:
                path.write_text(value)
            except OSError as e:
                failures.append(f"{path}: {e.strerror or e}")
                continue
            logger.debug("Wrote %r to %s", value, path)
            return
        raise AttributeIOError(name, failures)
