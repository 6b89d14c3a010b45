"""Daemon assembly: wire hardware, store, control loop and server."""

import logging
import threading
from collections.abc import Callable

from archsense.base.errors import ArchSenseError, DeviceNotFoundError
from archsense.base.runner import StandardRunner
from archsense.controllers.curve import DEFAULT_FAN_CURVE, FanCurve
from archsense.controllers.fan import AutoFanController
from archsense.hardware.interface import HardwareInterface
from archsense.hardware.keyboard import KeyboardInterface
from archsense.hardware.sysfs import AttributeTree

from .config import DaemonConfig
from .handlers import CommandDispatcher
from .server import CommandServer
from .settings import DaemonSettings
from .store import ConfigStore

logger = logging.getLogger(__name__)


def restore_hardware(
    hardware: HardwareInterface,
    keyboard: KeyboardInterface,
    config: DaemonConfig,
) -> list[str]:
    """Re-apply persisted settings to the hardware.

    Settings are applied independently; a failure is logged and the
    next one is tried. A missing keyboard is logged and skipped
    without counting as a failure.

    Returns:
        Names of the settings that could not be applied

    """
    steps: list[tuple[str, Callable[[], None]]] = [
        ("battery limiter", lambda: hardware.set_battery_limiter(config.battery_limiter)),
        ("LCD overdrive", lambda: hardware.set_lcd_overdrive(config.lcd_overdrive)),
        ("boot animation", lambda: hardware.set_boot_animation(config.boot_animation)),
        ("backlight timeout", lambda: hardware.set_backlight_timeout(config.backlight_timeout)),
        ("USB charging", lambda: hardware.set_usb_charging(config.usb_charging)),
    ]
    if config.thermal_profile:
        profile = config.thermal_profile
        steps.append(("thermal profile", lambda: hardware.set_thermal_profile(profile)))
    if not config.fan_mode.is_auto:
        steps.append(("fan mode", lambda: hardware.set_fan_mode(config.fan_mode)))
    steps.append(
        (
            "keyboard lighting",
            lambda: keyboard.apply_mode(
                config.rgb_mode, config.rgb_brightness, config.fx_speed
            ),
        )
    )

    failed: list[str] = []
    for name, step in steps:
        try:
            step()
        except DeviceNotFoundError as e:
            logger.warning("Skipping %s: %s", name, e)
        except ArchSenseError as e:
            logger.warning("Could not restore %s: %s", name, e)
            failed.append(name)
    return failed


class ArchSenseDaemon:
    """The running daemon: control loop plus command server."""

    def __init__(
        self,
        settings: DaemonSettings,
        hardware: HardwareInterface | None = None,
        keyboard: KeyboardInterface | None = None,
        store: ConfigStore | None = None,
        curve: FanCurve = DEFAULT_FAN_CURVE,
    ) -> None:
        self.settings = settings
        self.hardware = hardware or HardwareInterface(
            sense=AttributeTree(settings.sense_paths),
            platform=AttributeTree(settings.platform_paths),
            thermal=AttributeTree(settings.thermal_paths),
        )
        self.keyboard = keyboard or KeyboardInterface(
            timeout_ms=settings.usb_timeout_ms
        )
        self.store = store or ConfigStore.load(settings.config_path)
        self.controller = AutoFanController(
            self.hardware,
            self.store,
            name="auto_fan",
            curve=curve,
            interval_ns=settings.control_interval_ns,
        )
        self.runner = StandardRunner(name="control_loop", main_process=self.controller)
        self.dispatcher = CommandDispatcher(
            self.hardware, self.keyboard, self.store, curve
        )
        self.server = CommandServer(
            self.dispatcher, settings.socket_path, settings.buffer_size
        )
        self._stopped = threading.Event()

    def restore(self) -> list[str]:
        """Apply the persisted configuration to the hardware."""
        if not self.hardware.is_available():
            logger.error(
                "linuwu_sense attributes not found; is the driver loaded?"
            )
        return restore_hardware(self.hardware, self.keyboard, self.store.snapshot())

    def start(self) -> None:
        """Bind the socket, then start the control loop and the server.

        Raises:
            OSError: If the socket cannot be bound

        """
        self._stopped.clear()
        self.server.bind()
        self.runner.start()
        self.server.start()

    def stop(self) -> None:
        """Stop serving and stop the control loop."""
        self.server.stop()
        self.runner.stop()
        self._stopped.set()

    def request_stop(self) -> None:
        """Ask wait() to return; safe to call from a signal handler."""
        self._stopped.set()

    def wait(self) -> None:
        """Block until request_stop() or stop() is called."""
        while not self._stopped.wait(timeout=1.0):
            pass
