"""USB transport for the Predator keyboard lighting controller.

The controller sits on interface 3 of the keyboard (04F2:0117), which
the kernel's HID driver normally owns. Every operation detaches that
driver, claims the interface, sends its packets and gives everything
back, whether the packets went through or not.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import usb.core
import usb.util

from archsense.base.errors import (
    ClaimError,
    DeviceNotFoundError,
    TransferError,
)

from .lighting import (
    COLOR_APPLY_PACKET,
    COLOR_INIT_PACKET,
    Rgb,
    animation_packets,
    build_color_buffer,
    iter_chunks,
)
from .modes import Animation, CustomColor, RgbMode, SolidColor

logger = logging.getLogger(__name__)

VENDOR_ID = 0x04F2
PRODUCT_ID = 0x0117
INTERFACE = 3
ENDPOINT = 0x04

# Host-to-device | Class | Interface, SET_REPORT, output report 0
REQUEST_TYPE = 0x21
SET_REPORT = 0x09
REPORT_VALUE = 0x0300

DEFAULT_TIMEOUT_MS = 1000


class KeyboardInterface:
    """Lighting driver for the USB keyboard controller."""

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        find_device: Callable[..., Any] = usb.core.find,
    ) -> None:
        self.timeout_ms = timeout_ms
        self._find_device = find_device

    def is_present(self) -> bool:
        try:
            return self._find_device(
                idVendor=VENDOR_ID, idProduct=PRODUCT_ID
            ) is not None
        except (usb.core.NoBackendError, usb.core.USBError) as e:
            logger.debug("USB enumeration failed: %s", e)
            return False

    @contextmanager
    def claimed_interface(self) -> Iterator[Any]:
        """Claim the lighting interface for the duration of the block.

        Raises:
            DeviceNotFoundError: If the keyboard is not attached
            ClaimError: If the interface cannot be claimed, or cannot be
                released after an otherwise successful block

        """
        try:
            device = self._find_device(idVendor=VENDOR_ID, idProduct=PRODUCT_ID)
        except usb.core.NoBackendError as e:
            raise DeviceNotFoundError(f"No USB backend available: {e}") from e
        if device is None:
            raise DeviceNotFoundError(
                f"Keyboard not found ({VENDOR_ID:04X}:{PRODUCT_ID:04X})"
            )

        detached = False
        try:
            try:
                if device.is_kernel_driver_active(INTERFACE):
                    device.detach_kernel_driver(INTERFACE)
                    detached = True
            except NotImplementedError:
                # Backends without driver control have nothing to detach
                pass
            except usb.core.USBError as e:
                raise ClaimError(
                    f"Failed to detach kernel driver from interface {INTERFACE}: {e}"
                ) from e

            try:
                usb.util.claim_interface(device, INTERFACE)
            except usb.core.USBError as e:
                raise ClaimError(
                    f"Failed to claim USB interface {INTERFACE}: {e}"
                ) from e

            succeeded = False
            try:
                yield device
                succeeded = True
            finally:
                self._release(device, raise_errors=succeeded)
        finally:
            if detached:
                try:
                    device.attach_kernel_driver(INTERFACE)
                except usb.core.USBError as e:
                    logger.warning(
                        "Failed to reattach kernel driver to interface %d: %s",
                        INTERFACE,
                        e,
                    )
            usb.util.dispose_resources(device)

    def _release(self, device: Any, raise_errors: bool) -> None:
        try:
            usb.util.release_interface(device, INTERFACE)
        except usb.core.USBError as e:
            if raise_errors:
                raise ClaimError(
                    f"Failed to release USB interface {INTERFACE}: {e}"
                ) from e
            logger.warning("Failed to release USB interface %d: %s", INTERFACE, e)

    def _send_control(self, device: Any, packet: bytes, what: str) -> None:
        try:
            device.ctrl_transfer(
                REQUEST_TYPE,
                SET_REPORT,
                REPORT_VALUE,
                INTERFACE,
                packet,
                self.timeout_ms,
            )
        except usb.core.USBError as e:
            raise TransferError(f"USB {what} failed: {e}") from e

    def _send_interrupt(self, device: Any, chunk: bytes) -> None:
        try:
            device.write(ENDPOINT, chunk, self.timeout_ms)
        except usb.core.USBError as e:
            raise TransferError(f"USB color payload transfer failed: {e}") from e

    def apply_solid_color(self, rgb: Rgb, brightness: int) -> None:
        """Paint every zone one colour at the given brightness."""
        buffer = build_color_buffer(rgb, brightness)
        with self.claimed_interface() as device:
            self._send_control(device, COLOR_INIT_PACKET, "init handshake")
            for chunk in iter_chunks(buffer):
                self._send_interrupt(device, chunk)
            self._send_control(device, COLOR_APPLY_PACKET, "apply command")
        logger.info("Keyboard color set to RGB%s at %d%%", rgb, brightness)

    def apply_animation(
        self,
        effect: str,
        speed: int,
        brightness: int,
        direction: str = "right",
        color: str | None = None,
    ) -> None:
        """Start a firmware animation effect.

        Raises:
            AttributeValidationError: For an unknown effect, direction or
                colour, before the device is touched

        """
        packets = animation_packets(effect, speed, brightness, direction, color)
        with self.claimed_interface() as device:
            for packet in packets:
                self._send_control(device, packet, "animation command")
        logger.info(
            "Keyboard animation set to %s (speed %d%%, brightness %d%%)",
            effect,
            speed,
            brightness,
        )

    def apply_mode(self, mode: RgbMode, brightness: int, speed: int) -> None:
        """Apply a configured lighting mode."""
        if isinstance(mode, (SolidColor, CustomColor)):
            self.apply_solid_color(mode.rgb(), brightness)
        elif isinstance(mode, Animation):
            self.apply_animation(
                mode.effect, speed, brightness, mode.direction, mode.color
            )
        else:
            raise TypeError(f"Unknown lighting mode: {mode!r}")
