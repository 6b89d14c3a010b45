"""Exception hierarchy for the arch-sense daemon.

Every failure that can reach a client is an ArchSenseError. The command
dispatcher turns these into Error responses using str(exc), so messages
are written for the person at the keyboard, not for a traceback.

Status queries recover individual sensor failures to sentinel values;
mutating commands propagate them verbatim and leave the configuration
store untouched.
"""


class ArchSenseError(Exception):
    """Base class for all daemon errors reported to clients."""


class AttributeIOError(ArchSenseError):
    """An attribute file could not be read or written on any base path."""

    def __init__(self, attribute: str, failures: list[str]) -> None:
        self.attribute = attribute
        self.failures = list(failures)
        detail = "; ".join(self.failures) if self.failures else "no base paths"
        super().__init__(f"Cannot access '{attribute}': {detail}")


class AttributeValidationError(ArchSenseError):
    """A value lies outside the domain the hardware accepts."""


class ProtocolError(ArchSenseError):
    """A request payload could not be decoded into a command."""


class DeviceError(ArchSenseError):
    """Base class for USB lighting device failures."""


class DeviceNotFoundError(DeviceError):
    """The keyboard lighting controller is not attached."""


class ClaimError(DeviceError):
    """The USB interface could not be claimed or released."""


class TransferError(DeviceError):
    """A control or interrupt transfer to the device failed."""


class DiagnosticToolError(ArchSenseError):
    """An external diagnostic tool is missing, failed, or printed garbage."""


class StoreError(ArchSenseError):
    """The configuration could not be persisted."""
