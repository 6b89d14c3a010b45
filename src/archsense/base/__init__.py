"""Base classes for the arch-sense daemon."""

from archsense.base.entity import Entity
from archsense.base.errors import (
    ArchSenseError,
    AttributeIOError,
    AttributeValidationError,
    ClaimError,
    DeviceError,
    DeviceNotFoundError,
    DiagnosticToolError,
    ProtocolError,
    StoreError,
    TransferError,
)
from archsense.base.process import Controller, Process
from archsense.base.runner import FastRunner, Runner, StandardRunner, TimeSource

__all__ = [
    "ArchSenseError",
    "AttributeIOError",
    "AttributeValidationError",
    "ClaimError",
    "Controller",
    "DeviceError",
    "DeviceNotFoundError",
    "DiagnosticToolError",
    "Entity",
    "FastRunner",
    "Process",
    "ProtocolError",
    "Runner",
    "StandardRunner",
    "StoreError",
    "TimeSource",
    "TransferError",
]
