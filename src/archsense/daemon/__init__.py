"""Daemon side: configuration store, protocol, dispatch and server."""

from .client import send_command
from .config import DaemonConfig, load_config, save_config
from .handlers import CommandDispatcher
from .server import CommandServer
from .service import ArchSenseDaemon, restore_hardware
from .settings import DaemonSettings
from .store import ConfigStore

__all__ = [
    "ArchSenseDaemon",
    "CommandDispatcher",
    "CommandServer",
    "ConfigStore",
    "DaemonConfig",
    "DaemonSettings",
    "load_config",
    "restore_hardware",
    "save_config",
    "send_command",
]
