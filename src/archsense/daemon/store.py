"""The single authoritative configuration shared by all daemon threads."""

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from archsense.base.errors import StoreError

from .config import DaemonConfig, load_config, save_config

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ConfigStore:
    """Lock-guarded configuration that persists every confirmed change.

    with_lock() is the only way to change the configuration. The
    operation works on a copy: the copy replaces the current
    configuration only after the operation returns and the copy has
    been written to disk. An operation that raises (typically because
    the hardware rejected a write) leaves memory and disk untouched.
    """

    def __init__(self, path: Path, config: DaemonConfig | None = None) -> None:
        self.path = path
        self._config = config if config is not None else DaemonConfig()
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> "ConfigStore":
        """Create a store from the file at path, or defaults."""
        return cls(path, load_config(path))

    def with_lock(self, operation: Callable[[DaemonConfig], R]) -> R:
        """Run a read-modify-write operation in the critical section.

        Raises:
            StoreError: If the changed configuration cannot be saved

        """
        with self._lock:
            draft = self._config.model_copy(deep=True)
            result = operation(draft)
            if draft != self._config:
                try:
                    save_config(self.path, draft)
                except OSError as e:
                    raise StoreError(
                        f"Failed to save configuration to {self.path}: {e}"
                    ) from e
                self._config = draft
                logger.debug("Configuration saved to %s", self.path)
            return result

    def read(self, getter: Callable[[DaemonConfig], R]) -> R:
        """Return getter(config) evaluated under the lock.

        Keep getters to pure in-memory work; the lock is held while they
        run.
        """
        with self._lock:
            return getter(self._config)

    def snapshot(self) -> DaemonConfig:
        """Return a consistent deep copy of the configuration."""
        return self.read(lambda config: config.model_copy(deep=True))
