"""Process classes for periodic daemon work.

A Process is a unit of work that a Runner executes on a fixed
interval. The Process owns its timing bookkeeping (start time and
execution count) and nothing else; the things it acts on are handed
to concrete subclasses at construction.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from pydantic import ConfigDict, Field

from archsense.base.entity import Entity


class Process(Entity, ABC):
    """Base class for timing-driven units of work.

    Key characteristics:
    - Template method execution: execute() calls _execute() and only
      counts the cycle when it returns normally
    - Modulo timing: the next execution time is derived from the start
      time and the number of completed cycles, so a slow cycle does not
      shift the schedule
    - Pluggable clock: get_time() defers to the Runner driving the
      current thread, which may be simulated time in tests
    """

    model_config = ConfigDict(frozen=False)

    interval_ns: int = Field(
        default=2_000_000_000,  # 2s in nanoseconds
        gt=0,
        description="Execution interval in nanoseconds",
    )

    # Runtime timing state (mutable during execution)
    start_time: int = Field(
        default=0,
        description="Start time of the current schedule (nanoseconds)",
    )
    execution_count: int = Field(
        default=0,
        description="Number of completed execution cycles",
    )

    def __init__(self, **data: Any) -> None:
        """Initialize process with a per-instance logger."""
        super().__init__(**data)
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}."
            f"{self.__class__.__name__}."
            f"{self.name}"
        )

    def execute(self) -> None:
        """Run one cycle and advance the execution count.

        A cycle that raises is not counted; the exception propagates
        to the Runner, which logs it and keeps the schedule going.
        """
        self._execute()
        self.update_execution_count()

    @abstractmethod
    def _execute(self) -> None:
        """Perform one cycle of work."""

    def get_time(self) -> int:
        """Get current time in nanoseconds.

        When running under a Runner, returns the runner's time source,
        which may be simulated time for testing.
        """
        # Import here to avoid circular dependency
        from archsense.base.runner import TimeSource

        runner = TimeSource.get_current()
        if runner:
            return runner.get_time()

        return time.monotonic_ns()

    def update_execution_count(self) -> None:
        """Record one completed cycle."""
        self.execution_count += 1

    def get_next_execution_time(self) -> int:
        """Calculate when the next execution should occur."""
        return self.start_time + (self.execution_count * self.interval_ns)

    def initialize(self) -> None:
        """Reset timing state so the schedule starts now."""
        self.start_time = self.get_time()
        self.execution_count = 0


class Controller(Process, ABC):
    """Abstract base class for closed-loop control logic.

    A Controller reads sensors and drives an actuator each cycle. It
    reads daemon configuration but never changes it: what it writes to
    hardware is derived state, not a user choice.
    """
