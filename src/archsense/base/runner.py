"""Runner classes for autonomous execution of daemon processes."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any

from pydantic import Field

from .entity import Entity, describe
from .process import Process


class TimeSource:
    """Thread-local time source discovery for process execution.

    Processes ask TimeSource for the runner driving their thread so
    that simulated-time runners can stand in for the wall clock.
    """

    _thread_locals = threading.local()

    @classmethod
    def set_current(cls, runner: "Runner") -> None:
        """Set time source (runner) for current thread."""
        cls._thread_locals.runner = runner

    @classmethod
    def get_current(cls) -> "Runner | None":
        """Get time source (runner) for current thread, if any."""
        return getattr(cls._thread_locals, "runner", None)

    @classmethod
    def clear_current(cls) -> None:
        """Clear time source for current thread."""
        if hasattr(cls._thread_locals, "runner"):
            del cls._thread_locals.runner


class Runner(Entity, ABC):
    """Base class for autonomous execution of a process.

    Runner calls the main process's execute() according to its
    interval. A failing cycle is logged and the schedule continues;
    nothing a process raises stops the daemon.
    """

    main_process: Process = Field(
        description="The process to execute autonomously"
    )

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        self._logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}."
            f"{self.name}"
        )
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @abstractmethod
    def get_time(self) -> int:
        """Get current time in nanoseconds."""

    @abstractmethod
    def _execution_loop(self) -> None:
        """Main execution loop run in separate thread."""

    def start(self) -> None:
        """Start autonomous execution in a background thread.

        Raises:
            RuntimeError: If runner is already started

        """
        if self._thread and self._thread.is_alive():
            raise RuntimeError(f"Runner {self.name} already started")

        self._logger.info(
            f"Starting {describe(self.main_process, interval_ns=self.main_process.interval_ns)}"
        )

        self.main_process.initialize()

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._execution_loop,
            name=f"Runner-{self.name}",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop autonomous execution and wait for the thread to end."""
        if not self._thread:
            return

        self._logger.info(f"Stopping runner {self.name}")
        self._stop_event.set()

        self._thread.join(timeout=5.0)
        if self._thread.is_alive():
            self._logger.warning(
                f"Runner {self.name} thread did not stop within timeout"
            )

        self._thread = None

    def is_running(self) -> bool:
        """Check if the execution thread is active."""
        return self._thread is not None and self._thread.is_alive()

    def _execute_process_once(self) -> None:
        """Execute the main process once."""
        self._logger.debug(f"Executing {self.main_process.name}")
        self.main_process.execute()


class StandardRunner(Runner):
    """Production runner on the monotonic clock.

    Sleeps between executions on an Event so stop() takes effect
    immediately instead of after the remainder of the interval.
    """

    def get_time(self) -> int:
        """Get current monotonic time in nanoseconds."""
        return time.monotonic_ns()

    def _execution_loop(self) -> None:
        """Main execution loop that respects process timing."""
        TimeSource.set_current(self)

        try:
            while not self._stop_event.is_set():
                try:
                    next_time = self.main_process.get_next_execution_time()
                    current_time = self.get_time()

                    if next_time <= current_time:
                        self._execute_process_once()
                    else:
                        sleep_duration = (
                            next_time - current_time
                        ) / 1_000_000_000.0  # ns to seconds
                        self._stop_event.wait(sleep_duration)

                except Exception as e:
                    self._logger.error(
                        f"Error in execution loop: {e}", exc_info=True
                    )
                    # Skip the failed cycle so the schedule keeps moving
                    self.main_process.update_execution_count()
                    self._stop_event.wait(0.1)

        finally:
            TimeSource.clear_current()
            self._logger.info(f"Runner {self.name} execution loop ended")


class FastRunner(Runner):
    """Test runner that advances simulated time instantly.

    FastRunner jumps straight to each scheduled execution, so minutes
    of control-loop behaviour run in milliseconds and deterministically.
    """

    max_duration_ns: int = Field(
        default=3600_000_000_000,  # 1 hour in nanoseconds
        description="Maximum simulation duration to prevent infinite loops",
    )

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)
        self._simulation_time = 0
        self._start_time = 0

    def get_time(self) -> int:
        """Get current simulation time in nanoseconds."""
        return self._simulation_time

    def _advance_time_to(self, target_time: int) -> None:
        if target_time > self._simulation_time:
            self._simulation_time = target_time

    def _should_continue_execution(self) -> bool:
        if self._stop_event.is_set():
            return False

        if self._simulation_time - self._start_time > self.max_duration_ns:
            self._logger.warning("FastRunner exceeded max duration, stopping")
            return False

        return True

    def _execute_one_cycle(self) -> None:
        """Execute one cycle if the process is due, else jump ahead."""
        next_time = self.main_process.get_next_execution_time()

        if next_time <= self._simulation_time:
            try:
                self._execute_process_once()
            except Exception as e:
                self._logger.error(f"Error in simulated cycle: {e}")
                self.main_process.update_execution_count()
        else:
            self._advance_time_to(next_time)

    def run_for_duration(self, duration_seconds: float) -> None:
        """Run the simulation for the given duration without delays."""
        self._simulation_time = 0
        self._start_time = 0
        TimeSource.set_current(self)

        self.main_process.initialize()

        try:
            end_time = self._simulation_time + int(
                duration_seconds * 1_000_000_000
            )

            while (
                self._simulation_time < end_time
                and self._should_continue_execution()
            ):
                self._execute_one_cycle()

        finally:
            TimeSource.clear_current()

    def _execution_loop(self) -> None:
        raise NotImplementedError(
            "FastRunner uses run_for_duration() instead of start()"
        )

    def start(self) -> None:
        """FastRunner doesn't support threaded execution."""
        raise NotImplementedError(
            "FastRunner uses run_for_duration() instead of start()"
        )
