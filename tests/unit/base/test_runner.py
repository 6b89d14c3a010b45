"""Tests for Runner hierarchy and autonomous execution."""

import threading
import time

import pytest
from pydantic import Field

from archsense.base.process import Process
from archsense.base.runner import FastRunner, StandardRunner, TimeSource


class CountingProcess(Process):
    """Process that counts cycles and records when they ran."""

    counter: int = Field(default=0)
    times: list[int] = Field(default_factory=list)

    def _execute(self) -> None:
        self.counter += 1
        self.times.append(self.get_time())


class FlakyProcess(Process):
    """Process that fails on every other cycle."""

    attempts: int = Field(default=0)

    def _execute(self) -> None:
        self.attempts += 1
        if self.attempts % 2 == 0:
            raise RuntimeError("transient failure")


class TestTimeSource:
    """Test TimeSource thread-local storage functionality."""

    def test_timesource_basic_operations(self):
        """Test TimeSource set/get/clear operations."""
        assert TimeSource.get_current() is None

        runner = StandardRunner(
            name="test_runner", main_process=CountingProcess(name="proc")
        )
        TimeSource.set_current(runner)
        assert TimeSource.get_current() is runner

        TimeSource.clear_current()
        assert TimeSource.get_current() is None

        # Multiple clears should be safe
        TimeSource.clear_current()
        assert TimeSource.get_current() is None

    def test_timesource_thread_isolation(self):
        """Test each thread sees only the runner it registered."""
        results = {}

        def thread_function(thread_id):
            runner = StandardRunner(
                name=f"runner_{thread_id}",
                main_process=CountingProcess(name=f"proc_{thread_id}"),
            )
            TimeSource.set_current(runner)
            results[thread_id] = TimeSource.get_current()
            TimeSource.clear_current()

        threads = [
            threading.Thread(target=thread_function, args=(i,)) for i in (1, 2)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results[1].name == "runner_1"
        assert results[2].name == "runner_2"
        assert TimeSource.get_current() is None


class TestFastRunner:
    """Test simulated-time execution."""

    def test_runs_on_schedule(self):
        """Test ten simulated seconds at 2s intervals gives five cycles."""
        process = CountingProcess(name="proc")
        runner = FastRunner(name="sim", main_process=process)

        runner.run_for_duration(10.0)

        assert process.counter == 5
        assert process.times == [
            0,
            2_000_000_000,
            4_000_000_000,
            6_000_000_000,
            8_000_000_000,
        ]

    def test_failures_do_not_break_schedule(self):
        """Test failing cycles are logged and skipped, not retried."""
        process = FlakyProcess(name="flaky", interval_ns=1_000_000_000)
        runner = FastRunner(name="sim", main_process=process)

        runner.run_for_duration(6.0)

        assert process.attempts == 6
        assert process.execution_count == 6

    def test_start_not_supported(self):
        runner = FastRunner(name="sim", main_process=CountingProcess(name="proc"))
        with pytest.raises(NotImplementedError):
            runner.start()

    def test_time_source_cleared_after_run(self):
        runner = FastRunner(name="sim", main_process=CountingProcess(name="proc"))
        runner.run_for_duration(1.0)
        assert TimeSource.get_current() is None


class TestStandardRunner:
    """Test threaded execution on the real clock."""

    def test_start_and_stop(self):
        process = CountingProcess(name="proc", interval_ns=10_000_000)
        runner = StandardRunner(name="real", main_process=process)

        runner.start()
        try:
            assert runner.is_running()
            deadline = time.monotonic() + 2.0
            while process.counter < 3 and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            runner.stop()

        assert process.counter >= 3
        assert not runner.is_running()

    def test_double_start_rejected(self):
        runner = StandardRunner(
            name="real", main_process=CountingProcess(name="proc")
        )
        runner.start()
        try:
            with pytest.raises(RuntimeError, match="already started"):
                runner.start()
        finally:
            runner.stop()

    def test_stop_is_prompt(self):
        """Test stop() interrupts a long sleep between cycles."""
        process = CountingProcess(name="proc", interval_ns=60_000_000_000)
        runner = StandardRunner(name="real", main_process=process)

        runner.start()
        time.sleep(0.05)
        started = time.monotonic()
        runner.stop()

        assert time.monotonic() - started < 2.0
        assert process.counter == 1

    def test_stop_without_start(self):
        runner = StandardRunner(
            name="real", main_process=CountingProcess(name="proc")
        )
        runner.stop()
        assert not runner.is_running()

    def test_survives_failing_cycles(self):
        process = FlakyProcess(name="flaky", interval_ns=10_000_000)
        runner = StandardRunner(name="real", main_process=process)

        runner.start()
        try:
            deadline = time.monotonic() + 2.0
            while process.attempts < 4 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert runner.is_running()
        finally:
            runner.stop()

        assert process.attempts >= 4
