"""GPU temperature via the NVIDIA diagnostic tool."""

import subprocess
from collections.abc import Sequence

from archsense.base.errors import DiagnosticToolError

NVIDIA_SMI_COMMAND: tuple[str, ...] = (
    "nvidia-smi",
    "--query-gpu=temperature.gpu",
    "--format=csv,noheader,nounits",
)


class GpuTemperatureProbe:
    """Run nvidia-smi and parse its single-line temperature output."""

    def __init__(
        self,
        command: Sequence[str] = NVIDIA_SMI_COMMAND,
        timeout: float = 5.0,
    ) -> None:
        self.command = list(command)
        self.timeout = timeout

    def read(self) -> int:
        """Return the GPU temperature in whole degrees Celsius.

        Raises:
            DiagnosticToolError: If the tool is missing, times out,
                exits non-zero, or prints something that is not a number

        """
        tool = self.command[0]
        try:
            result = subprocess.run(
                self.command,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise DiagnosticToolError(f"{tool} not found") from e
        except subprocess.TimeoutExpired as e:
            raise DiagnosticToolError(
                f"{tool} timed out after {self.timeout}s"
            ) from e
        except UnicodeDecodeError as e:
            raise DiagnosticToolError(f"{tool} printed undecodable output") from e
        except OSError as e:
            raise DiagnosticToolError(f"{tool} could not run: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"exit status {result.returncode}"
            raise DiagnosticToolError(f"{tool} failed: {message}")

        lines = result.stdout.strip().splitlines()
        if not lines:
            raise DiagnosticToolError(f"{tool} printed no temperature")
        try:
            return int(float(lines[0].strip()))
        except ValueError as e:
            raise DiagnosticToolError(
                f"{tool} printed an unexpected temperature: {lines[0]!r}"
            ) from e
