import shutil
import tempfile
from pathlib import Path

import pytest

from archsense import HardwareInterface
from archsense.daemon import CommandDispatcher, ConfigStore, DaemonConfig

from tests.unit.mocks import FakeGpuProbe, FakeKeyboard, SysfsTree


@pytest.fixture
def sysfs(tmp_path: Path) -> SysfsTree:
    """Provides a populated fake attribute tree."""
    return SysfsTree(tmp_path / "sys")


@pytest.fixture
def gpu_probe() -> FakeGpuProbe:
    """Provides a GPU probe reporting 55C."""
    return FakeGpuProbe(temperature=55)


@pytest.fixture
def hardware(sysfs: SysfsTree, gpu_probe: FakeGpuProbe) -> HardwareInterface:
    """Provides a HardwareInterface over the fake tree."""
    return sysfs.interface(gpu_probe)


@pytest.fixture
def keyboard() -> FakeKeyboard:
    """Provides a recording keyboard driver."""
    return FakeKeyboard()


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "etc" / "config.json"


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    """Provides a store with default configuration, not yet saved."""
    return ConfigStore(config_path, DaemonConfig())


@pytest.fixture
def dispatcher(
    hardware: HardwareInterface, keyboard: FakeKeyboard, store: ConfigStore
) -> CommandDispatcher:
    return CommandDispatcher(hardware, keyboard, store)


@pytest.fixture
def socket_dir():
    """Provides a short directory for Unix sockets (108-byte path limit)."""
    path = Path(tempfile.mkdtemp(prefix="as-", dir="/tmp"))
    yield path
    shutil.rmtree(path, ignore_errors=True)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "hardware: marks tests as hardware tests (may require physical hardware)")
    config.addinivalue_line("markers", "slow: marks tests as slow running")
