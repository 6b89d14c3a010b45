"""Tests for typed hardware attribute access."""

import pytest

from archsense import (
    AttributeIOError,
    AttributeValidationError,
    DiagnosticToolError,
    FanMode,
    FanModeKind,
)

from ..mocks import FakeGpuProbe


class TestBooleanAttributes:
    """Test 0/1 attributes."""

    def test_read_bool(self, sysfs, hardware):
        assert hardware.read_bool("boot_animation_sound") is True
        assert hardware.read_bool("battery_limiter") is False

    def test_read_bool_rejects_other_values(self, sysfs, hardware):
        sysfs.set("battery_limiter", "2")
        with pytest.raises(AttributeValidationError, match="expected 0 or 1"):
            hardware.read_bool("battery_limiter")

    @pytest.mark.parametrize(
        ("setter", "attribute"),
        [
            ("set_battery_limiter", "battery_limiter"),
            ("set_battery_calibration", "battery_calibration"),
            ("set_lcd_overdrive", "lcd_override"),
            ("set_boot_animation", "boot_animation_sound"),
            ("set_backlight_timeout", "backlight_timeout"),
        ],
    )
    def test_setters_write_expected_attribute(self, sysfs, hardware, setter, attribute):
        getattr(hardware, setter)(True)
        assert sysfs.get(attribute) == "1"
        getattr(hardware, setter)(False)
        assert sysfs.get(attribute) == "0"

    def test_missing_attribute(self, sysfs, hardware):
        sysfs.remove("battery_calibration")
        with pytest.raises(AttributeIOError):
            hardware.set_battery_calibration(True)


class TestFanSpeed:
    """Test the cpu,gpu fan_speed attribute."""

    def test_get_fan_speed(self, sysfs, hardware):
        sysfs.set("fan_speed", "35,60")
        assert hardware.get_fan_speed() == (35, 60)

    def test_single_value_applies_to_both(self, sysfs, hardware):
        sysfs.set("fan_speed", "0")
        assert hardware.get_fan_speed() == (0, 0)

    def test_values_are_clamped(self, sysfs, hardware):
        sysfs.set("fan_speed", "120,-5")
        assert hardware.get_fan_speed() == (100, 0)

    @pytest.mark.parametrize("raw", ["fast", "1,2,3", "50,"])
    def test_malformed_rejected(self, sysfs, hardware, raw):
        sysfs.set("fan_speed", raw)
        with pytest.raises(AttributeValidationError, match="Unexpected fan speed"):
            hardware.get_fan_speed()

    def test_set_fan_speed_clamps(self, sysfs, hardware):
        hardware.set_fan_speed(150, -10)
        assert sysfs.get("fan_speed") == "100,0"

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (FanMode(kind=FanModeKind.QUIET), "30,30"),
            (FanMode(kind=FanModeKind.BALANCED), "50,50"),
            (FanMode(kind=FanModeKind.PERFORMANCE), "70,70"),
            (FanMode(kind=FanModeKind.TURBO), "100,100"),
            (FanMode.custom(40, 60), "40,60"),
            (FanMode.auto(), "0,0"),
        ],
    )
    def test_set_fan_mode(self, sysfs, hardware, mode, expected):
        sysfs.set("fan_speed", "12,12")
        hardware.set_fan_mode(mode)
        assert sysfs.get("fan_speed") == expected


class TestUsbCharging:
    """Test the power-off USB charging threshold."""

    @pytest.mark.parametrize("threshold", [0, 10, 20, 30])
    def test_accepted_thresholds(self, sysfs, hardware, threshold):
        hardware.set_usb_charging(threshold)
        assert sysfs.get("usb_charging") == str(threshold)
        assert hardware.get_usb_charging() == threshold

    @pytest.mark.parametrize("threshold", [5, 15, 40, -10])
    def test_rejected_before_write(self, sysfs, hardware, threshold):
        with pytest.raises(AttributeValidationError, match="choose from: 0, 10, 20, 30"):
            hardware.set_usb_charging(threshold)
        assert sysfs.get("usb_charging") == "0"

    def test_malformed_reading(self, sysfs, hardware):
        sysfs.set("usb_charging", "on")
        with pytest.raises(AttributeValidationError):
            hardware.get_usb_charging()


class TestThermalProfile:
    """Test ACPI platform profile access."""

    def test_get_profile_and_choices(self, hardware):
        assert hardware.get_thermal_profile() == "balanced"
        assert hardware.get_thermal_profile_choices() == [
            "low-power",
            "balanced",
            "performance",
        ]

    def test_set_profile(self, sysfs, hardware):
        hardware.set_thermal_profile("performance")
        assert sysfs.get("platform_profile", sysfs.platform) == "performance"

    def test_unknown_profile_rejected(self, sysfs, hardware):
        with pytest.raises(AttributeValidationError, match="Unsupported thermal profile 'turbo'"):
            hardware.set_thermal_profile("turbo")
        assert sysfs.get("platform_profile", sysfs.platform) == "balanced"

    def test_no_choices(self, sysfs, hardware):
        sysfs.set("platform_profile_choices", "", sysfs.platform)
        with pytest.raises(AttributeValidationError, match="choose from: none"):
            hardware.set_thermal_profile("balanced")


class TestTemperatures:
    """Test CPU and GPU temperature readings."""

    def test_cpu_temperature(self, sysfs, hardware):
        sysfs.set("temp", "61999", sysfs.thermal)
        assert hardware.get_cpu_temperature() == 61

    def test_cpu_temperature_malformed(self, sysfs, hardware):
        sysfs.set("temp", "hot", sysfs.thermal)
        with pytest.raises(AttributeValidationError):
            hardware.get_cpu_temperature()

    def test_gpu_temperature(self, hardware):
        assert hardware.get_gpu_temperature() == 55

    def test_gpu_failure_propagates(self, sysfs):
        hardware = sysfs.interface(FakeGpuProbe(error=DiagnosticToolError("nvidia-smi not found")))
        with pytest.raises(DiagnosticToolError, match="not found"):
            hardware.get_gpu_temperature()


class TestAvailability:
    def test_available(self, hardware):
        assert hardware.is_available()

    def test_unavailable(self, tmp_path):
        from archsense import AttributeTree, HardwareInterface

        hardware = HardwareInterface(sense=AttributeTree([tmp_path / "nothing"]))
        assert not hardware.is_available()
