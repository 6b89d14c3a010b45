"""Tests for multi-path attribute access."""

import pytest

from archsense import AttributeIOError, AttributeTree


class TestAttributeTree:
    """Test first-working-path semantics."""

    def test_read_falls_back_to_second_path(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        second.mkdir()
        (second / "fan_speed").write_text("30,40\n")

        tree = AttributeTree([first, second])

        assert tree.read_attribute("fan_speed") == "30,40"

    def test_read_prefers_first_path(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        for base, value in ((first, "1"), (second, "0")):
            base.mkdir()
            (base / "battery_limiter").write_text(value)

        tree = AttributeTree([first, second])

        assert tree.read_attribute("battery_limiter") == "1"

    def test_read_failure_lists_every_path(self, tmp_path):
        tree = AttributeTree([tmp_path / "a", tmp_path / "b"])

        with pytest.raises(AttributeIOError) as excinfo:
            tree.read_attribute("usb_charging")

        error = excinfo.value
        assert error.attribute == "usb_charging"
        assert len(error.failures) == 2
        assert str(tmp_path / "a" / "usb_charging") in str(error)
        assert str(tmp_path / "b" / "usb_charging") in str(error)

    def test_undecodable_contents_fall_through(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        for base in (first, second):
            base.mkdir()
        (first / "fan_speed").write_bytes(b"\xff\xff")
        (second / "fan_speed").write_text("20,20\n")

        assert AttributeTree([first, second]).read_attribute("fan_speed") == "20,20"

    def test_undecodable_contents_raise_io_error(self, tmp_path):
        base = tmp_path / "a"
        base.mkdir()
        (base / "fan_speed").write_bytes(b"\xff\xff")

        with pytest.raises(AttributeIOError, match="not valid text"):
            AttributeTree([base]).read_attribute("fan_speed")

    def test_write_skips_missing_files(self, tmp_path):
        """Test writes never create an attribute file on a wrong path."""
        first, second = tmp_path / "a", tmp_path / "b"
        first.mkdir()
        second.mkdir()
        (second / "lcd_override").write_text("0")

        AttributeTree([first, second]).write_attribute("lcd_override", "1")

        assert not (first / "lcd_override").exists()
        assert (second / "lcd_override").read_text() == "1"

    def test_write_failure_raises(self, tmp_path):
        base = tmp_path / "a"
        base.mkdir()
        (base / "fan_speed").mkdir()

        with pytest.raises(AttributeIOError, match="Cannot access 'fan_speed'"):
            AttributeTree([base]).write_attribute("fan_speed", "50,50")

    def test_no_paths(self):
        with pytest.raises(AttributeIOError, match="no base paths"):
            AttributeTree([]).read_attribute("temp")

    def test_exists(self, tmp_path):
        assert not AttributeTree([tmp_path / "missing"]).exists()
        assert AttributeTree([tmp_path / "missing", tmp_path]).exists()

    def test_repr(self, tmp_path):
        assert repr(AttributeTree([tmp_path])) == f"AttributeTree([{tmp_path}])"
