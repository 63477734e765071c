"""Tests for toggle sources."""

from datetime import datetime, timedelta

import pytest

from stateful_worker.toggles import MinuteParityToggle, ToggleSource, resolve_condition
from stateful_worker.utils.time import fixed_clock


class TestMinuteParityToggle:
    """Test the minute-parity stand-in toggle."""

    def test_even_minute_is_unset(self, even_minute):
        toggle = MinuteParityToggle(fixed_clock(even_minute))
        assert toggle.unset() is True
        assert toggle.set() is False

    def test_odd_minute_is_set(self, odd_minute):
        toggle = MinuteParityToggle(fixed_clock(odd_minute))
        assert toggle.unset() is False
        assert toggle.set() is True

    def test_conditions_are_complementary_across_hour(self):
        start = datetime(2024, 1, 1, 0, 0)
        for minute in range(60):
            toggle = MinuteParityToggle(fixed_clock(start + timedelta(minutes=minute)))
            assert toggle.unset() != toggle.set()
            assert toggle.unset() is (minute % 2 == 0)

    def test_reads_clock_on_every_call(self, even_minute, odd_minute):
        readings = [even_minute, odd_minute]
        toggle = MinuteParityToggle(lambda: readings.pop(0))

        assert toggle.unset() is True
        assert toggle.unset() is False

    def test_default_clock(self):
        toggle = MinuteParityToggle()
        assert toggle.unset() in (True, False)

    def test_is_toggle_source(self):
        assert isinstance(MinuteParityToggle(), ToggleSource)


class TestToggleSourceBase:
    """Test the abstract toggle source."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ToggleSource()  # type: ignore[abstract]


class TestResolveCondition:
    """Test sync/async condition resolution."""

    def test_plain_bool(self):
        assert resolve_condition(True) is True
        assert resolve_condition(False) is False

    def test_truthy_values_coerced(self):
        assert resolve_condition(1) is True
        assert resolve_condition(0) is False

    def test_coroutine_awaited(self):
        async def flag():
            return True

        assert resolve_condition(flag()) is True
