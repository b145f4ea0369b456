"""Unit tests for the power-on reset sequence."""

from __future__ import annotations

from unittest.mock import MagicMock, call, patch

import pytest
from conftest import SimulatedBus

from pymax1704x import MAX17048
from pymax1704x.registers import Register


@pytest.fixture
def mock_sleep():
    """Patch out the reset delays."""
    with patch("pymax1704x.device.time.sleep") as sleep:
        yield sleep


class TestReset:
    """Test MAX17048.reset()."""

    def test_clears_on_first_attempt(
        self, bus: SimulatedBus, gauge: MAX17048, mock_sleep: MagicMock
    ) -> None:
        assert gauge.reset() is True
        assert bus.writes[0] == (Register.CMD, 0x5400)
        assert bus.registers[Register.STATUS] & 0x0100 == 0
        mock_sleep.assert_called_once_with(0.1)

    def test_retries_once(
        self, bus: SimulatedBus, gauge: MAX17048, mock_sleep: MagicMock
    ) -> None:
        bus.stick_bits(Register.STATUS, [0x0100])
        assert gauge.reset() is True
        assert mock_sleep.call_args_list == [call(0.1), call(1.0)]
        status_writes = [w for w in bus.writes if w[0] == Register.STATUS]
        assert len(status_writes) == 2

    def test_stuck_indicator_is_not_an_error(
        self, bus: SimulatedBus, gauge: MAX17048, mock_sleep: MagicMock
    ) -> None:
        bus.stick_bits(Register.STATUS, [0x0100, 0x0100])
        assert gauge.reset() is False
        assert mock_sleep.call_count == 2

    def test_command_nack_tolerated(
        self, bus: SimulatedBus, gauge: MAX17048, mock_sleep: MagicMock
    ) -> None:
        bus.fail_writes_to.add(Register.CMD)
        assert gauge.reset() is True
        assert bus.writes[0] == (Register.CMD, 0x5400)
        assert any(w[0] == Register.STATUS for w in bus.writes)

    def test_preserves_other_status_bits(
        self, bus: SimulatedBus, gauge: MAX17048, mock_sleep: MagicMock
    ) -> None:
        bus.registers[Register.STATUS] = 0x4100  # EnVr set
        gauge.reset()
        assert bus.registers[Register.STATUS] == 0x4000
