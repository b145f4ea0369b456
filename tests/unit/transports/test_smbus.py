"""Tests for the smbus2 I2C transport."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from pymax1704x.transports import BusTransport
from pymax1704x.transports.exceptions import (
    TransportConnectionError,
    TransportReadError,
    TransportWriteError,
)
from pymax1704x.transports.smbus import SMBusTransport, swap_bytes


def test_swap_bytes() -> None:
    assert swap_bytes(0x1234) == 0x3412
    assert swap_bytes(0x00FF) == 0xFF00
    assert swap_bytes(swap_bytes(0xBEEF)) == 0xBEEF


class TestSMBusTransport:
    """Tests for SMBusTransport class."""

    def test_init_default_values(self) -> None:
        transport = SMBusTransport()
        assert transport.bus == 1
        assert transport.address == 0x36
        assert transport.is_connected is False

    def test_satisfies_protocol(self) -> None:
        assert isinstance(SMBusTransport(), BusTransport)

    def test_open_and_close(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            transport = SMBusTransport(bus=3)
            transport.open()
            mock_smbus_class.assert_called_once_with(3)
            assert transport.is_connected is True

            transport.close()
            mock_smbus_class.return_value.close.assert_called_once()
            assert transport.is_connected is False

    def test_open_twice_is_noop(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            transport = SMBusTransport()
            transport.open()
            transport.open()
            assert mock_smbus_class.call_count == 1

    def test_context_manager(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            with SMBusTransport() as transport:
                assert transport.is_connected is True
            assert transport.is_connected is False
            mock_smbus_class.return_value.close.assert_called_once()

    def test_open_failure(self) -> None:
        with patch("smbus2.SMBus", side_effect=FileNotFoundError("/dev/i2c-9")):
            transport = SMBusTransport(bus=9)
            with pytest.raises(TransportConnectionError, match="bus 9"):
                transport.open()
            assert transport.is_connected is False

    def test_missing_smbus2(self) -> None:
        with patch.dict(sys.modules, {"smbus2": None}):
            with pytest.raises(TransportConnectionError, match="smbus2"):
                SMBusTransport().open()

    def test_read_before_open(self) -> None:
        with pytest.raises(TransportConnectionError, match="not open"):
            SMBusTransport().read_u16_be(0x02)

    def test_write_before_open(self) -> None:
        with pytest.raises(TransportConnectionError):
            SMBusTransport().write_u16_be(0x0C, 0x971C)

    def test_read_swaps_bytes(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            mock_bus = MagicMock()
            mock_bus.read_word_data.return_value = 0x50C3
            mock_smbus_class.return_value = mock_bus

            with SMBusTransport() as transport:
                assert transport.read_u16_be(0x02) == 0xC350
            mock_bus.read_word_data.assert_called_once_with(0x36, 0x02)

    def test_write_swaps_bytes(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            mock_bus = MagicMock()
            mock_smbus_class.return_value = mock_bus

            with SMBusTransport(address=0x37) as transport:
                transport.write_u16_be(0xFE, 0x5400)
            mock_bus.write_word_data.assert_called_once_with(0x37, 0xFE, 0x0054)

    def test_read_error(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            mock_bus = MagicMock()
            mock_bus.read_word_data.side_effect = OSError(121, "Remote I/O error")
            mock_smbus_class.return_value = mock_bus

            with SMBusTransport() as transport:
                with pytest.raises(TransportReadError, match="0x04"):
                    transport.read_u16_be(0x04)

    def test_write_error(self) -> None:
        with patch("smbus2.SMBus") as mock_smbus_class:
            mock_bus = MagicMock()
            mock_bus.write_word_data.side_effect = OSError(121, "Remote I/O error")
            mock_smbus_class.return_value = mock_bus

            with SMBusTransport() as transport:
                with pytest.raises(TransportWriteError):
                    transport.write_u16_be(0x0C, 0x971C)
