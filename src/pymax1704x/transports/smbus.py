"""Linux I2C transport built on smbus2.

This module provides the SMBusTransport class for talking to the fuel gauge
through a Linux ``/dev/i2c-N`` bus (Raspberry Pi and similar boards).

SMBus word transfers put the low byte on the wire first, while the fuel gauge
sends and expects the high byte first. Every word is byte-swapped on the way
in and on the way out.

IMPORTANT: No Locking
---------------------
The transport does not serialize access. Masked writes in the driver are a
read followed by a write; two threads writing different fields of the same
register through one transport can lose an update. Callers sharing a
transport must serialize access themselves.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING

from pymax1704x.constants import I2C_ADDRESS

from .exceptions import TransportConnectionError, TransportReadError, TransportWriteError

if TYPE_CHECKING:
    from smbus2 import SMBus

_LOGGER = logging.getLogger(__name__)

__all__ = ["SMBusTransport", "swap_bytes"]


def swap_bytes(word: int) -> int:
    """Swap the two bytes of a 16-bit word."""
    return ((word & 0xFF) << 8) | ((word >> 8) & 0xFF)


class SMBusTransport:
    """smbus2-backed transport for one device on a Linux I2C bus.

    Example:
        with SMBusTransport(bus=1) as transport:
            gauge = MAX17048(transport)
            print(f"{gauge.read_cell_voltage():.3f} V")

    Note:
        Requires the `smbus2` package to be installed:
        pip install pymax1704x[smbus]
    """

    def __init__(self, bus: int = 1, address: int = I2C_ADDRESS) -> None:
        """Initialize SMBus transport.

        Args:
            bus: Linux I2C bus number (``/dev/i2c-<bus>``)
            address: 7-bit device address (default 0x36)
        """
        self._bus_number = bus
        self._address = address
        self._bus: SMBus | None = None

    @property
    def bus(self) -> int:
        """Get the I2C bus number."""
        return self._bus_number

    @property
    def address(self) -> int:
        """Get the device address."""
        return self._address

    @property
    def is_connected(self) -> bool:
        """Return True while the bus is open."""
        return self._bus is not None

    def open(self) -> None:
        """Open the I2C bus.

        Raises:
            TransportConnectionError: If smbus2 is missing or the bus cannot be opened
        """
        if self._bus is not None:
            return

        try:
            # Import smbus2 here to make it optional
            from smbus2 import SMBus

            self._bus = SMBus(self._bus_number)
        except ImportError as err:
            raise TransportConnectionError(
                "smbus2 package not installed. Install with: pip install pymax1704x[smbus]"
            ) from err
        except OSError as err:
            _LOGGER.error("Failed to open I2C bus %d: %s", self._bus_number, err)
            raise TransportConnectionError(
                f"Failed to open I2C bus {self._bus_number}: {err}"
            ) from err

        _LOGGER.info(
            "SMBus transport opened bus %d for device 0x%02X",
            self._bus_number,
            self._address,
        )

    def close(self) -> None:
        """Close the I2C bus if open."""
        if self._bus is None:
            return
        self._bus.close()
        self._bus = None
        _LOGGER.debug("SMBus transport closed bus %d", self._bus_number)

    def __enter__(self) -> SMBusTransport:
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _ensure_connected(self) -> SMBus:
        if self._bus is None:
            raise TransportConnectionError(
                f"I2C bus {self._bus_number} is not open; call open() first"
            )
        return self._bus

    def read_u16_be(self, address: int) -> int:
        """Read a big-endian register word.

        Raises:
            TransportConnectionError: If the bus is not open
            TransportReadError: If the device does not answer
        """
        bus = self._ensure_connected()
        try:
            raw = bus.read_word_data(self._address, address)
        except OSError as err:
            raise TransportReadError(
                f"Failed to read register 0x{address:02X} from device "
                f"0x{self._address:02X}: {err}"
            ) from err
        return swap_bytes(raw)

    def write_u16_be(self, address: int, word: int) -> None:
        """Write a big-endian register word.

        Raises:
            TransportConnectionError: If the bus is not open
            TransportWriteError: If the device does not acknowledge
        """
        bus = self._ensure_connected()
        try:
            bus.write_word_data(self._address, address, swap_bytes(word & 0xFFFF))
        except OSError as err:
            raise TransportWriteError(
                f"Failed to write register 0x{address:02X} on device "
                f"0x{self._address:02X}: {err}"
            ) from err
