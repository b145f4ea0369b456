"""Bus transport layer for pymax1704x.

The driver talks to the fuel gauge only through a :class:`BusTransport`:
anything that can read and write a big-endian 16-bit word at a register
address. :class:`SMBusTransport` covers Linux I2C buses via smbus2; other
platforms supply their own object with the same two methods.

Usage:
    from pymax1704x import MAX17048
    from pymax1704x.transports import SMBusTransport

    with SMBusTransport(bus=1) as transport:
        gauge = MAX17048(transport)
        print(gauge.read_state_of_charge())
"""

from __future__ import annotations

from .exceptions import (
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportWriteError,
)
from .protocol import BusTransport
from .smbus import SMBusTransport

__all__ = [
    # Protocol
    "BusTransport",
    # Transport implementations
    "SMBusTransport",
    # Exceptions
    "TransportError",
    "TransportConnectionError",
    "TransportReadError",
    "TransportWriteError",
]
