"""Python driver for the MAX17048/MAX17049 battery fuel gauge.

Usage:
    Reading the gauge over a Linux I2C bus:
        from pymax1704x import MAX17048
        from pymax1704x.transports import SMBusTransport

        with SMBusTransport(bus=1) as transport:
            gauge = MAX17048(transport)
            print(gauge.read_cell_voltage(), gauge.read_state_of_charge())

    Capacity estimates:
        gauge = MAX17048(transport, design_capacity_mah=3700, design_capacity_wh=13.7)
        print(gauge.remaining_charge_mah())
        print(gauge.hours_to_full(current_amps=0.5))
"""

from __future__ import annotations

from .bitfield import RegisterAccessor
from .constants import I2C_ADDRESS, INFINITE_HOURS
from .data import AlertStatus, FuelGaugeReading
from .device import MAX17048
from .exceptions import (
    CapacityNotSetError,
    FieldWidthError,
    FuelGaugeError,
    PreconditionError,
)
from .registers import Register, RegisterField
from .transports import (
    BusTransport,
    SMBusTransport,
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportWriteError,
)

__version__ = "0.1.0"
__all__ = [
    "MAX17048",
    "RegisterAccessor",
    # Register map
    "Register",
    "RegisterField",
    # Data models
    "AlertStatus",
    "FuelGaugeReading",
    # Transports
    "BusTransport",
    "SMBusTransport",
    # Constants
    "I2C_ADDRESS",
    "INFINITE_HOURS",
    # Exceptions
    "FuelGaugeError",
    "PreconditionError",
    "FieldWidthError",
    "CapacityNotSetError",
    "TransportError",
    "TransportConnectionError",
    "TransportReadError",
    "TransportWriteError",
]
