"""Pytest configuration and fixtures for pymax1704x tests."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from pymax1704x import MAX17048
from pymax1704x.registers import Register
from pymax1704x.transports.exceptions import TransportReadError, TransportWriteError

# Register contents of a freshly powered MAX17048 with a half-charged cell.
POWER_ON_REGISTERS: dict[int, int] = {
    Register.VCELL: 0xC350,  # 3.90625 V
    Register.SOC: 0x3200,  # 50 %
    Register.MODE: 0x0000,
    Register.VERSION: 0x0012,
    Register.HIBRT: 0x8030,
    Register.CONFIG: 0x971C,
    Register.VALRT: 0x00FF,  # min 0 V, max 5.1 V
    Register.CRATE: 0x0000,
    Register.VRESET_ID: 0x9607,
    Register.STATUS: 0x0100,
}


class SimulatedBus:
    """In-memory register store implementing the bus transport protocol.

    Records every transfer so tests can assert on bus traffic. Unwritten
    registers read as zero.
    """

    def __init__(self, registers: dict[int, int] | None = None) -> None:
        self.registers: dict[int, int] = dict(registers or {})
        self.reads: list[int] = []
        self.writes: list[tuple[int, int]] = []
        self.fail_reads_from: set[int] = set()
        self.fail_writes_to: set[int] = set()
        self._sticky: dict[int, list[int]] = {}

    @property
    def call_count(self) -> int:
        return len(self.reads) + len(self.writes)

    def stick_bits(self, address: int, masks: Iterable[int]) -> None:
        """Re-assert ``masks`` on successive writes to ``address``.

        Models status bits the IC sets again before the host can clear them.
        """
        self._sticky[address] = list(masks)

    def read_u16_be(self, address: int) -> int:
        self.reads.append(address)
        if address in self.fail_reads_from:
            raise TransportReadError(f"No ACK reading 0x{address:02X}")
        return self.registers.get(address, 0)

    def write_u16_be(self, address: int, word: int) -> None:
        self.writes.append((address, word))
        if address in self.fail_writes_to:
            raise TransportWriteError(f"No ACK writing 0x{address:02X}")
        sticky = self._sticky.get(address)
        if sticky:
            word |= sticky.pop(0)
        self.registers[address] = word


@pytest.fixture
def bus() -> SimulatedBus:
    """Simulated bus holding power-on register contents."""
    return SimulatedBus(POWER_ON_REGISTERS)


@pytest.fixture
def gauge(bus: SimulatedBus) -> MAX17048:
    """Fuel gauge handle on the simulated bus, no capacity configured."""
    return MAX17048(bus)


@pytest.fixture
def rated_gauge(bus: SimulatedBus) -> MAX17048:
    """Fuel gauge handle for a 3700 mAh / 13.7 Wh cell."""
    return MAX17048(bus, design_capacity_mah=3700, design_capacity_wh=13.7)
