"""Unit tests for masked register reads and writes."""

from __future__ import annotations

import pytest
from conftest import SimulatedBus

from pymax1704x.bitfield import RegisterAccessor, to_signed16
from pymax1704x.exceptions import FieldWidthError, PreconditionError
from pymax1704x.registers import (
    ACTIVITY_THRESHOLD,
    CELL_VOLTAGE,
    CHARGE_RATE,
    CHIP_ID,
    REGISTER_FIELDS,
    RESET_VOLTAGE,
    Register,
)
from pymax1704x.transports.exceptions import TransportReadError


class TestToSigned16:
    """Test two's-complement conversion."""

    def test_positive(self) -> None:
        assert to_signed16(0x0007) == 7
        assert to_signed16(0x7FFF) == 32767

    def test_negative(self) -> None:
        assert to_signed16(0xFFF9) == -7
        assert to_signed16(0x8000) == -32768
        assert to_signed16(0xFFFF) == -1


class TestReadField:
    """Test RegisterAccessor reads."""

    def test_whole_register_returns_raw_word(self) -> None:
        bus = SimulatedBus({0x0C: 0x971C})
        assert RegisterAccessor(bus).read_field(0x0C) == 0x971C
        assert bus.reads == [0x0C]

    def test_masked_read_extracts_field(self) -> None:
        bus = SimulatedBus({0x0C: 0x971C})
        regs = RegisterAccessor(bus)
        assert regs.read_field(0x0C, 0xFF00, 8) == 0x97
        assert regs.read_field(0x0C, 0x001F, 0) == 0x1C

    def test_signed_read(self) -> None:
        bus = SimulatedBus({Register.CRATE: 0xFFF9})
        assert RegisterAccessor(bus).read_signed(Register.CRATE) == -7

    def test_read_uses_field_signedness(self) -> None:
        bus = SimulatedBus({Register.CRATE: 0xFFF9, Register.VCELL: 0xFFF9})
        regs = RegisterAccessor(bus)
        assert regs.read(CHARGE_RATE) == -7
        assert regs.read(CELL_VOLTAGE) == 0xFFF9

    def test_transport_error_propagates(self) -> None:
        bus = SimulatedBus()
        bus.fail_reads_from.add(0x02)
        with pytest.raises(TransportReadError):
            RegisterAccessor(bus).read_field(0x02)


class TestWriteField:
    """Test RegisterAccessor writes."""

    def test_whole_register_write_skips_read(self) -> None:
        bus = SimulatedBus({0x0A: 0x8030})
        RegisterAccessor(bus).write_field(0x0A, 0xFFFF)
        assert bus.reads == []
        assert bus.writes == [(0x0A, 0xFFFF)]

    def test_masked_write_preserves_other_bits(self) -> None:
        bus = SimulatedBus({0x18: 0x9607})
        RegisterAccessor(bus).write_field(0x18, 1, 0x0100, 8)
        assert bus.reads == [0x18]
        assert bus.writes == [(0x18, 0x9707)]

    def test_masked_write_clears_field_first(self) -> None:
        bus = SimulatedBus({0x0C: 0x971C})
        RegisterAccessor(bus).write_field(0x0C, 0x03, 0x001F, 0)
        assert bus.registers[0x0C] == 0x9703

    def test_every_writable_field_round_trips(self) -> None:
        """Writing then reading each field returns the value, neighbours intact."""
        for field in REGISTER_FIELDS:
            if not field.writable or field.signed:
                continue
            for background in (0x0000, 0xFFFF, 0xA5A5):
                bus = SimulatedBus({field.address: background})
                regs = RegisterAccessor(bus)
                value = field.max_value // 3
                regs.write(field, value)
                assert regs.read(field) == value, field.name
                outside = bus.registers[field.address] & ~field.mask & 0xFFFF
                assert outside == background & ~field.mask & 0xFFFF, field.name

    def test_value_too_wide_rejected_without_bus_traffic(self) -> None:
        bus = SimulatedBus({0x0A: 0x8030})
        regs = RegisterAccessor(bus)
        with pytest.raises(FieldWidthError) as exc_info:
            regs.write_field(0x0A, 0x100, 0x00FF, 0)
        assert exc_info.value.field_max == 0xFF
        assert bus.call_count == 0

    def test_seven_bit_field_rejects_128(self) -> None:
        bus = SimulatedBus()
        with pytest.raises(FieldWidthError):
            RegisterAccessor(bus).write(RESET_VOLTAGE, 128)
        assert bus.call_count == 0

    def test_negative_value_rejected(self) -> None:
        bus = SimulatedBus()
        with pytest.raises(FieldWidthError):
            RegisterAccessor(bus).write(ACTIVITY_THRESHOLD, -1)
        assert bus.call_count == 0

    def test_whole_register_rejects_seventeen_bits(self) -> None:
        bus = SimulatedBus()
        with pytest.raises(FieldWidthError):
            RegisterAccessor(bus).write_field(0xFE, 0x10000)
        assert bus.call_count == 0

    def test_read_only_field_rejected(self) -> None:
        bus = SimulatedBus()
        with pytest.raises(PreconditionError, match="read-only"):
            RegisterAccessor(bus).write(CHIP_ID, 1)
        assert bus.call_count == 0

    def test_width_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RegisterAccessor(SimulatedBus()).write_field(0x0C, 2, 0x0080, 7)
