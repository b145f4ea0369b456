"""Bit-field register access.

Masked reads extract one field from a register word; masked writes merge a
field into the current word with a read-modify-write so neighbouring fields
keep their values. Whole-register access (mask 0xFFFF, offset 0) skips the
masking and, for writes, the preliminary read.

The read-modify-write is NOT atomic. Two callers writing different fields of
the same register can interleave and lose one update; callers sharing a
device must serialize access themselves.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pymax1704x.constants import WORD_MASK
from pymax1704x.exceptions import FieldWidthError, PreconditionError

if TYPE_CHECKING:
    from pymax1704x.registers import RegisterField
    from pymax1704x.transports.protocol import BusTransport

_LOGGER = logging.getLogger(__name__)

__all__ = ["RegisterAccessor", "to_signed16"]


def to_signed16(word: int) -> int:
    """Interpret a 16-bit word as two's complement."""
    word &= WORD_MASK
    return word - 0x10000 if word & 0x8000 else word


class RegisterAccessor:
    """Masked register reads and writes over a bus transport.

    Every call moves exactly one word per bus transaction: a read is one
    transfer, a whole-register write is one transfer and a field write is a
    read followed by a write.
    """

    def __init__(self, transport: BusTransport) -> None:
        self._transport = transport

    @property
    def transport(self) -> BusTransport:
        """Get the underlying bus transport."""
        return self._transport

    def read_field(self, address: int, mask: int = WORD_MASK, bit_offset: int = 0) -> int:
        """Read an unsigned field.

        Args:
            address: Register address
            mask: Field bits in register position
            bit_offset: Position of the lowest field bit

        Returns:
            The field value shifted down to bit 0.
        """
        word = self._transport.read_u16_be(address)
        _LOGGER.debug("Read 0x%04X from register 0x%02X", word, address)
        if mask == WORD_MASK and bit_offset == 0:
            return word
        return (word & mask) >> bit_offset

    def read_signed(self, address: int) -> int:
        """Read a whole register as a signed 16-bit value."""
        return to_signed16(self.read_field(address))

    def write_field(
        self,
        address: int,
        value: int,
        mask: int = WORD_MASK,
        bit_offset: int = 0,
    ) -> None:
        """Write an unsigned field, preserving the rest of the register.

        Args:
            address: Register address
            value: Field value, not yet shifted
            mask: Field bits in register position
            bit_offset: Position of the lowest field bit

        Raises:
            FieldWidthError: If ``value`` does not fit the field. Raised
                before any bus transaction.
        """
        field_max = mask >> bit_offset
        if value < 0 or value & ~field_max:
            raise FieldWidthError(address, value, field_max)

        if mask == WORD_MASK and bit_offset == 0:
            word = value & WORD_MASK
        else:
            word = self._transport.read_u16_be(address)
            word &= ~mask
            word |= value << bit_offset
            word &= WORD_MASK

        _LOGGER.debug(
            "Write 0x%04X to register 0x%02X (field mask 0x%04X)",
            word,
            address,
            mask,
        )
        self._transport.write_u16_be(address, word)

    def read(self, field: RegisterField) -> int:
        """Read a register-map field, honouring its signedness."""
        if field.signed:
            return self.read_signed(field.address)
        return self.read_field(field.address, field.mask, field.bit_offset)

    def write(self, field: RegisterField, value: int) -> None:
        """Write a register-map field.

        Raises:
            PreconditionError: If the field is read-only
            FieldWidthError: If ``value`` does not fit the field
        """
        if not field.writable:
            raise PreconditionError(f"Field '{field.name}' is read-only")
        self.write_field(field.address, value, field.mask, field.bit_offset)
