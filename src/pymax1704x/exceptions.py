"""Exceptions raised by pymax1704x.

Precondition failures are raised before any bus transaction is issued, so
the device state is untouched when one of them propagates.
"""

from __future__ import annotations


class FuelGaugeError(Exception):
    """Base exception for all pymax1704x errors."""

    pass


class PreconditionError(FuelGaugeError, ValueError):
    """A requested operation violates a driver precondition.

    Raised for out-of-domain setter input, writes to read-only fields and
    capacity estimates requested before a design capacity is known.
    """

    pass


class FieldWidthError(PreconditionError):
    """Value does not fit the bit width of the target register field."""

    def __init__(self, address: int, value: int, field_max: int) -> None:
        """Initialize with the offending write.

        Args:
            address: Register address of the field
            value: Value that was rejected
            field_max: Largest value the field can hold (mask >> bit_offset)
        """
        self.address = address
        self.value = value
        self.field_max = field_max
        super().__init__(
            f"Value {value} does not fit field at register 0x{address:02X} "
            f"(max {field_max})"
        )


class CapacityNotSetError(PreconditionError):
    """Capacity estimation requested before the design capacity was set."""

    def __init__(self, attribute: str) -> None:
        """Initialize with the name of the missing capacity attribute.

        Args:
            attribute: ``design_capacity_mah`` or ``design_capacity_wh``
        """
        self.attribute = attribute
        super().__init__(f"{attribute} must be set to a positive value first")


__all__ = [
    "CapacityNotSetError",
    "FieldWidthError",
    "FuelGaugeError",
    "PreconditionError",
]
