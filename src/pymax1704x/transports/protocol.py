"""Bus transport protocol.

The driver's only I/O boundary. A transport moves one 16-bit big-endian word
to or from an 8-bit register address of a single device; it knows nothing
about fields, scaling or the register map.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BusTransport(Protocol):
    """Point-to-point register transport for one device.

    Implementations are synchronous. They raise
    :class:`~pymax1704x.transports.exceptions.TransportError` subclasses on
    bus failures and never retry on their own.
    """

    def read_u16_be(self, address: int) -> int:
        """Read the big-endian word stored at ``address``."""
        ...

    def write_u16_be(self, address: int, word: int) -> None:
        """Write ``word`` big-endian to ``address``."""
        ...


__all__ = ["BusTransport"]
