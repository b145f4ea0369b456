"""Bus failures raised by transports.

An I2C device signals trouble only by not acknowledging a transfer, which
Linux reports as ``OSError`` (usually ``EREMOTEIO`` or ``EIO``). Transports
translate that into the classes below, keeping the original error as
``__cause__``.

These sit under :class:`~pymax1704x.exceptions.FuelGaugeError` next to the
precondition errors, so ``except FuelGaugeError`` covers both.
"""

from __future__ import annotations

from pymax1704x.exceptions import FuelGaugeError


class TransportError(FuelGaugeError):
    """A bus transfer failed or the bus is unusable."""

    pass


class TransportConnectionError(TransportError):
    """Bus device missing, not openable, or used before ``open()``."""

    pass


class TransportReadError(TransportError):
    """The device did not answer a register word read."""

    pass


class TransportWriteError(TransportError):
    """The device did not acknowledge a register word write.

    The power-on reset command is expected to end this way.
    """

    pass


__all__ = [
    "TransportConnectionError",
    "TransportError",
    "TransportReadError",
    "TransportWriteError",
]
