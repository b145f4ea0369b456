"""MAX17048/MAX17049 fuel gauge device handle.

This module provides the MAX17048 class: typed accessors converting raw
register fields to and from physical units, mode toggles, the reset
protocol and, through :class:`~pymax1704x.estimation.CapacityEstimatorMixin`,
capacity estimates.

Nothing is cached. Every accessor performs its own bus transaction(s), so
two calls may observe different values.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from pymax1704x import registers
from pymax1704x.bitfield import RegisterAccessor
from pymax1704x.constants import (
    CELL_VOLTAGE_LSB,
    CHARGE_RATE_LSB,
    CHIP_ABSENT_SENTINEL,
    EMPTY_ALERT_INVERSION,
    EMPTY_ALERT_MAX_PCT,
    EMPTY_ALERT_MIN_PCT,
    HIBERNATE_ACTIVITY_LSB,
    HIBERNATE_ACTIVITY_MAX_VOLTS,
    HIBERNATE_ALWAYS,
    HIBERNATE_NEVER,
    HIBERNATE_THRESHOLD_MAX_PCT,
    I2C_ADDRESS,
    POWER_ON_RESET_COMMAND,
    RCOMP_MAX,
    RESET_RETRY_DELAY,
    RESET_SETTLE_DELAY,
    RESET_VOLTAGE_LSB,
    RESET_VOLTAGE_MAX_VOLTS,
    STATE_OF_CHARGE_LSB,
    VOLTAGE_ALERT_LSB,
    VOLTAGE_ALERT_MAX_VOLTS,
)
from pymax1704x.data import ALERT_FLAGS_MASK, AlertStatus, FuelGaugeReading
from pymax1704x.estimation import CapacityEstimatorMixin
from pymax1704x.exceptions import PreconditionError
from pymax1704x.registers import Register
from pymax1704x.transports.exceptions import TransportWriteError

if TYPE_CHECKING:
    from pymax1704x.transports.protocol import BusTransport

_LOGGER = logging.getLogger(__name__)

__all__ = ["MAX17048"]


def _to_raw(value: float, lsb: float, maximum: float, name: str, minimum: float = 0.0) -> int:
    """Validate a physical setting and convert it to register counts.

    Raises:
        PreconditionError: If ``value`` lies outside ``[minimum, maximum]``
    """
    if not minimum <= value <= maximum:
        msg = f"{name} must be between {minimum} and {maximum}, got {value}"
        raise PreconditionError(msg)
    return round(value / lsb)


class MAX17048(CapacityEstimatorMixin):
    """Driver for the Analog Devices (Maxim) MAX17048/MAX17049 fuel gauge.

    The handle owns its transport. Callers sharing one handle between
    threads must serialize access: field writes are read-modify-write and
    the driver takes no locks.

    Example:
        ```python
        with SMBusTransport(bus=1) as transport:
            gauge = MAX17048(transport, design_capacity_mah=3700)
            if gauge.is_ready():
                print(f"{gauge.read_cell_voltage():.3f} V")
                print(f"{gauge.read_state_of_charge():.1f} %")
                print(f"{gauge.hours_left():.1f} h left")
        ```
    """

    I2C_ADDRESS: int = I2C_ADDRESS

    def __init__(
        self,
        transport: BusTransport,
        *,
        design_capacity_mah: float = 0.0,
        design_capacity_wh: float = 0.0,
    ) -> None:
        """Initialize the device handle.

        Args:
            transport: Bus transport addressing this device
            design_capacity_mah: Rated capacity in mAh; 0 means unknown
            design_capacity_wh: Rated energy in Wh; 0 means unknown
        """
        self._regs = RegisterAccessor(transport)
        self.design_capacity_mah = float(design_capacity_mah)
        self.design_capacity_wh = float(design_capacity_wh)

    @property
    def transport(self) -> BusTransport:
        """Get the bus transport."""
        return self._regs.transport

    @property
    def accessor(self) -> RegisterAccessor:
        """Get the bit-field accessor for raw register access."""
        return self._regs

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def get_chip_version(self) -> int:
        return self._regs.read(registers.CHIP_VERSION)

    def get_chip_id(self) -> int:
        return self._regs.read(registers.CHIP_ID)

    def is_ready(self) -> bool:
        """Return False when the chip is absent or no battery is attached.

        The VERSION register reads as all ones in that case on some variants
        instead of the bus reporting an error.
        """
        return self.get_chip_version() != CHIP_ABSENT_SENTINEL

    # ------------------------------------------------------------------
    # Live measurements
    # ------------------------------------------------------------------

    def read_cell_voltage(self) -> float:
        """Cell voltage in volts."""
        return self._regs.read(registers.CELL_VOLTAGE) * CELL_VOLTAGE_LSB

    def read_state_of_charge(self) -> float:
        """State of charge in percent."""
        return self._regs.read(registers.STATE_OF_CHARGE) * STATE_OF_CHARGE_LSB

    def read_charge_rate(self) -> float:
        """Charge rate in percent per hour; negative while discharging."""
        return self._regs.read(registers.CHARGE_RATE) * CHARGE_RATE_LSB

    def read_snapshot(self) -> FuelGaugeReading:
        """Read every live measurement and the alert flags."""
        return FuelGaugeReading(
            cell_voltage=self.read_cell_voltage(),
            state_of_charge=self.read_state_of_charge(),
            charge_rate=self.read_charge_rate(),
            hibernating=self.is_hibernating(),
            alerts=self.get_alert_status(),
        )

    # ------------------------------------------------------------------
    # Hibernation
    # ------------------------------------------------------------------

    def get_hibernation_act_threshold(self) -> float:
        """Activity threshold in volts for leaving hibernate."""
        return self._regs.read(registers.ACTIVITY_THRESHOLD) * HIBERNATE_ACTIVITY_LSB

    def set_hibernation_act_threshold(self, volts: float) -> None:
        """Set the activity threshold (0 to 0.31875 V)."""
        raw = _to_raw(
            volts,
            HIBERNATE_ACTIVITY_LSB,
            HIBERNATE_ACTIVITY_MAX_VOLTS,
            "Hibernation activity threshold",
        )
        self._regs.write(registers.ACTIVITY_THRESHOLD, raw)

    def get_hibernation_hib_threshold(self) -> float:
        """Charge-rate threshold in %/h below which the IC hibernates."""
        return self._regs.read(registers.HIBERNATE_THRESHOLD) * CHARGE_RATE_LSB

    def set_hibernation_hib_threshold(self, percent_per_hour: float) -> None:
        """Set the hibernate entry threshold (0 to 53 %/h)."""
        raw = _to_raw(
            percent_per_hour,
            CHARGE_RATE_LSB,
            HIBERNATE_THRESHOLD_MAX_PCT,
            "Hibernation threshold",
        )
        self._regs.write(registers.HIBERNATE_THRESHOLD, raw)

    def set_hibernation_enabled(self, enabled: bool) -> None:
        """Force hibernate mode on (always) or off (never).

        Both thresholds are overwritten. Restore them with the threshold
        setters to return to automatic hibernation.
        """
        word = HIBERNATE_ALWAYS if enabled else HIBERNATE_NEVER
        self._regs.write_field(Register.HIBRT, word)
        _LOGGER.debug("Hibernate mode %s", "forced" if enabled else "disabled")

    def is_hibernating(self) -> bool:
        return bool(self._regs.read(registers.HIBERNATING))

    # ------------------------------------------------------------------
    # Voltage alerts and reset voltage
    # ------------------------------------------------------------------

    def get_voltage_alert_min(self) -> float:
        return self._regs.read(registers.VOLTAGE_ALERT_MIN) * VOLTAGE_ALERT_LSB

    def set_voltage_alert_min(self, volts: float) -> None:
        """Alert when VCELL falls below ``volts`` (0 to 5.1 V)."""
        raw = _to_raw(volts, VOLTAGE_ALERT_LSB, VOLTAGE_ALERT_MAX_VOLTS, "Minimum alert voltage")
        self._regs.write(registers.VOLTAGE_ALERT_MIN, raw)

    def get_voltage_alert_max(self) -> float:
        return self._regs.read(registers.VOLTAGE_ALERT_MAX) * VOLTAGE_ALERT_LSB

    def set_voltage_alert_max(self, volts: float) -> None:
        """Alert when VCELL rises above ``volts`` (0 to 5.1 V)."""
        raw = _to_raw(volts, VOLTAGE_ALERT_LSB, VOLTAGE_ALERT_MAX_VOLTS, "Maximum alert voltage")
        self._regs.write(registers.VOLTAGE_ALERT_MAX, raw)

    def get_reset_voltage(self) -> float:
        """Battery-removal detection threshold in volts."""
        return self._regs.read(registers.RESET_VOLTAGE) * RESET_VOLTAGE_LSB

    def set_reset_voltage(self, volts: float) -> None:
        """Set the battery-removal detection threshold (0 to 5.0 V)."""
        raw = _to_raw(volts, RESET_VOLTAGE_LSB, RESET_VOLTAGE_MAX_VOLTS, "Reset voltage")
        self._regs.write(registers.RESET_VOLTAGE, raw)

    def set_comparator_enabled(self, enabled: bool) -> None:
        """Enable or disable the analog reset comparator."""
        self._regs.write(registers.COMPARATOR_DISABLED, 0 if enabled else 1)

    def is_comparator_enabled(self) -> bool:
        return not self._regs.read(registers.COMPARATOR_DISABLED)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_empty_alert_threshold(self) -> int:
        """SOC percentage below which the empty alert fires (1 to 32)."""
        return EMPTY_ALERT_INVERSION - self._regs.read(registers.EMPTY_ALERT_THRESHOLD)

    def set_empty_alert_threshold(self, percent: int) -> None:
        """Set the empty-alert SOC threshold in whole percent (1 to 31).

        The register stores the threshold inverted as ``32 - percent``.
        """
        in_range = EMPTY_ALERT_MIN_PCT <= percent <= EMPTY_ALERT_MAX_PCT
        if not in_range or percent != int(percent):
            msg = (
                f"Empty alert threshold must be a whole percent between "
                f"{EMPTY_ALERT_MIN_PCT} and {EMPTY_ALERT_MAX_PCT}, got {percent}"
            )
            raise PreconditionError(msg)
        self._regs.write(registers.EMPTY_ALERT_THRESHOLD, EMPTY_ALERT_INVERSION - int(percent))

    def get_rcomp(self) -> int:
        """Temperature compensation value."""
        return self._regs.read(registers.RCOMP)

    def set_rcomp(self, value: int) -> None:
        if not 0 <= value <= RCOMP_MAX:
            raise PreconditionError(f"RCOMP must be between 0 and {RCOMP_MAX}, got {value}")
        self._regs.write(registers.RCOMP, value)

    def quick_start(self) -> None:
        """Restart fuel-gauge calculations from the present cell voltage."""
        self._regs.write(registers.QUICK_START, 1)
        _LOGGER.debug("Quick-start issued")

    # ------------------------------------------------------------------
    # Sleep
    # ------------------------------------------------------------------

    def set_sleep_mode_enabled(self, enabled: bool) -> None:
        """Allow (or forbid) the IC to enter sleep mode."""
        self._regs.write(registers.SLEEP_ENABLED, int(enabled))

    def is_sleep_mode_enabled(self) -> bool:
        return bool(self._regs.read(registers.SLEEP_ENABLED))

    def is_sleeping(self) -> bool:
        return bool(self._regs.read(registers.SLEEP))

    def force_sleep_now(self) -> bool:
        """Put the IC to sleep.

        Returns:
            False without writing anything if sleep mode is not enabled,
            True once the sleep bit has been written.
        """
        return self._write_sleep(True)

    def force_wake_now(self) -> bool:
        """Wake the IC from forced sleep.

        Returns:
            False without writing anything if sleep mode is not enabled,
            True once the sleep bit has been cleared.
        """
        return self._write_sleep(False)

    def _write_sleep(self, asleep: bool) -> bool:
        action = "sleep" if asleep else "wake"
        if not self.is_sleep_mode_enabled():
            _LOGGER.warning(
                "Cannot force %s: sleep mode is not enabled; call set_sleep_mode_enabled(True)",
                action,
            )
            return False
        self._regs.write(registers.SLEEP, int(asleep))
        _LOGGER.debug("Forced %s", action)
        return True

    # ------------------------------------------------------------------
    # Alerts
    # ------------------------------------------------------------------

    def is_alert_active(self) -> bool:
        return bool(self._regs.read(registers.ALERT))

    def clear_alert(self) -> None:
        """Release the ALRT pin by clearing CONFIG.ALRT."""
        self._regs.write(registers.ALERT, 0)

    def set_soc_change_alert_enabled(self, enabled: bool) -> None:
        self._regs.write(registers.SOC_CHANGE_ALERT, int(enabled))

    def is_soc_change_alert_enabled(self) -> bool:
        return bool(self._regs.read(registers.SOC_CHANGE_ALERT))

    def set_reset_voltage_alert_enabled(self, enabled: bool) -> None:
        """Raise an alert on voltage reset events."""
        self._regs.write(registers.RESET_ALERT_ENABLED, int(enabled))

    def is_reset_voltage_alert_enabled(self) -> bool:
        return bool(self._regs.read(registers.RESET_ALERT_ENABLED))

    def get_alert_status(self) -> AlertStatus:
        """Decode every STATUS flag from a single read."""
        return AlertStatus.from_status_word(self._regs.read_field(Register.STATUS))

    def clear_alert_flags(self, flags: AlertStatus | None = None) -> None:
        """Clear STATUS flags in one read-modify-write.

        Args:
            flags: Flags to clear; every flag when None
        """
        mask = (flags or AlertStatus.all_set()).to_mask() & ALERT_FLAGS_MASK
        if not mask:
            return
        word = self._regs.read_field(Register.STATUS)
        self._regs.write_field(Register.STATUS, word & ~mask & 0xFFFF)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> bool:
        """Power-on reset the IC and acknowledge the reset indicator.

        The IC needs a variable time to come back depending on its prior
        state, so the indicator is cleared after ``RESET_SETTLE_DELAY`` and,
        if it is still set, once more after ``RESET_RETRY_DELAY``.

        Returns:
            True if the reset indicator ended up clear. A stuck indicator is
            not an error.
        """
        try:
            self._regs.write(registers.COMMAND, POWER_ON_RESET_COMMAND)
        except TransportWriteError as err:
            # The IC resets before acknowledging the command.
            _LOGGER.debug("Reset command not acknowledged: %s", err)

        time.sleep(RESET_SETTLE_DELAY)
        self._regs.write(registers.RESET_INDICATOR, 0)
        if not self._regs.read(registers.RESET_INDICATOR):
            _LOGGER.debug("Reset complete")
            return True

        _LOGGER.debug("Reset indicator still set, retrying in %.1fs", RESET_RETRY_DELAY)
        time.sleep(RESET_RETRY_DELAY)
        self._regs.write(registers.RESET_INDICATOR, 0)
        if not self._regs.read(registers.RESET_INDICATOR):
            _LOGGER.debug("Reset complete after retry")
            return True

        _LOGGER.debug("Reset indicator did not clear; continuing")
        return False
