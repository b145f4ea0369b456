"""Capacity estimation built on live fuel-gauge readings.

The IC only reports relative quantities (percent and percent per hour). With
the cell's design capacity supplied by the caller, these methods derive
absolute charge and energy, run-time and charge-time estimates, and a rough
state-of-health figure. An optional externally measured current (amps,
positive while charging) refines the estimates.

Every method checks its capacity precondition before touching the bus.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pymax1704x.constants import (
    CHARGE_TAPER_FACTOR,
    FULL_SOC_PCT,
    INFINITE_HOURS,
    MIN_RELIABLE_RATE_PCT,
    RATE_EPSILON,
)
from pymax1704x.exceptions import CapacityNotSetError

_LOGGER = logging.getLogger(__name__)

__all__ = ["CapacityEstimatorMixin"]

if TYPE_CHECKING:

    class _EstimatorBase:
        """Typed stubs so mypy sees attributes provided by the host class."""

        design_capacity_mah: float
        design_capacity_wh: float

        def read_state_of_charge(self) -> float: ...

        def read_charge_rate(self) -> float: ...

else:
    _EstimatorBase = object


class CapacityEstimatorMixin(_EstimatorBase):
    """Capacity arithmetic for a fuel-gauge device.

    Host classes provide ``design_capacity_mah``, ``design_capacity_wh``,
    ``read_state_of_charge()`` and ``read_charge_rate()``.
    """

    def _require_capacity_mah(self) -> float:
        if not self.design_capacity_mah > 0:
            raise CapacityNotSetError("design_capacity_mah")
        return self.design_capacity_mah

    def _require_capacity_wh(self) -> float:
        if not self.design_capacity_wh > 0:
            raise CapacityNotSetError("design_capacity_wh")
        return self.design_capacity_wh

    def set_design_capacity(
        self,
        capacity_mah: float | None = None,
        capacity_wh: float | None = None,
    ) -> None:
        """Set either or both design capacities.

        Args:
            capacity_mah: Rated charge capacity in milliamp-hours
            capacity_wh: Rated energy capacity in watt-hours
        """
        if capacity_mah is not None:
            self.design_capacity_mah = float(capacity_mah)
        if capacity_wh is not None:
            self.design_capacity_wh = float(capacity_wh)
        _LOGGER.debug(
            "Design capacity set to %.1f mAh / %.2f Wh",
            self.design_capacity_mah,
            self.design_capacity_wh,
        )

    def remaining_charge_mah(self) -> float:
        """Charge left in the cell, in milliamp-hours."""
        capacity = self._require_capacity_mah()
        return capacity * self.read_state_of_charge() / 100.0

    def remaining_energy_wh(self) -> float:
        """Energy left in the cell, in watt-hours."""
        capacity = self._require_capacity_wh()
        return capacity * self.read_state_of_charge() / 100.0

    def hours_left(self, charge_rate_pct_per_h: float | None = None) -> float:
        """Estimate run time from the charge rate.

        Args:
            charge_rate_pct_per_h: Rate to use instead of the live CRATE reading

        Returns:
            Hours until empty, or ``INFINITE_HOURS`` when not discharging.
        """
        self._require_capacity_mah()
        rate = charge_rate_pct_per_h
        if rate is None:
            rate = self.read_charge_rate()
        if rate >= -RATE_EPSILON:
            return INFINITE_HOURS
        return self.read_state_of_charge() / abs(rate)

    def hours_left_from_current(self, current_amps: float) -> float:
        """Estimate run time from a measured discharge current.

        Args:
            current_amps: Battery current in amps; the sign is ignored
        """
        remaining = self.remaining_charge_mah()
        return remaining / (abs(current_amps) + RATE_EPSILON)

    def expected_rate_pct_per_h(self, current_amps: float) -> float:
        """Charge rate the given current should produce for the design capacity."""
        capacity = self._require_capacity_mah()
        return current_amps / capacity * 100.0

    def effective_capacity_mah(
        self,
        current_amps: float,
        charge_rate_pct: float | None = None,
    ) -> float:
        """Infer the real cell capacity from current and charge rate.

        Below ``MIN_RELIABLE_RATE_PCT`` the rate is mostly noise, so the
        design capacity is returned unchanged.

        Args:
            current_amps: Measured battery current in amps
            charge_rate_pct: Rate to use instead of the live CRATE reading
        """
        capacity = self._require_capacity_mah()
        rate = self.read_charge_rate() if charge_rate_pct is None else charge_rate_pct
        if abs(rate) < MIN_RELIABLE_RATE_PCT:
            return capacity
        return abs(current_amps * 1000.0) * 100.0 / abs(rate)

    def state_of_health_pct(
        self,
        current_amps: float,
        charge_rate_pct: float | None = None,
    ) -> float:
        """Effective capacity as a percentage of design capacity."""
        capacity = self._require_capacity_mah()
        return 100.0 * self.effective_capacity_mah(current_amps, charge_rate_pct) / capacity

    def hours_to_full(self, current_amps: float) -> float:
        """Estimate charge time from a measured charge current.

        The linear estimate is stretched by ``CHARGE_TAPER_FACTOR`` because
        the charger tapers its current near full.

        Args:
            current_amps: Charge current in amps, positive while charging

        Returns:
            Hours until full, ``0.0`` when already full, or
            ``INFINITE_HOURS`` when not charging.
        """
        capacity = self._require_capacity_mah()
        soc = self.read_state_of_charge()
        if soc >= FULL_SOC_PCT:
            return 0.0
        current_ma = current_amps * 1000.0
        if current_ma <= RATE_EPSILON:
            return INFINITE_HOURS
        return (capacity * (100.0 - soc) / 100.0) / current_ma * CHARGE_TAPER_FACTOR
