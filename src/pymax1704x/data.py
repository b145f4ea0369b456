"""Snapshot data models.

All values are in standard units:
- Voltage: Volts (V)
- State of charge: percent (%), may exceed 100 before the IC learns the cell
- Charge rate: percent per hour (%/h), negative while discharging
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pymax1704x.registers import (
    RESET_INDICATOR,
    SOC_CHANGE_FLAG,
    SOC_LOW_FLAG,
    VOLTAGE_HIGH_FLAG,
    VOLTAGE_LOW_FLAG,
    VOLTAGE_RESET_FLAG,
)

_LOGGER = logging.getLogger(__name__)

__all__ = ["ALERT_FLAGS_MASK", "AlertStatus", "FuelGaugeReading"]

ALERT_FLAGS_MASK: int = (
    RESET_INDICATOR.mask
    | VOLTAGE_HIGH_FLAG.mask
    | VOLTAGE_LOW_FLAG.mask
    | VOLTAGE_RESET_FLAG.mask
    | SOC_LOW_FLAG.mask
    | SOC_CHANGE_FLAG.mask
)
"""STATUS bits 8..13: every flag the IC raises on its own."""


@dataclass(frozen=True)
class AlertStatus:
    """Alert flags decoded from one STATUS register read."""

    reset_indicator: bool = False
    voltage_high: bool = False
    voltage_low: bool = False
    voltage_reset: bool = False
    soc_low: bool = False
    soc_change: bool = False

    @classmethod
    def from_status_word(cls, word: int) -> AlertStatus:
        """Decode the STATUS register word."""
        return cls(
            reset_indicator=bool(word & RESET_INDICATOR.mask),
            voltage_high=bool(word & VOLTAGE_HIGH_FLAG.mask),
            voltage_low=bool(word & VOLTAGE_LOW_FLAG.mask),
            voltage_reset=bool(word & VOLTAGE_RESET_FLAG.mask),
            soc_low=bool(word & SOC_LOW_FLAG.mask),
            soc_change=bool(word & SOC_CHANGE_FLAG.mask),
        )

    @classmethod
    def all_set(cls) -> AlertStatus:
        """Status with every flag raised, used to clear everything."""
        return cls(True, True, True, True, True, True)

    def to_mask(self) -> int:
        """Encode the raised flags as STATUS register bits."""
        mask = 0
        if self.reset_indicator:
            mask |= RESET_INDICATOR.mask
        if self.voltage_high:
            mask |= VOLTAGE_HIGH_FLAG.mask
        if self.voltage_low:
            mask |= VOLTAGE_LOW_FLAG.mask
        if self.voltage_reset:
            mask |= VOLTAGE_RESET_FLAG.mask
        if self.soc_low:
            mask |= SOC_LOW_FLAG.mask
        if self.soc_change:
            mask |= SOC_CHANGE_FLAG.mask
        return mask

    @property
    def any_active(self) -> bool:
        return self.to_mask() != 0

    @property
    def active_names(self) -> list[str]:
        """Names of the raised flags, in STATUS bit order."""
        return [
            name
            for name, raised in (
                ("reset_indicator", self.reset_indicator),
                ("voltage_high", self.voltage_high),
                ("voltage_low", self.voltage_low),
                ("voltage_reset", self.voltage_reset),
                ("soc_low", self.soc_low),
                ("soc_change", self.soc_change),
            )
            if raised
        ]


@dataclass
class FuelGaugeReading:
    """One pass over the live measurement registers."""

    cell_voltage: float = 0.0
    state_of_charge: float = 0.0
    charge_rate: float = 0.0
    hibernating: bool = False
    alerts: AlertStatus = field(default_factory=AlertStatus)

    def __post_init__(self) -> None:
        if self.state_of_charge > 100.0:
            _LOGGER.debug(
                "State of charge %.2f%% exceeds 100%%; IC model not yet converged",
                self.state_of_charge,
            )

    @property
    def is_charging(self) -> bool:
        return self.charge_rate > 0.0

    @property
    def is_discharging(self) -> bool:
        return self.charge_rate < 0.0
