"""Constants for the MAX17048/MAX17049 fuel gauge.

Scale factors and magic values come from the MAX17048/MAX17049 datasheet
(19-6171). Every scale constant is the physical value of one least
significant bit of the corresponding register field.
"""

from __future__ import annotations

# =============================================================================
# BUS ADDRESSING
# =============================================================================

I2C_ADDRESS: int = 0x36
"""Fixed 7-bit I2C address of the fuel gauge."""

WORD_MASK: int = 0xFFFF
"""All sixteen bits of a register word."""

# =============================================================================
# SCALE FACTORS (physical units per LSB)
# =============================================================================

CELL_VOLTAGE_LSB: float = 0.000078125
"""VCELL: 78.125 uV per LSB."""

STATE_OF_CHARGE_LSB: float = 0.00390625
"""SOC: 1/256 % per LSB."""

CHARGE_RATE_LSB: float = 0.208
"""CRATE and HIBRT.HibThr: 0.208 %/hour per LSB."""

HIBERNATE_ACTIVITY_LSB: float = 0.00125
"""HIBRT.ActThr: 1.25 mV per LSB."""

VOLTAGE_ALERT_LSB: float = 0.02
"""VALRT.MIN / VALRT.MAX: 20 mV per LSB."""

RESET_VOLTAGE_LSB: float = 0.04
"""VRESET: 40 mV per LSB."""

# =============================================================================
# SETTER DOMAINS (physical units)
# =============================================================================

HIBERNATE_ACTIVITY_MAX_VOLTS: float = 0xFF * HIBERNATE_ACTIVITY_LSB  # 0.31875 V
HIBERNATE_THRESHOLD_MAX_PCT: float = 53.0
VOLTAGE_ALERT_MAX_VOLTS: float = 0xFF * VOLTAGE_ALERT_LSB  # 5.1 V
RESET_VOLTAGE_MAX_VOLTS: float = 5.0

# The ATHD field stores (32 - threshold), so 1% is raw 31 and 31% is raw 1.
EMPTY_ALERT_INVERSION: int = 32
EMPTY_ALERT_MIN_PCT: int = 1
EMPTY_ALERT_MAX_PCT: int = 31

RCOMP_MAX: int = 0xFF

# =============================================================================
# MAGIC VALUES
# =============================================================================

POWER_ON_RESET_COMMAND: int = 0x5400
"""Written to CMD to force a power-on reset."""

CHIP_ABSENT_SENTINEL: int = 0xFFFF
"""VERSION reads as all ones when no battery is attached."""

HIBERNATE_ALWAYS: int = 0xFFFF
"""HIBRT value that forces the IC into hibernate mode."""

HIBERNATE_NEVER: int = 0x0000
"""HIBRT value that keeps the IC out of hibernate mode."""

# =============================================================================
# RESET TIMING (seconds)
# =============================================================================

RESET_SETTLE_DELAY: float = 0.1
"""Wait after the reset command before touching STATUS."""

RESET_RETRY_DELAY: float = 1.0
"""Second, longer wait when the reset indicator did not clear."""

# =============================================================================
# ESTIMATION
# =============================================================================

INFINITE_HOURS: float = 1e9
"""Returned when a time estimate is unbounded (not discharging / not charging)."""

RATE_EPSILON: float = 1e-6
"""Tolerance used for "effectively zero" rates and currents."""

MIN_RELIABLE_RATE_PCT: float = 0.05
"""Charge rates below this (%/h) are too noisy to infer capacity from."""

FULL_SOC_PCT: float = 99.9
"""State of charge treated as full."""

CHARGE_TAPER_FACTOR: float = 1.2
"""Empirical multiplier for the constant-voltage taper near full charge."""

__all__ = [
    "CELL_VOLTAGE_LSB",
    "CHARGE_RATE_LSB",
    "CHARGE_TAPER_FACTOR",
    "CHIP_ABSENT_SENTINEL",
    "EMPTY_ALERT_INVERSION",
    "EMPTY_ALERT_MAX_PCT",
    "EMPTY_ALERT_MIN_PCT",
    "FULL_SOC_PCT",
    "HIBERNATE_ACTIVITY_LSB",
    "HIBERNATE_ACTIVITY_MAX_VOLTS",
    "HIBERNATE_ALWAYS",
    "HIBERNATE_NEVER",
    "HIBERNATE_THRESHOLD_MAX_PCT",
    "I2C_ADDRESS",
    "INFINITE_HOURS",
    "MIN_RELIABLE_RATE_PCT",
    "POWER_ON_RESET_COMMAND",
    "RATE_EPSILON",
    "RCOMP_MAX",
    "RESET_RETRY_DELAY",
    "RESET_SETTLE_DELAY",
    "RESET_VOLTAGE_LSB",
    "RESET_VOLTAGE_MAX_VOLTS",
    "STATE_OF_CHARGE_LSB",
    "VOLTAGE_ALERT_LSB",
    "VOLTAGE_ALERT_MAX_VOLTS",
    "WORD_MASK",
]
