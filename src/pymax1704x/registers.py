"""Canonical register map for the MAX17048/MAX17049 fuel gauge.

Source: MAX17048/MAX17049 datasheet, Table 2 (Register Summary) and the
per-register bit descriptions that follow it.

Every register is sixteen bits wide and transferred most significant byte
first. Several registers pack more than one setting into the same word; each
setting is described by a :class:`RegisterField` carrying the mask and the
offset of its lowest bit. Fields sharing a register never overlap.

Address │ Register   │ Fields (msb → lsb)
────────┼────────────┼──────────────────────────────────────────────────────
 0x02   │ VCELL      │ cell_voltage (16)
 0x04   │ SOC        │ state_of_charge (16)
 0x06   │ MODE       │ quick_start (14), sleep_enabled (13), hibernating (12)
 0x08   │ VERSION    │ chip_version (16)
 0x0A   │ HIBRT      │ hibernate_threshold (15..8), activity_threshold (7..0)
 0x0C   │ CONFIG     │ rcomp (15..8), sleep (7), soc_change_alert (6),
        │            │ alert (5), empty_alert_threshold (4..0)
 0x14   │ VALRT      │ voltage_alert_min (15..8), voltage_alert_max (7..0)
 0x16   │ CRATE      │ charge_rate (16, signed)
 0x18   │ VRESET_ID  │ reset_voltage (15..9), comparator_disabled (8), chip_id (7..0)
 0x1A   │ STATUS     │ reset_alert_enabled (14), soc_change_flag (13),
        │            │ soc_low_flag (12), voltage_reset_flag (11),
        │            │ voltage_low_flag (10), voltage_high_flag (9),
        │            │ reset_indicator (8)
 0xFE   │ CMD        │ command (16)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from pymax1704x.constants import WORD_MASK


class Register(IntEnum):
    """Register addresses."""

    VCELL = 0x02
    SOC = 0x04
    MODE = 0x06
    VERSION = 0x08
    HIBRT = 0x0A
    CONFIG = 0x0C
    VALRT = 0x14
    CRATE = 0x16
    VRESET_ID = 0x18
    STATUS = 0x1A
    CMD = 0xFE


@dataclass(frozen=True)
class RegisterField:
    """A contiguous run of bits within one register.

    Attributes:
        name: Stable identifier, unique across the map.
        address: Register holding the field.
        mask: Bits occupied by the field, in register position.
        bit_offset: Position of the lowest set bit of ``mask``.
        writable: False for fields the IC ignores on write.
        signed: True when the whole register is two's complement.
        description: Human-readable explanation.
    """

    name: str
    address: int
    mask: int = WORD_MASK
    bit_offset: int = 0
    writable: bool = True
    signed: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        if not 0 < self.mask <= WORD_MASK:
            msg = f"{self.name}: mask 0x{self.mask:X} is not a 16-bit mask"
            raise ValueError(msg)
        lowest = (self.mask & -self.mask).bit_length() - 1
        if lowest != self.bit_offset:
            msg = (
                f"{self.name}: bit_offset {self.bit_offset} does not match "
                f"lowest mask bit {lowest}"
            )
            raise ValueError(msg)
        shifted = self.mask >> self.bit_offset
        if shifted & (shifted + 1):
            msg = f"{self.name}: mask 0x{self.mask:X} is not contiguous"
            raise ValueError(msg)

    @property
    def max_value(self) -> int:
        """Largest raw value the field can hold."""
        return self.mask >> self.bit_offset

    @property
    def width(self) -> int:
        """Field width in bits."""
        return self.max_value.bit_length()


# =============================================================================
# FIELD DEFINITIONS
# =============================================================================

CELL_VOLTAGE = RegisterField(
    name="cell_voltage",
    address=Register.VCELL,
    writable=False,
    description="Cell voltage, 78.125 uV per LSB.",
)

STATE_OF_CHARGE = RegisterField(
    name="state_of_charge",
    address=Register.SOC,
    writable=False,
    description="State of charge, 1/256 % per LSB.",
)

QUICK_START = RegisterField(
    name="quick_start",
    address=Register.MODE,
    mask=0x4000,
    bit_offset=14,
    description="Writing 1 restarts fuel-gauge calculations from the current voltage.",
)

SLEEP_ENABLED = RegisterField(
    name="sleep_enabled",
    address=Register.MODE,
    mask=0x2000,
    bit_offset=13,
    description="EnSleep. Must be set before CONFIG.SLEEP has any effect.",
)

HIBERNATING = RegisterField(
    name="hibernating",
    address=Register.MODE,
    mask=0x1000,
    bit_offset=12,
    writable=False,
    description="HibStat. Set while the IC is in hibernate mode.",
)

CHIP_VERSION = RegisterField(
    name="chip_version",
    address=Register.VERSION,
    writable=False,
    description="Production version. 0xFFFF when no battery is attached.",
)

HIBERNATE_THRESHOLD = RegisterField(
    name="hibernate_threshold",
    address=Register.HIBRT,
    mask=0xFF00,
    bit_offset=8,
    description="HibThr. Enter hibernate below this |CRATE|, 0.208 %/h per LSB.",
)

ACTIVITY_THRESHOLD = RegisterField(
    name="activity_threshold",
    address=Register.HIBRT,
    mask=0x00FF,
    bit_offset=0,
    description="ActThr. Leave hibernate above this OCV-CELL delta, 1.25 mV per LSB.",
)

RCOMP = RegisterField(
    name="rcomp",
    address=Register.CONFIG,
    mask=0xFF00,
    bit_offset=8,
    description="Temperature compensation. Default 0x97.",
)

SLEEP = RegisterField(
    name="sleep",
    address=Register.CONFIG,
    mask=0x0080,
    bit_offset=7,
    description="Forces sleep mode when MODE.EnSleep is set.",
)

SOC_CHANGE_ALERT = RegisterField(
    name="soc_change_alert",
    address=Register.CONFIG,
    mask=0x0040,
    bit_offset=6,
    description="ALSC. Alert on every 1% SOC change.",
)

ALERT = RegisterField(
    name="alert",
    address=Register.CONFIG,
    mask=0x0020,
    bit_offset=5,
    description="ALRT. Set when an alert fires; write 0 to clear.",
)

EMPTY_ALERT_THRESHOLD = RegisterField(
    name="empty_alert_threshold",
    address=Register.CONFIG,
    mask=0x001F,
    bit_offset=0,
    description="ATHD. Stores 32 minus the empty-alert SOC threshold.",
)

VOLTAGE_ALERT_MIN = RegisterField(
    name="voltage_alert_min",
    address=Register.VALRT,
    mask=0xFF00,
    bit_offset=8,
    description="Alert when VCELL falls below this, 20 mV per LSB.",
)

VOLTAGE_ALERT_MAX = RegisterField(
    name="voltage_alert_max",
    address=Register.VALRT,
    mask=0x00FF,
    bit_offset=0,
    description="Alert when VCELL rises above this, 20 mV per LSB.",
)

CHARGE_RATE = RegisterField(
    name="charge_rate",
    address=Register.CRATE,
    writable=False,
    signed=True,
    description="Charge or discharge rate, 0.208 %/h per LSB, two's complement.",
)

RESET_VOLTAGE = RegisterField(
    name="reset_voltage",
    address=Register.VRESET_ID,
    mask=0xFE00,
    bit_offset=9,
    description="VRESET. Battery-removal detection threshold, 40 mV per LSB.",
)

COMPARATOR_DISABLED = RegisterField(
    name="comparator_disabled",
    address=Register.VRESET_ID,
    mask=0x0100,
    bit_offset=8,
    description="Dis. Disables the analog reset comparator to save current.",
)

CHIP_ID = RegisterField(
    name="chip_id",
    address=Register.VRESET_ID,
    mask=0x00FF,
    bit_offset=0,
    writable=False,
    description="Factory-programmed ID.",
)

RESET_ALERT_ENABLED = RegisterField(
    name="reset_alert_enabled",
    address=Register.STATUS,
    mask=0x4000,
    bit_offset=14,
    description="EnVr. Alert when a voltage reset event occurs.",
)

SOC_CHANGE_FLAG = RegisterField(
    name="soc_change_flag",
    address=Register.STATUS,
    mask=0x2000,
    bit_offset=13,
    description="SC. SOC changed by at least 1%.",
)

SOC_LOW_FLAG = RegisterField(
    name="soc_low_flag",
    address=Register.STATUS,
    mask=0x1000,
    bit_offset=12,
    description="HD. SOC crossed the empty-alert threshold.",
)

VOLTAGE_RESET_FLAG = RegisterField(
    name="voltage_reset_flag",
    address=Register.STATUS,
    mask=0x0800,
    bit_offset=11,
    description="VR. Voltage reset detected.",
)

VOLTAGE_LOW_FLAG = RegisterField(
    name="voltage_low_flag",
    address=Register.STATUS,
    mask=0x0400,
    bit_offset=10,
    description="VL. VCELL fell below VALRT.MIN.",
)

VOLTAGE_HIGH_FLAG = RegisterField(
    name="voltage_high_flag",
    address=Register.STATUS,
    mask=0x0200,
    bit_offset=9,
    description="VH. VCELL rose above VALRT.MAX.",
)

RESET_INDICATOR = RegisterField(
    name="reset_indicator",
    address=Register.STATUS,
    mask=0x0100,
    bit_offset=8,
    description="RI. Set after power-up or reset; clear to acknowledge.",
)

COMMAND = RegisterField(
    name="command",
    address=Register.CMD,
    description="Write 0x5400 to force a power-on reset.",
)

REGISTER_FIELDS: tuple[RegisterField, ...] = (
    CELL_VOLTAGE,
    STATE_OF_CHARGE,
    QUICK_START,
    SLEEP_ENABLED,
    HIBERNATING,
    CHIP_VERSION,
    HIBERNATE_THRESHOLD,
    ACTIVITY_THRESHOLD,
    RCOMP,
    SLEEP,
    SOC_CHANGE_ALERT,
    ALERT,
    EMPTY_ALERT_THRESHOLD,
    VOLTAGE_ALERT_MAX,
    VOLTAGE_ALERT_MIN,
    CHARGE_RATE,
    RESET_VOLTAGE,
    COMPARATOR_DISABLED,
    CHIP_ID,
    RESET_ALERT_ENABLED,
    SOC_CHANGE_FLAG,
    SOC_LOW_FLAG,
    VOLTAGE_RESET_FLAG,
    VOLTAGE_LOW_FLAG,
    VOLTAGE_HIGH_FLAG,
    RESET_INDICATOR,
    COMMAND,
)


# =============================================================================
# LOOKUP INDEXES
# =============================================================================

BY_NAME: dict[str, RegisterField] = {f.name: f for f in REGISTER_FIELDS}
"""Lookup by field name → definition."""

_address_groups: dict[int, list[RegisterField]] = {}
for _f in REGISTER_FIELDS:
    _address_groups.setdefault(_f.address, []).append(_f)

BY_ADDRESS: dict[int, tuple[RegisterField, ...]] = {
    address: tuple(fields) for address, fields in _address_groups.items()
}
"""Lookup by register address → fields packed into that register."""


def fields_for_address(address: int) -> tuple[RegisterField, ...]:
    """Return all fields packed into the register at ``address``."""
    return BY_ADDRESS.get(address, ())


__all__ = [
    "BY_ADDRESS",
    "BY_NAME",
    "REGISTER_FIELDS",
    "Register",
    "RegisterField",
    "fields_for_address",
    # Field definitions
    "ACTIVITY_THRESHOLD",
    "ALERT",
    "CELL_VOLTAGE",
    "CHARGE_RATE",
    "CHIP_ID",
    "CHIP_VERSION",
    "COMMAND",
    "COMPARATOR_DISABLED",
    "EMPTY_ALERT_THRESHOLD",
    "HIBERNATE_THRESHOLD",
    "HIBERNATING",
    "QUICK_START",
    "RCOMP",
    "RESET_ALERT_ENABLED",
    "RESET_INDICATOR",
    "RESET_VOLTAGE",
    "SLEEP",
    "SLEEP_ENABLED",
    "SOC_CHANGE_ALERT",
    "SOC_CHANGE_FLAG",
    "SOC_LOW_FLAG",
    "STATE_OF_CHARGE",
    "VOLTAGE_ALERT_MAX",
    "VOLTAGE_ALERT_MIN",
    "VOLTAGE_HIGH_FLAG",
    "VOLTAGE_LOW_FLAG",
    "VOLTAGE_RESET_FLAG",
]
