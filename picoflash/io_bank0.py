"""User GPIO bank: per-pin status and control registers."""

from __future__ import annotations

from picoflash.mmio import Layout

BASE = 0x40014000
NUM_GPIOS = 30
GPIO_FUNC_SIO = 5

_BANK = 4
LAYOUT = Layout(
    BASE,
    [
        # Each element is a status/ctrl pair of 32-bit registers.
        ("gpio", NUM_GPIOS, 8),
        ("intr", _BANK),
        ("proc0_inte", _BANK),
        ("proc0_intf", _BANK),
        ("proc0_ints", _BANK),
        ("proc1_inte", _BANK),
        ("proc1_intf", _BANK),
        ("proc1_ints", _BANK),
        ("dormant_wake_inte", _BANK),
        ("dormant_wake_intf", _BANK),
        ("dormant_wake_ints", _BANK),
    ],
)

_STATUS_OFFSET = 0
_CTRL_OFFSET = 4


def gpio_status_address(gpio: int) -> int:
    """Address of the GPIOx_STATUS register."""
    return LAYOUT.address("gpio", gpio) + _STATUS_OFFSET


def gpio_ctrl_address(gpio: int) -> int:
    """Address of the GPIOx_CTRL register."""
    return LAYOUT.address("gpio", gpio) + _CTRL_OFFSET