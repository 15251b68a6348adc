"""Crystal oscillator (XOSC) control."""

from __future__ import annotations

from picoflash.mmio import U8_MASK, Layout, RegisterBus

BASE = 0x40024000
LAYOUT = Layout(
    BASE,
    ["ctrl", "status", "dormant", "startup", ("_pad", 3), "count"],
)

ENABLE_BITS = 0xFAB << 12
#: Only valid frequency range value: 1-15 MHz. The Pico crystal runs at 12 MHz.
MHZ = 12
FREQ_RANGE_BITS = 0xAA0
STARTUP_DELAY = 0x2F
#: Stable and enabled.
STATUS_READY = (1 << 31) | (1 << 12)


def init_enable(bus: RegisterBus) -> None:
    """Configure the startup delay, enable the oscillator and wait until stable."""
    bus.write(LAYOUT.address("startup"), STARTUP_DELAY)
    bus.write(LAYOUT.address("ctrl"), ENABLE_BITS | FREQ_RANGE_BITS)
    status = LAYOUT.address("status")
    while bus.read(status) & STATUS_READY != STATUS_READY:
        pass


def count_down(bus: RegisterBus, value: int) -> None:
    """Load the down counter with an 8-bit ``value`` and wait for it to reach zero."""
    count = LAYOUT.address("count")
    bus.write(count, value & U8_MASK)
    while bus.read(count):
        pass