"""Watchdog tick generator."""

from __future__ import annotations

from picoflash import xosc
from picoflash.mmio import Layout, RegisterBus

BASE = 0x40058000
LAYOUT = Layout(BASE, ["ctrl", "load", "reason", ("scratch", 8), "tick"])

TICK_ENABLE_BITS = 0x1 << 9


def tick_start(bus: RegisterBus) -> None:
    """Enable the tick generator, dividing the crystal down to one tick per microsecond."""
    bus.write(LAYOUT.address("tick"), xosc.MHZ | TICK_ENABLE_BITS)