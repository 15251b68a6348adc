"""Microsecond system timer and its alarms."""

from __future__ import annotations

from enum import IntEnum

from picoflash import core_ppb
from picoflash.mmio import U32_MASK, Layout, RegisterBus, set_bits

BASE = 0x40054000
LAYOUT = Layout(
    BASE,
    [
        "timehw", "timelw", "timehr", "timelr",
        ("alarms", 4),
        "armed", "timerawh", "timerawl", "dbgpause", "pause",
        "intr", "inte", "intf", "ints",
    ],
)


class Alarm(IntEnum):
    """The four timer alarms; alarm ``n`` raises IRQ ``n``."""

    ALARM0 = 0
    ALARM1 = 1
    ALARM2 = 2
    ALARM3 = 3


def spin_for_us(bus: RegisterBus, us: int) -> None:
    """Busy-wait until the raw timer has advanced by ``us`` microseconds."""
    now = LAYOUT.address("timerawl")
    start = bus.read(now)
    while (bus.read(now) - start) & U32_MASK < us:
        pass


def enable_alarm(bus: RegisterBus, alarm: int) -> None:
    """Enable the alarm's timer interrupt and its IRQ in the NVIC."""
    irq = 1 << Alarm(alarm)
    set_bits(bus, LAYOUT.address("inte"), irq)
    bus.write(core_ppb.LAYOUT.address("NVIC_ICPR"), irq)
    bus.write(core_ppb.LAYOUT.address("NVIC_ISER"), irq)


def alarm_in_us(bus: RegisterBus, alarm: int, us: int) -> None:
    """Arm ``alarm`` to fire ``us`` microseconds from now."""
    alarm = Alarm(alarm)
    target = (bus.read(LAYOUT.address("timerawl")) + us) & U32_MASK
    bus.write(LAYOUT.address("alarms", alarm), target)