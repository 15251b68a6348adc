"""LED blink firmware flow, driven against a register bus."""

from __future__ import annotations

from collections.abc import Callable

from picoflash import clocks, core_ppb, resets, sio, timer, watchdog, xip, xosc
from picoflash.mmio import RegisterBus, clear_bits

LED_PIN = 25
#: One second.
BLINK_DELAY_US = 1_000_000

LOAD_BASE = 0x10000100
RUNTIME_BASE = 0x20000000
#: The vector table leads the image copied into SRAM.
VECTOR_TABLE_ADDRESS = RUNTIME_BASE

#: Vector table slot of external interrupt 0.
IRQ0_VECTOR = 16

Handler = Callable[[RegisterBus], None]


def timer0_irq(bus: RegisterBus) -> None:
    """Acknowledge the alarm 0 interrupt and toggle the LED."""
    clear_bits(bus, timer.LAYOUT.address("intr"), 1 << timer.Alarm.ALARM0)
    sio.toggle_gpio(bus, LED_PIN)


_VECTORS: tuple[Handler | None, ...] = (None,) * IRQ0_VECTOR + (timer0_irq,)


def vector_table() -> tuple[Handler | None, ...]:
    """Exception vectors; empty slots are ``None``, IRQ 0 is the timer handler."""
    return _VECTORS


def boot(bus: RegisterBus, copy_len: int) -> None:
    """Bring up the clocks, copy ``copy_len`` words from flash to SRAM and install the vectors."""
    if copy_len < 0:
        raise ValueError("copy length must not be negative")
    xosc.init_enable(bus)
    clocks.set_ref_to_xosc(bus)
    watchdog.tick_start(bus)
    xip.enable_for_reading(bus)
    for word in range(copy_len):
        bus.write(RUNTIME_BASE + 4 * word, bus.read(LOAD_BASE + 4 * word))
    core_ppb.set_vtable(bus, VECTOR_TABLE_ADDRESS)
    xip.disable(bus)


def _wait_for_event(bus: RegisterBus) -> None:
    """Let time pass until alarm 0 fires and take its interrupt if enabled."""
    alarm = timer.Alarm.ALARM0
    bus.write(timer.LAYOUT.address("timerawl"), bus.read(timer.LAYOUT.address("alarms", alarm)))
    irq = 1 << alarm
    intr = timer.LAYOUT.address("intr")
    bus.write(intr, bus.read(intr) | irq)
    enabled = bus.read(timer.LAYOUT.address("inte")) & bus.read(
        core_ppb.LAYOUT.address("NVIC_ISER")
    )
    if enabled & irq:
        handler = vector_table()[IRQ0_VECTOR + alarm]
        if handler is not None:
            handler(bus)


def run(bus: RegisterBus, cycles: int) -> None:
    """Set up the LED and timer, then run ``cycles`` iterations of the blink loop."""
    if cycles < 0:
        raise ValueError("cycle count must not be negative")
    resets.clear_blocking(bus, resets.Reset.IO_BANK0 | resets.Reset.TIMER)
    timer.enable_alarm(bus, timer.Alarm.ALARM0)
    sio.enable_gpio(bus, LED_PIN)
    for _ in range(cycles):
        timer.alarm_in_us(bus, timer.Alarm.ALARM0, BLINK_DELAY_US)
        _wait_for_event(bus)