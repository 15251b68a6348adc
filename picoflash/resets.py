"""Subsystem reset control."""

from __future__ import annotations

from enum import IntFlag

from picoflash.mmio import Layout, RegisterBus, clear_bits

BASE = 0x4000C000
LAYOUT = Layout(BASE, ["reset", "wdsel", "reset_done"])


class Reset(IntFlag):
    """Reset bits of the RESET and RESET_DONE registers."""

    ADC = 1 << 0
    BUSCTRL = 1 << 1
    DMA = 1 << 2
    I2C0 = 1 << 3
    I2C1 = 1 << 4
    IO_BANK0 = 1 << 5
    IO_QSPI = 1 << 6
    JTAG = 1 << 7
    PADS_BANK0 = 1 << 8
    PADS_QSPI = 1 << 9
    PIO0 = 1 << 10
    PIO1 = 1 << 11
    PLL_SYS = 1 << 12
    PLL_USB = 1 << 13
    PWM = 1 << 14
    RTC = 1 << 15
    SPI0 = 1 << 16
    SPI1 = 1 << 17
    SYSCFG = 1 << 18
    SYSINFO = 1 << 19
    TBMAN = 1 << 20
    TIMER = 1 << 21
    UART0 = 1 << 22
    UART1 = 1 << 23
    USBCTRL = 1 << 24


def clear_blocking(bus: RegisterBus, peripherals: int) -> None:
    """Deassert reset for ``peripherals`` and wait until they report done."""
    mask = int(peripherals)
    clear_bits(bus, LAYOUT.address("reset"), mask)
    done = LAYOUT.address("reset_done")
    while bus.read(done) & mask != mask:
        pass