"""Single-cycle IO block: GPIO output control and related registers."""

from __future__ import annotations

from picoflash import io_bank0
from picoflash.mmio import Layout, RegisterBus

BASE = 0xD0000000


def _interp(n: int) -> list[str]:
    return [
        f"interp{n}_{name}"
        for name in (
            "accum0", "accum1", "base0", "base1", "base2",
            "pop_lane0", "pop_lane1", "pop_full",
            "peek_lane0", "peek_lane1", "peek_full",
            "ctrl_lane0", "ctrl_lane1",
            "accum0_add", "accum1_add", "base_1and0",
        )
    ]


LAYOUT = Layout(
    BASE,
    [
        "cpuid", "gpio_in", ("gpio_hi_in", 1, 8),
        "gpio_out", "gpio_out_set", "gpio_out_clr", "gpio_out_xor",
        "gpio_oe", "gpio_oe_set", "gpio_oe_clr", "gpio_oe_xor",
        "gpio_hi_out", "gpio_hi_out_set", "gpio_hi_out_clr", "gpio_hi_out_xor",
        "gpio_hi_oe", "gpio_hi_oe_set", "gpio_hi_oe_clr", "gpio_hi_oe_xor",
        "fifo_st", "fifo_wr", "fifo_rd",
        "spinlock_st",
        "div_udividend", "div_udivisor", "div_sdividend", "div_sdivisor",
        "div_quotient", "div_remainder", ("div_csr", 1, 8),
        *_interp(0),
        *_interp(1),
        ("spinlock", 32),
    ],
)


def _pin_mask(gpio: int) -> int:
    if not 0 <= gpio < io_bank0.NUM_GPIOS:
        raise ValueError(f"GPIO {gpio} out of range 0..{io_bank0.NUM_GPIOS - 1}")
    return 1 << gpio


def toggle_gpio(bus: RegisterBus, gpio: int) -> None:
    """Invert the output level of ``gpio``."""
    bus.write(LAYOUT.address("gpio_out_xor"), _pin_mask(gpio))


def enable_gpio(bus: RegisterBus, gpio: int) -> None:
    """Route ``gpio`` to the SIO block and enable its output driver."""
    mask = _pin_mask(gpio)
    bus.write(io_bank0.gpio_ctrl_address(gpio), io_bank0.GPIO_FUNC_SIO)
    bus.write(LAYOUT.address("gpio_oe_set"), mask)