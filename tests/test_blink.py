import pytest

from picoflash import blink, clocks, core_ppb, io_bank0, resets, sio, timer, watchdog, xip, xosc
from picoflash.mmio import RegisterBus


def _boot_bus(flash_words):
    values = {
        xosc.LAYOUT.address("status"): xosc.STATUS_READY,
        clocks.LAYOUT.address("clk_ref_selected"): clocks.REF_SELECTED_XOSC_CLKSRC,
        clocks.LAYOUT.address("clk_sys_selected"): clocks.SYS_SELECTED_REF_CLKSRC,
    }
    for n, word in enumerate(flash_words):
        values[blink.LOAD_BASE + 4 * n] = word
    return RegisterBus(values)


def _run_bus():
    all_resets = int(sum(resets.Reset))
    bus = RegisterBus(
        {
            resets.LAYOUT.address("reset"): all_resets,
            resets.LAYOUT.address("reset_done"): all_resets,
        },
        atomic_aliases=True,
    )
    gpio_out = sio.LAYOUT.address("gpio_out")
    bus.on_write(
        sio.LAYOUT.address("gpio_out_xor"),
        lambda mask: bus.write(gpio_out, bus.read(gpio_out) ^ mask),
    )
    return bus


def _toggles(bus):
    xor = sio.LAYOUT.address("gpio_out_xor")
    return [value for addr, value in bus.log if addr == xor]


def test_vector_table_routes_irq0_to_timer_handler():
    table = blink.vector_table()
    assert len(table) == blink.IRQ0_VECTOR + 1
    assert table[blink.IRQ0_VECTOR] is blink.timer0_irq
    assert all(entry is None for entry in table[: blink.IRQ0_VECTOR])


def test_timer0_irq_acknowledges_and_toggles():
    intr = timer.LAYOUT.address("intr")
    bus = RegisterBus({intr: 1}, atomic_aliases=True)
    blink.timer0_irq(bus)
    assert bus.read(intr) == 0
    assert _toggles(bus) == [1 << blink.LED_PIN]


def test_boot_copies_image_and_installs_vectors():
    image = [0xDEADBEEF, 0x01234567, 0x89ABCDEF]
    bus = _boot_bus(image)
    blink.boot(bus, len(image))
    copied = [bus.read(blink.RUNTIME_BASE + 4 * n) for n in range(len(image))]
    assert copied == image
    assert bus.read(blink.RUNTIME_BASE + 4 * len(image)) == 0
    assert bus.read(core_ppb.LAYOUT.address("VTOR")) == blink.VECTOR_TABLE_ADDRESS
    assert bus.read(xip.LAYOUT.address("ssienr")) == 0


def test_boot_configures_clocks_first():
    bus = _boot_bus([7])
    blink.boot(bus, 1)
    assert bus.read(xosc.LAYOUT.address("startup")) == xosc.STARTUP_DELAY
    assert bus.read(clocks.LAYOUT.address("clk_ref_ctrl")) == clocks.REF_XOSC_CLKSRC
    assert bus.read(watchdog.LAYOUT.address("tick")) == xosc.MHZ | watchdog.TICK_ENABLE_BITS
    writes = [addr for addr, _ in bus.log]
    assert writes.index(xip.LAYOUT.address("ctrlr0")) < writes.index(blink.RUNTIME_BASE)
    assert writes[-1] == xip.LAYOUT.address("ssienr")


def test_boot_rejects_negative_length():
    with pytest.raises(ValueError):
        blink.boot(RegisterBus(), -1)


def test_run_toggles_led_once_per_cycle():
    bus = _run_bus()
    blink.run(bus, 4)
    assert _toggles(bus) == [1 << blink.LED_PIN] * 4
    assert bus.read(sio.LAYOUT.address("gpio_out")) & (1 << blink.LED_PIN) == 0


def test_run_odd_cycles_leaves_led_on():
    bus = _run_bus()
    blink.run(bus, 3)
    assert bus.read(sio.LAYOUT.address("gpio_out")) & (1 << blink.LED_PIN)
    assert bus.read(timer.LAYOUT.address("timerawl")) == 3 * blink.BLINK_DELAY_US


def test_run_brings_peripherals_out_of_reset_and_sets_up_pin():
    bus = _run_bus()
    blink.run(bus, 0)
    needed = resets.Reset.IO_BANK0 | resets.Reset.TIMER
    assert bus.read(resets.LAYOUT.address("reset")) & needed == 0
    assert bus.read(io_bank0.gpio_ctrl_address(blink.LED_PIN)) == io_bank0.GPIO_FUNC_SIO
    assert bus.read(sio.LAYOUT.address("gpio_oe_set")) == 1 << blink.LED_PIN
    assert _toggles(bus) == []


def test_run_rejects_negative_cycles():
    with pytest.raises(ValueError):
        blink.run(_run_bus(), -1)