from picoflash import xip
from picoflash.mmio import RegisterBus


def test_enable_register_is_third_word():
    assert xip.LAYOUT.address("ctrlr0") == xip.BASE
    assert xip.LAYOUT.offset("ssienr") == 2 * 4


def test_enable_for_reading_sequence():
    bus = RegisterBus()
    xip.enable_for_reading(bus)
    assert bus.log == [
        (xip.LAYOUT.address("ssienr"), 0),
        (xip.LAYOUT.address("ctrlr0"), (0x3 << 8) | (0x1F << 16)),
        (xip.LAYOUT.address("ssienr"), 1),
    ]
    assert bus.read(xip.LAYOUT.address("ssienr")) == 1


def test_disable_after_enable():
    bus = RegisterBus()
    xip.enable_for_reading(bus)
    xip.disable(bus)
    assert bus.read(xip.LAYOUT.address("ssienr")) == 0
    assert bus.read(xip.LAYOUT.address("ctrlr0")) == xip.CTRLR0_READ
    assert bus.log[-1] == (xip.LAYOUT.address("ssienr"), 0)