"""Execute-in-place SSI setup for reading flash."""

from __future__ import annotations

from picoflash.mmio import Layout, RegisterBus

BASE = 0x18000000
LAYOUT = Layout(
    BASE,
    [
        "ctrlr0", "ctrlr1", "ssienr", "mwcr", "ser", "baudr", "txftlr",
        "rxftlr", "txflr", "rxflr", "sr", "imr", "isr", "risr", "txoicr",
        "rxoicr", "rxuicr", "msticr", "icr", "dmacr", "dmatdlr", "dmardlr",
        "idr", "ssi_version_id", ("dr0", 36), "rx_sample_dly", "spi_ctrlr0",
    ],
)

#: EEPROM-read transfer mode with 32-bit data frames.
CTRLR0_READ = (0x3 << 8) | (0x1F << 16)


def enable_for_reading(bus: RegisterBus) -> None:
    """Disable the SSI, configure it for reading flash and enable it again."""
    bus.write(LAYOUT.address("ssienr"), 0)
    bus.write(LAYOUT.address("ctrlr0"), CTRLR0_READ)
    bus.write(LAYOUT.address("ssienr"), 1)


def disable(bus: RegisterBus) -> None:
    """Disable the SSI."""
    bus.write(LAYOUT.address("ssienr"), 0)