"""Cortex-M0+ private peripheral bus: SysTick, NVIC and system control block."""

from __future__ import annotations

from picoflash.mmio import Layout, RegisterBus

PPB_BASE = 0xE0000000
SYST_CSR_OFFSET = 0xE010
BASE = PPB_BASE + SYST_CSR_OFFSET

LAYOUT = Layout(
    BASE,
    [
        "SYST_CSR", "SYST_RVR", "SYST_CVR", "SYST_CALIB",
        ("__pad7", 56),
        "NVIC_ISER",
        ("__pad0", 31),
        "NVIC_ICER",
        ("__pad1", 31),
        "NVIC_ISPR",
        ("__pad2", 31),
        "NVIC_ICPR",
        ("__pad3", 95),
        ("NVIC_IPR", 8),
        ("__pad4", 568),
        "CPUID", "ICSR", "VTOR", "AIRCR", "SCR", "CCR",
        "__pad5",
        "SHPR2", "SHPR3", "SHCSR",
        ("__pad6", 26),
        "MPU_TYPE", "MPU_CTRL", "MPU_RNR", "MPU_RBAR", "MPU_RASR",
    ],
)


def set_vtable(bus: RegisterBus, addr: int) -> None:
    """Point the vector table offset register at ``addr``."""
    bus.write(LAYOUT.address("VTOR"), addr)