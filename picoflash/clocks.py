"""Clock generator control."""

from __future__ import annotations

from picoflash.mmio import Layout, RegisterBus

BASE = 0x40008000
LAYOUT = Layout(
    BASE,
    [
        "clk_gpout0_ctrl", "clk_gpout0_div", "clk_gpout0_selected",
        "clk_gpout1_ctrl", "clk_gpout1_div", "clk_gpout1_selected",
        "clk_gpout2_ctrl", "clk_gpout2_div", "clk_gpout2_selected",
        "clk_gpout3_ctrl", "clk_gpout3_div", "clk_gpout3_selected",
        "clk_ref_ctrl", "clk_ref_div", "clk_ref_selected",
        "clk_sys_ctrl", "clk_sys_div", "clk_sys_selected",
        "clk_peri_ctrl", "_pad", "clk_peri_selected",
        "clk_usb_ctrl", "clk_usb_div", "clk_usb_selected",
        "clk_adc_ctrl", "clk_adc_div", "clk_adc_selected",
        "clk_rtc_ctrl", "clk_rtc_div", "clk_rtc_selected",
        "clk_sys_resus_ctrl", "clk_sys_resus_status",
        "fc0_ref_khz", "fc0_min_khz", "fc0_max_khz", "fc0_delay",
        "fc0_interval", "fc0_src", "fc0_status", "fc0_result",
        "wake_en0", "wake_en1", "sleep_en0", "sleep_en1",
        "enabled0", "enabled1", "intr", "inte", "intf", "ints",
    ],
)

#: clk_ref source: 0 ROSC, 1 aux, 2 XOSC.
REF_XOSC_CLKSRC = 0x2
SYS_REF_CLKSRC = 0x0

#: The SELECTED registers are one-hot: source ``n`` shows up as bit ``n``.
REF_SELECTED_XOSC_CLKSRC = 1 << REF_XOSC_CLKSRC
SYS_SELECTED_REF_CLKSRC = 1 << SYS_REF_CLKSRC


def set_ref_to_xosc(bus: RegisterBus) -> None:
    """Switch clk_ref to the crystal and clk_sys to clk_ref, waiting on each mux."""
    bus.write(LAYOUT.address("clk_ref_ctrl"), REF_XOSC_CLKSRC)
    ref_selected = LAYOUT.address("clk_ref_selected")
    while not bus.read(ref_selected) & REF_SELECTED_XOSC_CLKSRC:
        pass
    bus.write(LAYOUT.address("clk_sys_ctrl"), SYS_REF_CLKSRC)
    sys_selected = LAYOUT.address("clk_sys_selected")
    while bus.read(sys_selected) != SYS_SELECTED_REF_CLKSRC:
        pass