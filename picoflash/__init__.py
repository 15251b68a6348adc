"""RP2040 blink firmware model with boot2 CRC injection and UF2 conversion tools."""

__version__ = "0.1.0"