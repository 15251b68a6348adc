"""Big-endian CRC-32 (polynomial 0x04C11DB7) used to seal the boot stage 2 image."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from picoflash.mmio import U32_MASK

POLY = 0x04C11DB7
INITIAL = 0xFFFF_FFFF
#: Size in bytes of a stored checksum.
CRC32_SIZE = 4

_TOP_BIT = 0x8000_0000


def build_table() -> tuple[int, ...]:
    """Return the 256-entry lookup table for the most-significant-bit-first CRC."""
    table = [0]
    crc = _TOP_BIT
    while len(table) < 256:
        crc = ((crc << 1) & U32_MASK) ^ (POLY if crc & _TOP_BIT else 0)
        # ``crc`` is the entry for index len(table); the entries above it
        # follow by linearity from the ones already known.
        table.extend(crc ^ value for value in list(table))
    return tuple(table)


_TABLE = build_table()


def crc32_be(data: bytes) -> int:
    """Compute the CRC over ``data``: initial value all ones, no final XOR."""
    crc = INITIAL
    for byte in data:
        crc = ((crc << 8) & U32_MASK) ^ _TABLE[(crc >> 24) ^ byte]
    return crc


def render_table_header(table: Sequence[int]) -> str:
    """Render ``table`` as a C header defining ``crc32table`` and ``CRC32_SIZE``."""
    if len(table) != 256:
        raise ValueError(f"a CRC table has 256 entries, not {len(table)}")
    lines = [
        "// Code generated by picoflash.crc32, do not modify.",
        "",
        f"#define CRC32_SIZE {CRC32_SIZE}",
        "",
        "static const unsigned int crc32table[256] = {",
        *(f"    {value & U32_MASK}," for value in table),
        "};",
    ]
    return "\n".join(lines) + "\n"


def main(argv: Sequence[str] | None = None) -> int:
    """Write the lookup table header to standard output."""
    sys.stdout.write(render_table_header(build_table()))
    return 0


if __name__ == "__main__":
    sys.exit(main())