"""Conversion of flat flash images to RP2040 UF2 files."""

from __future__ import annotations

import struct
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import ClassVar

from picoflash.mmio import U32_MASK

#: Start of flash in the RP2040 address map.
BASE_ADDRESS = 0x10000000
RP2040_FAMILY_ID = 0xE48BFF56
#: Payload carried by each block.
BLOCK_SIZE = 256
MAGIC_START0 = 0x0A324655
MAGIC_START1 = 0x9E5D5157
MAGIC_END = 0x0AB16F30
FLAG_FAMILY_ID_PRESENT = 0x00002000

DATA_SIZE = 476
_HEADER = struct.Struct("<8I")
_FOOTER = struct.Struct("<I")
BLOCK_BYTES = _HEADER.size + DATA_SIZE + _FOOTER.size


class Uf2Error(ValueError):
    """Raised for images that cannot be converted or blocks that do not decode."""


@dataclass(frozen=True)
class Uf2Block:
    """One 512-byte UF2 block."""

    target_addr: int
    block_num: int
    num_blocks: int
    data: bytes
    flags: int = FLAG_FAMILY_ID_PRESENT
    family_id: int = RP2040_FAMILY_ID

    SIZE: ClassVar[int] = BLOCK_BYTES

    def __post_init__(self) -> None:
        if len(self.data) > DATA_SIZE:
            raise Uf2Error(f"payload of {len(self.data)} bytes exceeds {DATA_SIZE}")

    def pack(self) -> bytes:
        """Encode the block, zero-padding the data area."""
        header = _HEADER.pack(
            MAGIC_START0, MAGIC_START1, self.flags, self.target_addr,
            len(self.data), self.block_num, self.num_blocks, self.family_id,
        )
        return header + self.data.ljust(DATA_SIZE, b"\x00") + _FOOTER.pack(MAGIC_END)

    @classmethod
    def unpack(cls, data: bytes) -> Uf2Block:
        """Decode a block, checking its size and magic numbers."""
        if len(data) != BLOCK_BYTES:
            raise Uf2Error(f"a UF2 block is {BLOCK_BYTES} bytes, not {len(data)}")
        (magic0, magic1, flags, target, payload_size,
         block_num, num_blocks, family_id) = _HEADER.unpack_from(data)
        (magic_end,) = _FOOTER.unpack_from(data, BLOCK_BYTES - _FOOTER.size)
        if (magic0, magic1, magic_end) != (MAGIC_START0, MAGIC_START1, MAGIC_END):
            raise Uf2Error("bad UF2 magic number")
        if payload_size > DATA_SIZE:
            raise Uf2Error(f"payload size {payload_size} exceeds {DATA_SIZE}")
        start = _HEADER.size
        return cls(
            target_addr=target,
            block_num=block_num,
            num_blocks=num_blocks,
            data=bytes(data[start : start + payload_size]),
            flags=flags,
            family_id=family_id,
        )


def blocks_from_binary(data: bytes) -> list[Uf2Block]:
    """Split a 256-byte aligned image into blocks placed from the start of flash."""
    size = len(data)
    if size == 0:
        raise Uf2Error(f"Invalid file size {size}.")
    if size > U32_MASK:
        raise Uf2Error("File is too large.")
    if size % BLOCK_SIZE:
        raise Uf2Error("Not 256 byte aligned!")
    num_blocks = size // BLOCK_SIZE
    return [
        Uf2Block(
            target_addr=BASE_ADDRESS + start,
            block_num=number,
            num_blocks=num_blocks,
            data=bytes(data[start : start + BLOCK_SIZE]),
        )
        for number, start in enumerate(range(0, size, BLOCK_SIZE))
    ]


def convert(src_path: str | PathLike[str], dest_path: str | PathLike[str]) -> list[Uf2Block]:
    """Convert the image at ``src_path``, create or replace ``dest_path``; return the blocks."""
    blocks = blocks_from_binary(Path(src_path).read_bytes())
    Path(dest_path).write_bytes(b"".join(block.pack() for block in blocks))
    return blocks


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry: ``bin2uf2 <bin-file> <uf2-file>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print("Usage: bin2uf2 <bin-file> <uf2-file>", file=sys.stderr)
        return 1
    src, dest = args[0], args[1]
    try:
        size = Path(src).stat().st_size
        print(f"{size} bytes read from {src}")
        blocks = convert(src, dest)
    except (OSError, Uf2Error) as exc:
        print(exc, file=sys.stderr)
        return 1
    for block in blocks:
        print(f"Placed uf2 block {block.block_num + 1} @<0x{block.target_addr:04x}>.")
    print(f"Produced {len(blocks)} uf2 blocks.")
    return 0


if __name__ == "__main__":
    sys.exit(main())