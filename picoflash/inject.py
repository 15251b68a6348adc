"""Seal the boot stage 2 segment of an ELF image with its CRC-32."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from os import PathLike
from typing import BinaryIO

from picoflash.crc32 import CRC32_SIZE, crc32_be
from picoflash.elf32 import (
    ELFCLASS32,
    PT_LOAD,
    ElfFormatError,
    ElfHeader,
    ProgramHeader,
    SegmentFlag,
)

#: Size of the boot stage 2 segment, checksum included.
BOOT2_SIZE = 256
#: Bytes covered by the checksum.
PAYLOAD_SIZE = BOOT2_SIZE - CRC32_SIZE

_REQUIRED_FLAGS = SegmentFlag.X | SegmentFlag.R


class Boot2ValidationError(ElfFormatError):
    """Raised when an image has no usable boot stage 2 segment."""


def locate_boot2(stream: BinaryIO) -> ProgramHeader:
    """Check the first program segment and leave ``stream`` positioned at it."""
    raw = stream.read(ElfHeader.SIZE)
    if len(raw) < ElfHeader.SIZE:
        raise Boot2ValidationError("could not read the ELF header")
    header = ElfHeader.parse(raw)
    if not header.has_magic:
        raise Boot2ValidationError("Not an ELF file.")
    if header.elf_class != ELFCLASS32:
        raise Boot2ValidationError("Not a 32-bit ELF file.")
    if header.phnum < 1:
        raise Boot2ValidationError("Expected a program segment, but found none.")

    stream.seek(header.phoff)
    raw = stream.read(ProgramHeader.SIZE)
    if len(raw) < ProgramHeader.SIZE:
        raise Boot2ValidationError("could not read the program header")
    phdr = ProgramHeader.parse(raw)
    if phdr.memsz != BOOT2_SIZE:
        raise Boot2ValidationError(
            f"Have p_memsz {phdr.memsz} but expected {BOOT2_SIZE}"
        )
    if phdr.type != PT_LOAD:
        raise Boot2ValidationError("The program segment is not loadable.")
    if phdr.flags & _REQUIRED_FLAGS != _REQUIRED_FLAGS:
        raise Boot2ValidationError(
            "The program segment is not executable and readable."
        )
    stream.seek(phdr.offset)
    return phdr


def boot2_checksum(payload: bytes) -> int:
    """Return the CRC-32 of the first 252 bytes of boot stage 2."""
    if len(payload) != PAYLOAD_SIZE:
        raise ValueError(
            f"boot stage 2 payload must be {PAYLOAD_SIZE} bytes, not {len(payload)}"
        )
    return crc32_be(payload)


def inject_crc32(path: str | PathLike[str]) -> int:
    """Write the checksum, little-endian, into the last 4 bytes of boot stage 2."""
    with open(path, "rb+") as stream:
        locate_boot2(stream)
        payload = stream.read(PAYLOAD_SIZE)
        if len(payload) < PAYLOAD_SIZE:
            raise Boot2ValidationError("boot stage 2 segment is truncated")
        crc = boot2_checksum(payload)
        stream.write(crc.to_bytes(CRC32_SIZE, "little"))
    return crc


def main(argv: Sequence[str] | None = None) -> int:
    """Command line entry: ``inject-crc32 <elf-file>``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("Usage: inject-crc32 <elf-file>", file=sys.stderr)
        return 1
    filename = args[0]
    try:
        crc = inject_crc32(filename)
    except (OSError, ElfFormatError) as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"CRC32 0x{crc:08X} injected into {filename}")
    return 0


if __name__ == "__main__":
    sys.exit(main())