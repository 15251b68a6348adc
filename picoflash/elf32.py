"""32-bit little-endian ELF file and program headers."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntFlag
from typing import ClassVar

#: Index of the class byte in ``e_ident``.
EI_CLASS = 4
ELFCLASS32 = 1
ELF_MAG = b"\x7fELF"
SELFMAG = len(ELF_MAG)

PT_LOAD = 1


class SegmentFlag(IntFlag):
    """Program segment permissions."""

    X = 1 << 0
    W = 1 << 1
    R = 1 << 2


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a well-formed ELF structure."""


def _unpack(fmt: struct.Struct, data: bytes, what: str) -> tuple:
    if len(data) < fmt.size:
        raise ElfFormatError(f"{what} needs {fmt.size} bytes, got {len(data)}")
    return fmt.unpack_from(data)


@dataclass
class ElfHeader:
    """The ELF32 file header."""

    ident: bytes = bytes(16)
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = 0
    phentsize: int = 0
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<16sHHIIIIIHHHHHH")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def parse(cls, data: bytes) -> ElfHeader:
        """Decode a header from the start of ``data``."""
        return cls(*_unpack(cls._STRUCT, data, "ELF header"))

    def pack(self) -> bytes:
        """Encode the header."""
        if len(self.ident) != 16:
            raise ElfFormatError("e_ident must be exactly 16 bytes")
        return self._STRUCT.pack(
            self.ident, self.type, self.machine, self.version, self.entry,
            self.phoff, self.shoff, self.flags, self.ehsize, self.phentsize,
            self.phnum, self.shentsize, self.shnum, self.shstrndx,
        )

    @property
    def has_magic(self) -> bool:
        """Whether ``ident`` starts with the ELF magic number."""
        return self.ident[:SELFMAG] == ELF_MAG

    @property
    def elf_class(self) -> int:
        """The file class byte (1 for 32-bit)."""
        return self.ident[EI_CLASS]


@dataclass
class ProgramHeader:
    """An ELF32 program (segment) header."""

    type: int = 0
    offset: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    flags: int = 0
    align: int = 0

    _STRUCT: ClassVar[struct.Struct] = struct.Struct("<8I")
    SIZE: ClassVar[int] = _STRUCT.size

    @classmethod
    def parse(cls, data: bytes) -> ProgramHeader:
        """Decode a program header from the start of ``data``."""
        return cls(*_unpack(cls._STRUCT, data, "program header"))

    def pack(self) -> bytes:
        """Encode the program header."""
        return self._STRUCT.pack(
            self.type, self.offset, self.vaddr, self.paddr,
            self.filesz, self.memsz, int(self.flags), self.align,
        )