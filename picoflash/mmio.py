"""A simulated 32-bit register bus and helpers for describing register blocks."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

U8_MASK = 0xFF
U16_MASK = 0xFFFF
U32_MASK = 0xFFFF_FFFF
U64_MASK = 0xFFFF_FFFF_FFFF_FFFF

#: Address offsets of the atomic register access aliases.
XOR_ALIAS = 0x1000
SET_ALIAS = 0x2000
CLEAR_ALIAS = 0x3000

_ALIAS_MASK = 0x3000
_PERIPHERAL_START = 0x4000_0000
_PERIPHERAL_END = 0x6000_0000

ReadHandler = Callable[[int], int]
WriteHandler = Callable[[int], None]


def _word_address(addr: int) -> int:
    if not isinstance(addr, int) or isinstance(addr, bool):
        raise TypeError(f"register address must be an int, not {type(addr).__name__}")
    if not 0 <= addr <= U32_MASK:
        raise ValueError(f"address {addr:#x} is outside the 32-bit address space")
    if addr % 4:
        raise ValueError(f"address {addr:#010x} is not word aligned")
    return addr


class RegisterBus:
    """Word-addressed register space with optional read and write hooks.

    Unwritten registers read as zero.  Every write is recorded in ``log`` as an
    ``(address, value)`` pair.  With ``atomic_aliases`` enabled, writes to the
    XOR/SET/CLEAR aliases of peripheral registers modify the base register the
    way the hardware does.
    """

    def __init__(
        self,
        values: Mapping[int, int] | None = None,
        *,
        atomic_aliases: bool = False,
    ) -> None:
        self._values: dict[int, int] = {
            _word_address(addr): value & U32_MASK for addr, value in (values or {}).items()
        }
        self._read_handlers: dict[int, ReadHandler] = {}
        self._write_handlers: defaultdict[int, list[WriteHandler]] = defaultdict(list)
        self.atomic_aliases = atomic_aliases
        self.log: list[tuple[int, int]] = []

    def read(self, addr: int) -> int:
        """Return the value of the register at ``addr``."""
        addr = _word_address(addr)
        value = self._values.get(addr, 0)
        handler = self._read_handlers.get(addr)
        if handler is not None:
            value = handler(value) & U32_MASK
        return value

    def write(self, addr: int, value: int) -> None:
        """Store ``value`` (truncated to 32 bits) at ``addr``."""
        addr = _word_address(addr)
        value &= U32_MASK
        self.log.append((addr, value))
        target, stored = self._resolve(addr, value)
        self._values[target] = stored
        for handler in list(self._write_handlers.get(target, ())):
            handler(stored)

    def on_read(self, addr: int, handler: ReadHandler) -> None:
        """Make reads of ``addr`` return ``handler(stored_value)``."""
        self._read_handlers[_word_address(addr)] = handler

    def on_write(self, addr: int, handler: WriteHandler) -> None:
        """Call ``handler(new_value)`` after every write that lands on ``addr``."""
        self._write_handlers[_word_address(addr)].append(handler)

    def _resolve(self, addr: int, value: int) -> tuple[int, int]:
        alias = addr & _ALIAS_MASK
        if not (
            self.atomic_aliases
            and alias
            and _PERIPHERAL_START <= addr < _PERIPHERAL_END
        ):
            return addr, value
        base = addr & ~_ALIAS_MASK
        current = self._values.get(base, 0)
        if alias == XOR_ALIAS:
            return base, current ^ value
        if alias == SET_ALIAS:
            return base, current | value
        return base, current & ~value & U32_MASK


def xor_bits(bus: RegisterBus, addr: int, bits: int) -> None:
    """Atomically toggle ``bits`` of the register at ``addr``."""
    bus.write(addr + XOR_ALIAS, bits)


def set_bits(bus: RegisterBus, addr: int, bits: int) -> None:
    """Atomically set ``bits`` of the register at ``addr``."""
    bus.write(addr + SET_ALIAS, bits)


def clear_bits(bus: RegisterBus, addr: int, bits: int) -> None:
    """Atomically clear ``bits`` of the register at ``addr``."""
    bus.write(addr + CLEAR_ALIAS, bits)


@dataclass(frozen=True)
class _Field:
    offset: int
    count: int
    width: int


FieldSpec = str | tuple[str, int] | tuple[str, int, int]


class Layout:
    """Byte layout of a register block, following C struct placement rules.

    Each field is given as a name, ``(name, count)`` or ``(name, count, width)``
    where ``width`` is the element size in bytes (4 unless stated).
    """

    def __init__(self, base: int, fields: Iterable[FieldSpec]) -> None:
        self.base = base
        self._fields: dict[str, _Field] = {}
        offset = 0
        alignment = 1
        for spec in fields:
            name, count, width = self._normalise(spec)
            if name in self._fields:
                raise ValueError(f"duplicate field {name!r}")
            offset = -(-offset // width) * width
            self._fields[name] = _Field(offset, count, width)
            offset += count * width
            alignment = max(alignment, width)
        self._size = -(-offset // alignment) * alignment

    @staticmethod
    def _normalise(spec: FieldSpec) -> tuple[str, int, int]:
        if isinstance(spec, str):
            return spec, 1, 4
        name, count, *rest = spec
        width = rest[0] if rest else 4
        if count < 1:
            raise ValueError(f"field {name!r} must have at least one element")
        if width not in (1, 2, 4, 8):
            raise ValueError(f"field {name!r} has unsupported width {width}")
        return name, count, width

    def offset(self, name: str, index: int = 0) -> int:
        """Byte offset of element ``index`` of field ``name`` from the base."""
        try:
            field = self._fields[name]
        except KeyError:
            raise KeyError(f"no field named {name!r}") from None
        if not 0 <= index < field.count:
            raise IndexError(f"index {index} out of range for field {name!r}")
        return field.offset + index * field.width

    def address(self, name: str, index: int = 0) -> int:
        """Absolute address of element ``index`` of field ``name``."""
        return self.base + self.offset(name, index)

    def size(self) -> int:
        """Total size of the block in bytes."""
        return self._size

    def __contains__(self, name: object) -> bool:
        return name in self._fields