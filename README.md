# picoflash

Tools and a register-level model for a minimal RP2040 "blink" firmware.

The package has two parts.

**Image tools**, to prepare a firmware image for flashing:

- `picoflash.crc32`: the CRC-32 lookup table (polynomial `0x04C11DB7`,
  most significant bit first) and `crc32_be`, the checksum the RP2040 boot ROM
  uses on the second-stage bootloader: initial value all ones, no final XOR.
  `render_table_header` renders the table as a C header.
- `picoflash.elf32`: `ElfHeader` and `ProgramHeader`, with `parse` and `pack`
  for 32-bit little-endian ELF headers. Short input raises `ElfFormatError`.
- `picoflash.inject`: `locate_boot2` checks that the file is a 32-bit ELF
  whose first program header is a loadable, readable and executable segment
  of 256 bytes; `inject_crc32` then writes the CRC-32 of the segment's first
  252 bytes into its last 4 bytes, little-endian. Failed checks raise
  `Boot2ValidationError`.
- `picoflash.uf2`: `blocks_from_binary` splits a raw, 256-byte-aligned flash
  image into `Uf2Block`s placed from `0x10000000`, flagged with the RP2040
  family ID; `convert` writes them to a `.uf2` file. `Uf2Block.pack` and
  `Uf2Block.unpack` encode and decode single 512-byte blocks. Empty or
  unaligned images raise `Uf2Error`.

**A firmware model** that runs the blink program against a simulated
memory-mapped register bus, `picoflash.mmio.RegisterBus`. Each peripheral has
a module with its register layout and the operations the firmware performs:
`xosc`, `clocks`, `watchdog`, `xip`, `resets`, `core_ppb`, `io_bank0`, `sio`
and `timer`. `picoflash.blink` holds the boot sequence (`boot`), the vector
table (`vector_table`), the timer interrupt handler (`timer0_irq`) and the
main loop (`run`).

## Installation

```
pip install .
```

## Commands

Print the CRC-32 lookup table as a C header:

```
picoflash-crc32table > crc32table.h
```

Inject the boot2 checksum into a linked ELF file, in place:

```
picoflash-inject-crc32 build/blink.elf
```

Convert a raw flash binary to UF2, creating or replacing the output file:

```
picoflash-bin2uf2 build/blink.bin build/blink.uf2
```

`picoflash-inject-crc32` and `picoflash-bin2uf2` print a usage line when
arguments are missing, and a message to standard error when the input cannot
be read or is invalid; in both cases they exit with status 1.

## Library use

```python
from picoflash.crc32 import crc32_be
from picoflash.uf2 import blocks_from_binary

checksum = crc32_be(b"\x00" * 252)
with open("blink.bin", "rb") as image_file:
    blocks = blocks_from_binary(image_file.read())
image = b"".join(block.pack() for block in blocks)
```

### Running the firmware model

Unwritten registers read as zero, so the registers the firmware polls need
read handlers that stand in for the hardware. With `atomic_aliases=True`
the bus applies writes to the XOR/SET/CLEAR aliases of peripheral registers
to the base register. Every write is recorded in `bus.log`.

```python
from picoflash import blink, clocks, resets, sio, xosc
from picoflash.mmio import RegisterBus

bus = RegisterBus(atomic_aliases=True)
bus.on_read(xosc.LAYOUT.address("status"), lambda value: xosc.STATUS_READY)
bus.on_read(clocks.LAYOUT.address("clk_ref_selected"),
            lambda value: clocks.REF_SELECTED_XOSC_CLKSRC)
bus.on_read(clocks.LAYOUT.address("clk_sys_selected"),
            lambda value: clocks.SYS_SELECTED_REF_CLKSRC)
bus.on_read(resets.LAYOUT.address("reset_done"),
            lambda value: resets.Reset.IO_BANK0 | resets.Reset.TIMER)

blink.boot(bus, copy_len=64)   # clocks up, 64 words copied, vectors installed
blink.run(bus, cycles=3)       # three alarm periods, one LED toggle each

toggle = sio.LAYOUT.address("gpio_out_xor")
assert [value for addr, value in bus.log if addr == toggle] == [1 << blink.LED_PIN] * 3
```

In the model, each loop iteration advances the timer straight to the armed
alarm, raises the alarm interrupt and, when it is enabled in both the timer
and the NVIC, calls the handler from the vector table.

## What it does not do

picoflash does not compile, link or convert ELF files to raw binaries, and it
does not talk to a real device: the firmware runs only against the simulated
`RegisterBus`. The UF2 tool writes a file; copying it to the board is left to
you.

## Tests

```
pip install .[test]
pytest
```