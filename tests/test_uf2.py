import pytest

from picoflash.uf2 import (
    BASE_ADDRESS,
    BLOCK_SIZE,
    FLAG_FAMILY_ID_PRESENT,
    MAGIC_END,
    RP2040_FAMILY_ID,
    Uf2Block,
    Uf2Error,
    blocks_from_binary,
    convert,
    main,
)

IMAGE = bytes((i * 31) & 0xFF for i in range(2 * BLOCK_SIZE))


def test_packed_block_layout():
    block = Uf2Block(target_addr=BASE_ADDRESS, block_num=0, num_blocks=1, data=bytes(256))
    packed = block.pack()
    assert len(packed) == 512
    assert packed[:4] == b"UF2\n"
    assert int.from_bytes(packed[-4:], "little") == MAGIC_END
    assert int.from_bytes(packed[28:32], "little") == RP2040_FAMILY_ID
    assert int.from_bytes(packed[8:12], "little") == FLAG_FAMILY_ID_PRESENT


def test_block_round_trip_and_padding():
    block = Uf2Block(target_addr=BASE_ADDRESS + 0x100, block_num=1, num_blocks=2, data=IMAGE[:256])
    packed = block.pack()
    assert packed[32 + 256 : 32 + 476] == bytes(476 - 256)
    assert Uf2Block.unpack(packed) == block


def test_unpack_rejects_wrong_size():
    with pytest.raises(Uf2Error):
        Uf2Block.unpack(bytes(100))


def test_unpack_rejects_bad_magic():
    packed = bytearray(Uf2Block(target_addr=0, block_num=0, num_blocks=1, data=b"x").pack())
    packed[-1] ^= 0xFF
    with pytest.raises(Uf2Error):
        Uf2Block.unpack(bytes(packed))


def test_block_rejects_oversized_payload():
    with pytest.raises(Uf2Error):
        Uf2Block(target_addr=0, block_num=0, num_blocks=1, data=bytes(477))


def test_blocks_from_binary_places_consecutive_blocks():
    blocks = blocks_from_binary(IMAGE)
    assert [b.target_addr for b in blocks] == [BASE_ADDRESS, BASE_ADDRESS + BLOCK_SIZE]
    assert [b.block_num for b in blocks] == [0, 1]
    assert all(b.num_blocks == 2 for b in blocks)
    assert b"".join(b.data for b in blocks) == IMAGE


@pytest.mark.parametrize("data, message", [(b"", "Invalid file size"), (bytes(300), "aligned")])
def test_blocks_from_binary_rejects(data, message):
    with pytest.raises(Uf2Error, match=message):
        blocks_from_binary(data)


def test_convert_writes_blocks(tmp_path):
    src = tmp_path / "image.bin"
    dest = tmp_path / "image.uf2"
    src.write_bytes(IMAGE)
    blocks = convert(src, dest)
    written = dest.read_bytes()
    assert len(written) == len(blocks) * Uf2Block.SIZE
    decoded = [Uf2Block.unpack(written[i : i + 512]) for i in range(0, len(written), 512)]
    assert decoded == blocks


def test_convert_replaces_existing_file(tmp_path):
    src = tmp_path / "image.bin"
    dest = tmp_path / "image.uf2"
    src.write_bytes(IMAGE[:BLOCK_SIZE])
    dest.write_bytes(bytes(5000))
    convert(src, dest)
    assert len(dest.read_bytes()) == 512


def test_main_without_arguments_fails(capsys):
    assert main(["only-one"]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_success(tmp_path, capsys):
    src = tmp_path / "image.bin"
    dest = tmp_path / "image.uf2"
    src.write_bytes(IMAGE)
    assert main([str(src), str(dest)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == f"512 bytes read from {src}"
    assert out[1] == "Placed uf2 block 1 @<0x10000000>."
    assert out[2] == "Placed uf2 block 2 @<0x10000100>."
    assert out[-1] == "Produced 2 uf2 blocks."
    assert dest.exists()


def test_main_rejects_unaligned(tmp_path, capsys):
    src = tmp_path / "image.bin"
    src.write_bytes(bytes(10))
    assert main([str(src), str(tmp_path / "out.uf2")]) == 1
    assert "Not 256 byte aligned!" in capsys.readouterr().err


def test_main_reports_missing_source(tmp_path):
    assert main([str(tmp_path / "missing.bin"), str(tmp_path / "out.uf2")]) == 1