# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# pylint: disable=protected-access,unspecified-encoding,consider-using-with
# mypy: allow-untyped-defs, allow-untyped-calls
# ruff: noqa: SLF001,PLR2004

""" """

import gzip

import pytest

from . import radio_memory as rm


def test_checksum():
    mem = rm.RadioMemory(4, b"\x01\x02\xff\x10\x00")
    assert mem.calc_checksum() == 0x12
    assert not mem.validate_checksum()

    assert mem.update_checksum() == 0x12
    assert mem.checksum == 0x12
    assert mem.mem[4] == 0x12
    assert mem.validate_checksum()


def test_magic():
    mem = rm.RadioMemory(16, b"AH017$\x00\x01")
    assert mem.magic == b"AH017$"
    assert len(mem) == 16
    assert len(mem.mem) == 17


def test_update_mem_region():
    mem = rm.RadioMemory(8)
    mem.update_mem_region(2, b"\x01\x02")
    assert mem.mem[:4] == b"\x00\x00\x01\x02"

    # checksum byte is writable
    mem.update_mem_region(8, b"\x05")
    assert mem.checksum == 5

    with pytest.raises(IndexError):
        mem.update_mem_region(8, b"\x01\x02")


def test_record():
    mem = rm.RadioMemory(32)
    rec = mem.record(4, 6, 2)
    rec[0] = 0xAA
    rec[5] = 0xBB
    assert mem.mem[16] == 0xAA
    assert mem.mem[21] == 0xBB
    assert len(rec) == 6


def test_fill():
    mem = rm.RadioMemory(8)
    mem.fill(1, 3, 0xFF)
    assert mem.mem == bytearray(b"\x00\xff\xff\xff\x00\x00\x00\x00\x00")


def test_clone():
    mem = rm.RadioMemory(4, b"\x01\x02\x03\x04\x0a")
    cloned = mem.clone()
    cloned.mem[0] = 9
    assert mem.mem[0] == 1
    assert cloned.checksum == 0x0A


def test_save_load_raw(tmp_path):
    data = bytes(range(32))
    file = tmp_path / "image.img"
    rm.save_raw(file, data)
    assert file.read_bytes() == data
    assert rm.load_raw(file) == data


def test_save_load_raw_gzip(tmp_path):
    data = bytes(range(32))
    file = tmp_path / "image.img.gz"
    rm.save_raw(file, data)
    with gzip.open(file, "rb") as inp:
        assert inp.read() == data

    assert rm.load_raw(file) == data


def test_create_backup(tmp_path):
    file = tmp_path / "image.img"
    rm.create_backup(file)
    assert not list(tmp_path.iterdir())

    file.write_bytes(b"old")
    rm.create_backup(file)
    assert not file.exists()
    assert (tmp_path / "image.img.bak").read_bytes() == b"old"


def test_errors_str():
    assert str(rm.InvalidFileError("a.img")) == "Invalid file a.img"
    assert (
        str(rm.InvalidFileError("a.img", "too short"))
        == "Invalid file a.img: too short"
    )
    assert (
        str(rm.IncompatibleImageError("Yaesu FT-60R", b"AH015$"))
        == "Memory image is not compatible with Yaesu FT-60R (tag b'AH015$')"
    )
