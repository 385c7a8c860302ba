# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

""" """

from __future__ import annotations

import gzip
import logging
import typing as ty

from . import consts

if ty.TYPE_CHECKING:
    from collections import abc
    from pathlib import Path

_LOG = logging.getLogger(__name__)


def calc_checksum(data: bytes | bytearray | memoryview) -> int:
    return sum(data) & 0xFF


class RadioMemory:
    """Radio memory image: `size` bytes of data and one byte of checksum."""

    def __init__(self, size: int, data: bytes | None = None) -> None:
        self.size = size
        self.mem = bytearray(size + 1)
        if data:
            self.update_mem_region(0, data[: size + 1])

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"RadioMemory(size={self.size}, magic={self.magic!r}, "
            f"checksum={self.checksum:02x})"
        )

    @property
    def magic(self) -> bytes:
        return bytes(self.mem[: consts.MAGIC_LEN])

    @property
    def checksum(self) -> int:
        return self.mem[self.size]

    def calc_checksum(self) -> int:
        with memoryview(self.mem) as mv:
            return calc_checksum(mv[: self.size])

    def update_checksum(self) -> int:
        """Compute checksum of data and store it in the last byte."""
        self.mem[self.size] = checksum = self.calc_checksum()
        return checksum

    def validate_checksum(self) -> bool:
        return self.calc_checksum() == self.checksum

    def update_mem_region(self, addr: int, data: abc.Sequence[int]) -> None:
        if addr < 0 or addr + len(data) > len(self.mem):
            raise IndexError(f"region 0x{addr:04x}+{len(data)} out of memory")

        self.mem[addr : addr + len(data)] = bytes(data)

    def fill(self, addr: int, length: int, value: int) -> None:
        """Fill `length` bytes from `addr` with `value`."""
        _LOG.debug("fill 0x%04x+%d with %02x", addr, length, value)
        self.update_mem_region(addr, bytes([value]) * length)

    def region(self, addr: int, length: int) -> memoryview:
        """Get writable view on memory region."""
        return memoryview(self.mem)[addr : addr + length]

    def record(self, base: int, size: int, idx: int) -> memoryview:
        """Get view on `idx` record of `size` bytes starting from `base`."""
        return self.region(base + idx * size, size)

    def clone(self) -> RadioMemory:
        return RadioMemory(self.size, bytes(self.mem))


def load_raw(file: Path) -> bytes:
    """Load raw memory image; files with .gz suffix are decompressed."""
    _LOG.info("loading %s", file)
    if file.suffix == ".gz":
        with gzip.open(file, "rb") as inp:
            return inp.read()

    with file.open("rb") as inp:
        return inp.read()


def save_raw(file: Path, data: bytes | bytearray) -> None:
    """Write raw memory image; files with .gz suffix are compressed."""
    _LOG.info("write %s", file)
    if file.suffix == ".gz":
        with gzip.open(file, "wb") as out:
            out.write(data)

    else:
        with file.open("wb") as out:
            out.write(data)


def create_backup(file: Path) -> None:
    if file.is_file():
        bakfile = file.with_suffix(f"{file.suffix}.bak")
        file.replace(bakfile)


class InvalidFileError(Exception):
    def __init__(self, file: Path | str, reason: str = "") -> None:
        self.file = file
        self.reason = reason

    def __str__(self) -> str:
        if self.reason:
            return f"Invalid file {self.file}: {self.reason}"

        return f"Invalid file {self.file}"


class IncompatibleImageError(Exception):
    def __init__(self, radio: str, magic: bytes) -> None:
        self.radio = radio
        self.magic = magic

    def __str__(self) -> str:
        return (
            f"Memory image is not compatible with {self.radio} "
            f"(tag {self.magic!r})"
        )
