# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""
Supported radios and operations common for all of them.
"""

from __future__ import annotations

import logging
import typing as ty

from . import ft60, radio_memory, vx2
from .radio_memory import IncompatibleImageError, InvalidFileError

if ty.TYPE_CHECKING:
    from pathlib import Path

    from . import clone_io
    from .radio_memory import RadioMemory

_LOG = logging.getLogger(__name__)

__all__ = [
    "DEVICES",
    "IncompatibleImageError",
    "InvalidFileError",
    "RadioDevice",
    "UnknownRadioError",
    "detect_device",
    "find_device",
    "load_image",
]


class RadioDevice(ty.Protocol):
    """Operations provided by every supported radio model."""

    name: str
    aliases: tuple[str, ...]
    baudrate: int
    mem_size: int
    magic: bytes

    def download(
        self,
        link: clone_io.Serial,
        operator: clone_io.Operator,
        cb: clone_io.ProgressCallback | None = None,
    ) -> RadioMemory: ...

    def upload(
        self,
        link: clone_io.Serial,
        mem: RadioMemory,
        operator: clone_io.Operator,
        cb: clone_io.ProgressCallback | None = None,
        *,
        cont: bool = False,
    ) -> None: ...

    def is_compatible(self, mem: RadioMemory) -> bool: ...

    def load_image(self, file: Path) -> RadioMemory: ...

    def save_image(self, file: Path, mem: RadioMemory) -> None: ...

    def print_version(self, out: ty.TextIO, mem: RadioMemory) -> None: ...

    def print_config(
        self, out: ty.TextIO, mem: RadioMemory, *, verbose: bool = False
    ) -> None: ...

    def parse_parameter(
        self, mem: RadioMemory, name: str, value: str
    ) -> None: ...

    def parse_header(self, line: str) -> str | None: ...

    def parse_row(
        self, mem: RadioMemory, table: str, first_row: bool, line: str
    ) -> None: ...


DEVICES: ty.Final[tuple[RadioDevice, ...]] = (ft60.RADIO, vx2.RADIO)


class UnknownRadioError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name

    def __str__(self) -> str:
        names = ", ".join(dev.name for dev in DEVICES)
        return f"Unknown radio: {self.name}; supported: {names}"


def find_device(name: str) -> RadioDevice:
    """Find radio by name or alias, ignoring case."""
    key = name.strip().lower()
    for dev in DEVICES:
        if key == dev.name.lower() or key in dev.aliases:
            return dev

    raise UnknownRadioError(name)


def detect_device(mem: RadioMemory) -> RadioDevice | None:
    """Find radio compatible with memory image."""
    for dev in DEVICES:
        if dev.mem_size == mem.size and dev.is_compatible(mem):
            return dev

    return None


def load_image(
    file: Path, dev: RadioDevice | None = None
) -> tuple[RadioDevice, RadioMemory]:
    """Load image from `file`; radio is detected by tag if not given."""
    if dev is None:
        magic = radio_memory.load_raw(file)[: len(ft60.MAGIC)]
        for candidate in DEVICES:
            if candidate.magic == magic:
                dev = candidate
                break
        else:
            raise InvalidFileError(file, f"unknown radio tag {magic!r}")

    _LOG.debug("loading %s as %s", file, dev.name)
    return dev, dev.load_image(file)
