# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.
# ruff: noqa: PLR2004
"""
Support function for model objects.
"""

from __future__ import annotations

import typing as ty
from collections import abc

DEBUG = False

MutableMemory = abc.MutableSequence[int] | memoryview
Memory = abc.Sequence[int] | memoryview


def is_valid_index(inlist: ty.Collection[object], idx: int, name: str) -> None:
    if idx < 0 or idx >= len(inlist):
        raise ValidateError(name, idx)


def try_get(inlist: ty.Sequence[str], idx: int) -> str:
    try:
        return inlist[idx]
    except IndexError:
        return f"<[{idx}]>"


def find_index(inlist: ty.Sequence[str], value: str, name: str) -> int:
    """Find `value` in `inlist` ignoring case; raise ValidateError when
    not found."""
    val = value.lower()
    for idx, item in enumerate(inlist):
        if item.lower() == val:
            return idx

    raise ValidateError(name, value)


def get_bits(data: Memory, offset: int, shift: int, width: int) -> int:
    """Get `width` bits starting from bit `shift` of byte `data[offset]`."""
    return (data[offset] >> shift) & ((1 << width) - 1)


def set_bits(
    data: MutableMemory, offset: int, shift: int, width: int, value: int
) -> None:
    """Set `width` bits starting from bit `shift` of byte `data[offset]`."""
    mask = ((1 << width) - 1) << shift
    data_set(data, offset, mask, value << shift)


def data_set_bit(
    data: MutableMemory,
    offset: int,
    bit: int,
    value: object,
) -> None:
    """Set one `bit` in byte `data[offset]` to `value`."""
    if value:
        data[offset] = data[offset] | (1 << bit)
    else:
        data[offset] = data[offset] & (~(1 << bit)) & 0xFF


def data_set(
    data: MutableMemory,
    offset: int,
    mask: int,
    value: int,
) -> None:
    """Set bits indicated by `mask` in byte `data[offset]` to `value`."""
    data[offset] = ((data[offset] & (~mask)) | (value & mask)) & 0xFF


def get_u16be(data: Memory, offset: int) -> int:
    return (data[offset] << 8) | data[offset + 1]


def set_u16be(data: MutableMemory, offset: int, value: int) -> None:
    data[offset] = (value >> 8) & 0xFF
    data[offset + 1] = value & 0xFF


class ValidateError(ValueError):
    def __init__(self, field_name: str, value: object) -> None:
        self.field = field_name
        self.value = value

    def __str__(self) -> str:
        return f"invalid value in {self.field}: {self.value!r}"
