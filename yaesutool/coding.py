# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""Field codec shared by radio models.

Encoding and decoding frequencies, squelch settings, names and channel
lists. Functions never touch radio memory directly; they operate on
byte sequences and plain values.
"""

from __future__ import annotations

import logging
import math
import typing as ty

from . import consts

if ty.TYPE_CHECKING:
    from collections import abc

_LOG = logging.getLogger(__name__)


def decode_freq10k(bcd: abc.Sequence[int]) -> int:
    """Decode 3-bytes frequency in 10kHz BCD with 2.5kHz multiplier.

          76543210
       0  mm..hhhh   m - 2500Hz multiplier, h - 100MHz
       1  ddddeeee   d - 10MHz, e - 1MHz
       2  ffffgggg   f - 100kHz, g - 10kHz
    """
    hz = (
        (bcd[0] & 0x0F) * 100_000_000
        + (bcd[1] >> 4) * 10_000_000
        + (bcd[1] & 0x0F) * 1_000_000
        + (bcd[2] >> 4) * 100_000
        + (bcd[2] & 0x0F) * 10_000
    )
    return hz + (bcd[0] >> 6) * 2500


def encode_freq10k(hz: int) -> bytes:
    """Encode frequency for `decode_freq10k`.

    Negative values are stored as 0; digits above 100MHz wrap.
    """
    hz = max(hz, 0)
    return bytes(
        (
            ((hz // 2500) % 4) << 6 | (hz // 100_000_000) % 10,
            ((hz // 10_000_000) % 10) << 4 | (hz // 1_000_000) % 10,
            ((hz // 100_000) % 10) << 4 | (hz // 10_000) % 10,
        )
    )


def decode_freq1k(bcd: abc.Sequence[int]) -> int:
    """Decode 6 BCD digits of frequency in kHz.

    Last digit 2 or 7 mean additional 500Hz (12.5kHz raster).
    """
    digits = (
        bcd[0] >> 4,
        bcd[0] & 0x0F,
        bcd[1] >> 4,
        bcd[1] & 0x0F,
        bcd[2] >> 4,
        bcd[2] & 0x0F,
    )
    khz = 0
    for digit in digits:
        khz = khz * 10 + digit

    hz = khz * 1000
    if digits[5] in (2, 7):
        hz += 500

    return hz


def encode_freq1k(hz: int) -> bytes:
    """Encode frequency for `decode_freq1k`; 0 is stored as ff ff ff."""
    if hz <= 0:
        return b"\xff\xff\xff"

    d = [(hz // 10**exp) % 10 for exp in range(8, 2, -1)]
    return bytes((d[0] << 4 | d[1], d[2] << 4 | d[3], d[4] << 4 | d[5]))


class SquelchSpec(ty.NamedTuple):
    """One direction squelch; ctcs in 0.1Hz (negative = reversed),
    dcs as code number. Both zero = squelch disabled."""

    ctcs: int = 0
    dcs: int = 0

    @property
    def disabled(self) -> bool:
        return not self.ctcs and not self.dcs


class Squelch(ty.NamedTuple):
    rx_ctcs: int = 0
    tx_ctcs: int = 0
    rx_dcs: int = 0
    tx_dcs: int = 0

    @property
    def rx(self) -> SquelchSpec:
        return SquelchSpec(self.rx_ctcs, self.rx_dcs)

    @property
    def tx(self) -> SquelchSpec:
        return SquelchSpec(self.tx_ctcs, self.tx_dcs)


class EncodedSquelch(ty.NamedTuple):
    tmode: int
    tone: int = consts.TONE_DEFAULT
    dcs: int = 0


class InvalidSquelchError(ValueError):
    def __init__(self, value: object, reason: str = "") -> None:
        self.value = value
        self.reason = reason

    def __str__(self) -> str:
        if self.reason:
            return f"bad squelch {self.value!r}: {self.reason}"

        return f"bad squelch {self.value!r}"


def tone_index(ctcs: int) -> int:
    """Find index of tone `ctcs` (in 0.1 Hz) in CTCSS table."""
    try:
        return consts.CTCSS_TONES.index(ctcs)
    except ValueError:
        raise InvalidSquelchError(ctcs / 10, "unknown CTCSS tone") from None


def dcs_index(dcs: int) -> int:
    try:
        return consts.DCS_CODES.index(dcs)
    except ValueError:
        raise InvalidSquelchError(dcs, "unknown DCS code") from None


def tone_value(idx: int) -> int:
    """Get tone for index; invalid index is decoded as disabled tone."""
    if 0 <= idx < len(consts.CTCSS_TONES):
        return consts.CTCSS_TONES[idx]

    _LOG.warning("invalid CTCSS tone index: %d", idx)
    return 0


def dcs_value(idx: int) -> int:
    if 0 <= idx < len(consts.DCS_CODES):
        return consts.DCS_CODES[idx]

    _LOG.warning("invalid DCS code index: %d", idx)
    return 0


def parse_squelch(text: str) -> SquelchSpec:
    """Parse squelch given as tone in Hz ("88.5", "-88.5" for reversed),
    DCS code ("D023") or "-" for disabled."""
    text = text.strip()
    if text == "-":
        return SquelchSpec()

    if not text:
        raise InvalidSquelchError(text)

    if text[0] in "Dd":
        try:
            code = int(text[1:])
        except ValueError:
            raise InvalidSquelchError(text) from None

        dcs_index(code)
        return SquelchSpec(dcs=code)

    try:
        hz = float(text)
    except ValueError:
        raise InvalidSquelchError(text) from None

    if not math.isfinite(hz):
        raise InvalidSquelchError(text)

    val = int(abs(hz) * 10 + 0.5)
    if val < consts.CTCSS_MIN:
        raise InvalidSquelchError(text, "tone too low")

    tone_index(val)
    return SquelchSpec(ctcs=-val if hz < 0 else val)


def format_squelch(spec: SquelchSpec) -> str:
    """Format squelch as 5-chars column."""
    if spec.ctcs:
        return f"{spec.ctcs / 10:5.1f}"

    if spec.dcs > 0:
        return f"D{spec.dcs:03d}"

    return "   - "


def decode_name(
    data: abc.Sequence[int], charset: str, mask: int = 0xFF
) -> str:
    """Decode name from indexes into `charset`.

    Unknown codes are decoded as space; spaces are presented as "_"
    and trailing ones are stripped.
    """
    chars = []
    for code in data[: consts.NAME_LEN]:
        c = code & mask
        chars.append(charset[c] if c < len(charset) else " ")

    return "".join(chars).replace(" ", "_").rstrip("_")


def encode_name(name: str, charset: str, filler: int) -> list[int]:
    """Encode name to list of `charset` indexes.

    "_" is encoded as space, letters are converted to upper case, unknown
    characters are replaced by `filler`. Result is padded with spaces.
    """
    space = charset.index(" ")
    res = []
    for c in name[: consts.NAME_LEN]:
        if c == "_":
            c = " "  # noqa: PLW2901
        elif "a" <= c <= "z":
            c = c.upper()  # noqa: PLW2901

        idx = charset.find(c)
        res.append(filler if idx < 0 else idx)

    res.extend([space] * (consts.NAME_LEN - len(res)))
    return res


def parse_channel_list(text: str, max_num: int) -> list[int]:
    """Parse list of channels like "1,3-5,9" into [1, 3, 4, 5, 9].

    "-" means empty list. Ranges are inclusive. Channels are numbered
    from 1 to `max_num`.
    """
    text = text.strip()
    if text == "-":
        return []

    res: list[int] = []
    for part in text.split(","):
        first, sep, last = part.partition("-")
        try:
            start = int(first)
            end = int(last) if sep else start
        except ValueError:
            raise ValueError(f"wrong channel list {part!r}") from None

        for num in (start, end):
            if num < 1 or num > max_num:
                raise ValueError(f"wrong channel number {num}")

        if end < start:
            raise ValueError(f"wrong channel range {part!r}")

        res.extend(range(start, end + 1))

    return res


def format_channel_list(channels: ty.Iterable[int]) -> str:
    """Format channels numbers as list; consecutive numbers are joined
    into ranges."""
    parts: list[str] = []
    start = prev = -1
    for num in channels:
        if start >= 0 and num == prev + 1:
            prev = num
            continue

        if start >= 0:
            parts.append(_format_range(start, prev))

        start = prev = num

    if start >= 0:
        parts.append(_format_range(start, prev))

    return ",".join(parts) or "-"


def _format_range(start: int, end: int) -> str:
    return str(start) if start == end else f"{start}-{end}"
