# Copyright © 2024 Karol Będkowski <Karol Będkowski@kkomp>
#
# Distributed under terms of the GPLv3 license.

"""Frequency conversion between Hz and text in MHz."""

import typing as ty

MAX_FLOAT_FREQ: ty.Final = 1400.0


def parse_freq(o: object) -> int:
    """Parse frequency in MHz (as text or number) into Hz."""
    val = 0.0

    if isinstance(o, int):
        val = o

    elif isinstance(o, str):
        val = float(o.strip().replace(",", "."))

    elif isinstance(o, float):
        val = o

    else:
        val = float(o)  # type: ignore

    return round(val * 1_000_000)


def format_freq(freq: int, decimals: int = 4) -> str:
    """Format `freq` in Hz as MHz with `decimals` digits after the point.

    Digits are truncated, not rounded, so the text never points to another
    channel raster step.
    """
    sign = "-" if freq < 0 else ""
    freq = abs(freq)
    mhz, rest = divmod(freq, 1_000_000)
    if not decimals:
        return f"{sign}{mhz}"

    frac = rest // (10 ** (6 - decimals))
    return f"{sign}{mhz}.{frac:0{decimals}d}"
